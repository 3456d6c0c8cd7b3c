from pydantic import BaseModel
from typing import Optional


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserCreate(Credentials):
    nome: Optional[str] = None
