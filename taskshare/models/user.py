from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional, List

from .base import NAIVE_DATETIME, utcnow


class User(SQLModel, table=True):
    """Account that owns tasks and categories and can receive shares."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    nome: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME)

    tasks: List["Task"] = Relationship(back_populates="creator")
    categories: List["Category"] = Relationship(back_populates="user")
    received_shares: List["SharedTask"] = Relationship(back_populates="user")
