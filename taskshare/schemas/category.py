from pydantic import BaseModel
from typing import Optional


class CategoryIn(BaseModel):
    """Body for creating or renaming a category."""
    name: Optional[str] = None
