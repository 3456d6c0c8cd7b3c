from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")

    user: Optional["User"] = Relationship(back_populates="categories")
    # No delete cascade: removing a category nulls category_id on its tasks.
    tasks: List["Task"] = Relationship(back_populates="category")
