from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional, List

from .base import NAIVE_DATETIME, utcnow

DEFAULT_PRIORITY = "Normal"


class Task(SQLModel, table=True):
    """Task owned by its creator, optionally filed under one of their categories."""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = Field(default=None, sa_type=NAIVE_DATETIME)
    priority: str = Field(default=DEFAULT_PRIORITY)
    created_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME)
    creator_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    category_id: Optional[int] = Field(
        default=None, foreign_key="categories.id", ondelete="SET NULL"
    )

    creator: Optional["User"] = Relationship(back_populates="tasks")
    category: Optional["Category"] = Relationship(back_populates="tasks")
    attachments: List["Attachment"] = Relationship(back_populates="task", cascade_delete=True)
    shared_with: List["SharedTask"] = Relationship(back_populates="task", cascade_delete=True)
