from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional

from .base import NAIVE_DATETIME, utcnow


class SharedTask(SQLModel, table=True):
    """Read grant on a task for a user other than its creator."""
    __tablename__ = "shared_tasks"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_shared_task_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True, ondelete="CASCADE")
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    shared_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME)

    task: Optional["Task"] = Relationship(back_populates="shared_with")
    user: Optional["User"] = Relationship(back_populates="received_shares")
