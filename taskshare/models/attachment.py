from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional

from .base import NAIVE_DATETIME, utcnow


class Attachment(SQLModel, table=True):
    """File uploaded against a task; ``url`` is relative to the upload mount."""
    __tablename__ = "attachments"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", index=True, ondelete="CASCADE")
    file_name: str
    url: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=NAIVE_DATETIME)

    task: Optional["Task"] = Relationship(back_populates="attachments")
