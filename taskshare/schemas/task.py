from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..models.base import MAX_ID


class TaskBase(BaseModel):
    """Fields a client may send for a task, in the API's camelCase."""
    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = None
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    priority: Optional[str] = None
    category_id: Optional[int] = Field(default=None, alias="categoryId", ge=1, le=MAX_ID)


class TaskCreate(TaskBase):
    """Schema for creating new tasks."""
    title: Optional[str] = None


class TaskUpdate(TaskBase):
    """Schema for updating existing tasks; only sent fields are applied."""
    title: Optional[str] = None
