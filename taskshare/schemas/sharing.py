from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..models.base import MAX_ID


class ShareCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: Optional[int] = Field(default=None, alias="taskId", ge=1, le=MAX_ID)
    target_user_email: Optional[str] = Field(default=None, alias="targetUserEmail")


class ShareDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: Optional[int] = Field(default=None, alias="taskId", ge=1, le=MAX_ID)
    target_user_id: Optional[int] = Field(default=None, alias="targetUserId", ge=1, le=MAX_ID)
