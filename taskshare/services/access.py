"""Ownership checks shared by every service.

A record the caller does not own is reported exactly like a record that does
not exist, so callers cannot probe for other users' ids. Tasks shared with a
user are only readable through the received-shares listing, never here.
"""
from typing import Optional

from sqlmodel import Session, select

from ..models import Attachment, Category, SharedTask, Task, User
from ..result import Err, ErrorKind, Ok, Result, not_found

TASK_NOT_FOUND = "Task not found"
ATTACHMENT_NOT_FOUND = "Attachment not found"
CATEGORY_NOT_FOUND = "Category not found"


def authorize_task_access(db: Session, user_id: int, task_id: Optional[int]) -> Result[Task]:
    if task_id is None:
        return not_found(TASK_NOT_FOUND)
    task = db.exec(
        select(Task).where(Task.id == task_id, Task.creator_id == user_id)
    ).first()
    if task is None:
        return not_found(TASK_NOT_FOUND)
    return Ok(task)


def authorize_attachment_access(db: Session, user_id: int, attachment_id: int) -> Result[Attachment]:
    row = db.exec(
        select(Attachment, Task.creator_id)
        .join(Task, Attachment.task_id == Task.id)
        .where(Attachment.id == attachment_id)
    ).first()
    if row is None:
        return not_found(ATTACHMENT_NOT_FOUND)
    attachment, creator_id = row
    if creator_id != user_id:
        return not_found(ATTACHMENT_NOT_FOUND)
    return Ok(attachment)


def authorize_category_access(db: Session, user_id: int, category_id: Optional[int]) -> Result[Category]:
    if category_id is None:
        return not_found(CATEGORY_NOT_FOUND)
    category = db.exec(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    ).first()
    if category is None:
        return not_found(CATEGORY_NOT_FOUND)
    return Ok(category)


def authorize_share_creation(db: Session, creator_id: int, task: Task, target_user: User) -> Result[None]:
    if target_user.id == creator_id:
        return Err(ErrorKind.INVALID_OPERATION, "You cannot share a task with yourself")
    existing = db.exec(
        select(SharedTask.id).where(
            SharedTask.task_id == task.id, SharedTask.user_id == target_user.id
        )
    ).first()
    if existing is not None:
        return Err(ErrorKind.CONFLICT, "This task is already shared with this user")
    return Ok(None)
