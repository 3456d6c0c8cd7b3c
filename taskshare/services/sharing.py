import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ..formatting import received_task_payload, share_payload, sharer_payload
from ..models import SharedTask, Task, User
from ..result import Err, ErrorKind, Ok, Result, invalid_input, not_found, store_errors
from .access import authorize_share_creation, authorize_task_access

logger = logging.getLogger(__name__)

DUPLICATE_SHARE = "This task is already shared with this user"


@store_errors("sharing task")
def share_task(
    db: Session, creator_id: int, task_id: Optional[int], target_email: Optional[str]
) -> Result[Dict[str, Any]]:
    """Grant ``target_email`` read access to one of the creator's tasks."""
    if not task_id or not target_email:
        return invalid_input("Task id and target user email are required")

    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found
    task = found.value

    target = db.exec(select(User).where(User.email == target_email.strip())).first()
    if target is None:
        return not_found("Target user not found")

    allowed = authorize_share_creation(db, creator_id, task, target)
    if not allowed.ok:
        return allowed

    share = SharedTask(task_id=task.id, user_id=target.id)
    db.add(share)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request created the same grant first
        db.rollback()
        return Err(ErrorKind.CONFLICT, DUPLICATE_SHARE)
    db.refresh(share)

    logger.info("User %s shared task %s with user %s", creator_id, task.id, target.id)
    shared = share_payload(share)
    shared["task"] = {"title": task.title}
    shared["user"] = sharer_payload(target)
    return Ok({
        "message": f"Task '{task.title}' shared with {target.nome or target.email}.",
        "sharedTask": shared,
    })


@store_errors("listing received shares")
def list_received(db: Session, user_id: int) -> Result[List[Dict[str, Any]]]:
    shares = db.exec(
        select(SharedTask)
        .join(Task, SharedTask.task_id == Task.id)
        .where(SharedTask.user_id == user_id)
        .order_by(col(Task.created_at).desc(), col(Task.id).desc())
    ).all()
    return Ok([received_task_payload(share.task) for share in shares])


@store_errors("removing share")
def unshare_task(
    db: Session, creator_id: int, task_id: Optional[int], target_user_id: Optional[int]
) -> Result[Dict[str, Any]]:
    if not task_id or not target_user_id:
        return invalid_input("Task id and target user id are required")

    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found
    task = found.value

    share = db.exec(
        select(SharedTask).where(
            SharedTask.task_id == task_id, SharedTask.user_id == target_user_id
        )
    ).first()
    if share is None:
        return not_found("Share not found")

    payload = share_payload(share)
    db.delete(share)
    db.commit()

    logger.info("User %s removed share of task %s with user %s", creator_id, task_id, target_user_id)
    return Ok({
        "message": f"Share of task '{task.title}' with user {target_user_id} removed.",
        "deletedShare": payload,
    })
