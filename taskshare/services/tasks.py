import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, col, select

from ..formatting import parse_datetime, task_payload
from ..models import DEFAULT_PRIORITY, Task
from ..models.base import utcnow
from ..result import Ok, Result, invalid_input, store_errors
from ..storage import FileStorage
from .access import authorize_category_access, authorize_task_access

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "due_date", "priority", "category_id")


def _parse_due_date(value: Optional[str]) -> Result[Any]:
    try:
        return Ok(parse_datetime(value))
    except ValueError:
        return invalid_input(f"Invalid due date: {value!r}")


@store_errors("creating task")
def create_task(
    db: Session,
    creator_id: int,
    title: Optional[str],
    description: Optional[str] = None,
    due_date: Optional[str] = None,
    priority: Optional[str] = None,
    category_id: Optional[int] = None,
) -> Result[Dict[str, Any]]:
    if not title or not title.strip():
        return invalid_input("Task title is required")

    parsed = _parse_due_date(due_date)
    if not parsed.ok:
        return parsed

    if category_id is not None:
        category = authorize_category_access(db, creator_id, category_id)
        if not category.ok:
            return category

    task = Task(
        title=title.strip(),
        description=description,
        due_date=parsed.value,
        priority=priority or DEFAULT_PRIORITY,
        creator_id=creator_id,
        category_id=category_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return Ok(task_payload(task))


@store_errors("listing tasks")
def list_tasks(db: Session, creator_id: int) -> Result[List[Dict[str, Any]]]:
    tasks = db.exec(
        select(Task)
        .where(Task.creator_id == creator_id)
        .order_by(col(Task.created_at).desc(), col(Task.id).desc())
    ).all()
    return Ok([task_payload(task, include_relations=True) for task in tasks])


@store_errors("fetching task")
def get_task(db: Session, creator_id: int, task_id: int) -> Result[Dict[str, Any]]:
    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found
    return Ok(task_payload(found.value, include_relations=True))


@store_errors("updating task")
def update_task(
    db: Session, creator_id: int, task_id: int, changes: Dict[str, Any]
) -> Result[Dict[str, Any]]:
    """Apply the provided fields over the stored task.

    ``changes`` only holds the keys the client sent. A non-empty ``due_date``
    is re-parsed; None or an empty string keeps the stored date.
    """
    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found
    task = found.value

    changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}

    if "title" in changes:
        title = changes["title"]
        if not title or not title.strip():
            return invalid_input("Task title cannot be empty")
        changes["title"] = title.strip()

    if "priority" in changes and not changes["priority"]:
        changes["priority"] = DEFAULT_PRIORITY

    if "due_date" in changes:
        parsed = _parse_due_date(changes["due_date"])
        if not parsed.ok:
            return parsed
        if parsed.value is None:
            del changes["due_date"]
        else:
            changes["due_date"] = parsed.value

    if changes.get("category_id") is not None:
        category = authorize_category_access(db, creator_id, changes["category_id"])
        if not category.ok:
            return category

    for field, value in changes.items():
        setattr(task, field, value)
    task.updated_at = utcnow()

    db.add(task)
    db.commit()
    db.refresh(task)
    return Ok(task_payload(task))


@store_errors("deleting task")
def delete_task(
    db: Session, storage: FileStorage, creator_id: int, task_id: int
) -> Result[Dict[str, Any]]:
    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found
    task = found.value

    payload = task_payload(task)
    stored_urls = [attachment.url for attachment in task.attachments]

    # attachments and share grants are removed with the task
    db.delete(task)
    db.commit()

    for url in stored_urls:
        storage.remove(url)

    logger.info("User %s deleted task %s (%d attachments)", creator_id, task_id, len(stored_urls))
    return Ok(payload)
