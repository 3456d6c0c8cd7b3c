import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from ..formatting import attachment_payload
from ..models import Attachment
from ..models.base import MAX_ID
from ..result import Ok, Result, invalid_input, store_errors
from ..storage import FileStorage, StoredFile
from .access import authorize_attachment_access, authorize_task_access

logger = logging.getLogger(__name__)


def _parse_task_id(raw: Union[str, int, None]) -> Optional[int]:
    try:
        value = raw if isinstance(raw, int) else int(str(raw).strip())
    except ValueError:
        return None
    if not 1 <= value <= MAX_ID:
        return None
    return value


@store_errors("attaching file")
def create_attachment(
    db: Session,
    storage: FileStorage,
    creator_id: int,
    task_id: Union[str, int, None],
    stored: Optional[StoredFile],
) -> Result[Dict[str, Any]]:
    """Record an already stored upload against one of the creator's tasks.

    Whatever goes wrong, the stored file is removed so no upload outlives a
    failed request.
    """
    if stored is None or task_id is None or task_id == "":
        if stored is not None:
            storage.remove(stored)
        return invalid_input("A file and a task id are required")

    parsed_id = _parse_task_id(task_id)
    if parsed_id is None:
        storage.remove(stored)
        return invalid_input("Invalid task id")

    found = authorize_task_access(db, creator_id, parsed_id)
    if not found.ok:
        storage.remove(stored)
        return found

    attachment = Attachment(task_id=parsed_id, file_name=stored.original_name, url=stored.url)
    try:
        db.add(attachment)
        db.commit()
        db.refresh(attachment)
    except SQLAlchemyError:
        storage.remove(stored)
        raise

    logger.info("Attached %s to task %s", stored.filename, parsed_id)
    return Ok(attachment_payload(attachment))


@store_errors("listing attachments")
def list_attachments(db: Session, creator_id: int, task_id: int) -> Result[List[Dict[str, Any]]]:
    found = authorize_task_access(db, creator_id, task_id)
    if not found.ok:
        return found

    attachments = db.exec(
        select(Attachment)
        .where(Attachment.task_id == task_id)
        .order_by(col(Attachment.id).asc())
    ).all()
    return Ok([attachment_payload(a) for a in attachments])


@store_errors("deleting attachment")
def delete_attachment(
    db: Session, storage: FileStorage, user_id: int, attachment_id: int
) -> Result[Dict[str, Any]]:
    found = authorize_attachment_access(db, user_id, attachment_id)
    if not found.ok:
        return found
    attachment = found.value

    payload = attachment_payload(attachment)
    storage.remove(attachment.url)

    db.delete(attachment)
    db.commit()
    return Ok(payload)
