"""Date handling and JSON payload builders shared by the services.

Timestamps are stored as naive UTC. They are shown to clients as
``DD-MM-YYYY HH:mm`` in the server's local time and accepted either in that
form (optionally with seconds), as ISO-8601, as an RFC 2822 date, or in a
few common written forms such as ``2026/03/05`` and ``March 5, 2026``.
"""
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

from .models import Attachment, Category, SharedTask, Task, User

DISPLAY_FORMAT = "%d-%m-%Y %H:%M"

_DISPLAY_PATTERN = re.compile(
    r"^(\d{2})-(\d{2})-(\d{4})\s+(\d{2}):(\d{2})(?::(\d{2}))?$"
)

# tried in order after ISO-8601 and RFC 2822; day-first slashes are not
# accepted so 05/03 is never read both ways
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%B %d, %Y",
    "%B %d, %Y %H:%M",
    "%b %d, %Y",
    "%b %d, %Y %H:%M",
    "%d %B %Y",
    "%d %B %Y %H:%M",
)


def _to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone()


def _to_stored(value: datetime) -> datetime:
    # naive input means local wall-clock time
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return _to_local(value).strftime(DISPLAY_FORMAT)


def parse_datetime(text: Optional[str]) -> Optional[datetime]:
    """Parse a client supplied date string into a stored (naive UTC) datetime.

    Naive results are read as local time. Raises ValueError when no accepted
    form matches.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None

    match = _DISPLAY_PATTERN.match(text)
    if match:
        day, month, year, hour, minute, second = match.groups()
        local = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second) if second else 0,
        )
        return _to_stored(local)

    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_stored(datetime.fromisoformat(iso))
    except ValueError:
        pass

    try:
        rfc = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        rfc = None
    if rfc is not None:
        return _to_stored(rfc)

    for fmt in _FALLBACK_FORMATS:
        try:
            return _to_stored(datetime.strptime(text, fmt))
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {text!r}")


def user_payload(user: User) -> Dict[str, Any]:
    return {"id": user.id, "email": user.email, "nome": user.nome}


def sharer_payload(user: User) -> Dict[str, Any]:
    return {"nome": user.nome, "email": user.email}


def category_payload(category: Category, include_tasks: bool = False) -> Dict[str, Any]:
    payload = {
        "id": category.id,
        "name": category.name,
        "userId": category.user_id,
    }
    if include_tasks:
        payload["tasks"] = [
            {"id": task.id, "title": task.title}
            for task in sorted(category.tasks, key=lambda t: t.id)
        ]
    return payload


def attachment_payload(attachment: Attachment) -> Dict[str, Any]:
    return {
        "id": attachment.id,
        "taskId": attachment.task_id,
        "fileName": attachment.file_name,
        "url": attachment.url,
        "createdAt": format_datetime(attachment.created_at),
    }


def share_payload(share: SharedTask) -> Dict[str, Any]:
    payload = {
        "id": share.id,
        "taskId": share.task_id,
        "userId": share.user_id,
        "sharedAt": format_datetime(share.shared_at),
    }
    if share.user is not None:
        payload["user"] = user_payload(share.user)
    return payload


def task_payload(task: Task, include_relations: bool = False) -> Dict[str, Any]:
    payload = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": format_datetime(task.due_date),
        "priority": task.priority,
        "createdAt": format_datetime(task.created_at),
        "updatedAt": format_datetime(task.updated_at),
        "creatorId": task.creator_id,
        "categoryId": task.category_id,
    }
    if include_relations:
        payload["category"] = category_payload(task.category) if task.category else None
        payload["attachments"] = [
            attachment_payload(a) for a in sorted(task.attachments, key=lambda a: a.id)
        ]
        payload["sharedWith"] = [
            share_payload(s) for s in sorted(task.shared_with, key=lambda s: s.id)
        ]
    return payload


def received_task_payload(task: Task) -> Dict[str, Any]:
    payload = task_payload(task)
    payload["sharedBy"] = sharer_payload(task.creator)
    return payload
