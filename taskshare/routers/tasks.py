from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..database import get_db
from ..models import User
from ..schemas.task import TaskCreate, TaskUpdate
from ..services import tasks as task_service
from ..storage import FileStorage, get_storage
from .auth import get_current_user
from .errors import unwrap
from .params import RecordId

router = APIRouter()


def _get_update_data(task_update: TaskUpdate) -> dict:
    return task_update.model_dump(exclude_unset=True)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new task owned by the caller."""
    return unwrap(task_service.create_task(
        db,
        current_user.id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        priority=task.priority,
        category_id=task.category_id,
    ))


@router.get("")
def get_tasks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Caller's tasks, newest first, with category, attachments and shares."""
    return unwrap(task_service.list_tasks(db, current_user.id))


@router.get("/{task_id}")
def get_task(
    task_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(task_service.get_task(db, current_user.id, task_id))


@router.put("/{task_id}")
def update_task(
    task_id: RecordId,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(task_service.update_task(
        db, current_user.id, task_id, _get_update_data(task_update)
    ))


@router.delete("/{task_id}")
def delete_task(
    task_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
):
    deleted = unwrap(task_service.delete_task(db, storage, current_user.id, task_id))
    return {"message": "Task deleted successfully!", "deletedTask": deleted}
