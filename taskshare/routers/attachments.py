from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlmodel import Session

from ..database import get_db
from ..models import User
from ..services import attachments as attachment_service
from ..storage import FileStorage, UploadTooLarge, get_storage, original_name_of
from .auth import get_current_user
from .errors import unwrap
from .params import RecordId

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_attachment(
    file: Optional[UploadFile] = File(None),
    task_id: Optional[str] = Form(None, alias="taskId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
):
    """Store an uploaded file and attach it to one of the caller's tasks."""
    stored = None
    if file is not None:
        try:
            stored = storage.save(file.file, original_name_of(file.filename))
        except UploadTooLarge as e:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))
        finally:
            file.file.close()

    return unwrap(attachment_service.create_attachment(
        db, storage, current_user.id, task_id, stored
    ))


@router.get("/{task_id}")
def get_attachments(
    task_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(attachment_service.list_attachments(db, current_user.id, task_id))


@router.delete("/{attachment_id}")
def delete_attachment(
    attachment_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
):
    deleted = unwrap(attachment_service.delete_attachment(
        db, storage, current_user.id, attachment_id
    ))
    return {"message": "Attachment deleted successfully.", "deletedAttachment": deleted}
