from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..database import get_db
from ..models import User
from ..schemas.sharing import ShareCreate, ShareDelete
from ..services import sharing as sharing_service
from .auth import get_current_user
from .errors import unwrap

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def share_task(
    share: ShareCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(sharing_service.share_task(
        db, current_user.id, share.task_id, share.target_user_email
    ))


@router.get("/received")
def get_received_shares(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Tasks other users shared with the caller, annotated with ``sharedBy``."""
    return unwrap(sharing_service.list_received(db, current_user.id))


@router.delete("")
def remove_share(
    share: ShareDelete,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(sharing_service.unshare_task(
        db, current_user.id, share.task_id, share.target_user_id
    ))
