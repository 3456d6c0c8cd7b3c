from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..database import get_db
from ..models import User
from ..schemas.category import CategoryIn
from ..services import categories as category_service
from .auth import get_current_user
from .errors import unwrap
from .params import RecordId

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryIn,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(category_service.create_category(db, current_user.id, category.name))


@router.get("")
def get_categories(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Caller's categories by name, each listing its tasks' id and title."""
    return unwrap(category_service.list_categories(db, current_user.id))


@router.put("/{category_id}")
def update_category(
    category_id: RecordId,
    category: CategoryIn,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(category_service.update_category(db, current_user.id, category_id, category.name))


@router.delete("/{category_id}")
def delete_category(
    category_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    deleted = unwrap(category_service.delete_category(db, current_user.id, category_id))
    return {"message": "Category deleted successfully!", "deletedCategory": deleted}
