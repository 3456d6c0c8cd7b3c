import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, col, select

from ..formatting import category_payload
from ..models import Category
from ..result import Ok, Result, invalid_input, store_errors
from .access import authorize_category_access

logger = logging.getLogger(__name__)


def _clean_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return name.strip() or None


@store_errors("creating category")
def create_category(db: Session, user_id: int, name: Optional[str]) -> Result[Dict[str, Any]]:
    name = _clean_name(name)
    if name is None:
        return invalid_input("Category name is required")

    category = Category(name=name, user_id=user_id)
    db.add(category)
    db.commit()
    db.refresh(category)
    return Ok(category_payload(category))


@store_errors("listing categories")
def list_categories(db: Session, user_id: int) -> Result[List[Dict[str, Any]]]:
    categories = db.exec(
        select(Category)
        .where(Category.user_id == user_id)
        .order_by(col(Category.name).asc(), col(Category.id).asc())
    ).all()
    return Ok([category_payload(c, include_tasks=True) for c in categories])


@store_errors("updating category")
def update_category(
    db: Session, user_id: int, category_id: int, name: Optional[str]
) -> Result[Dict[str, Any]]:
    name = _clean_name(name)
    if name is None:
        return invalid_input("Category name is required")

    found = authorize_category_access(db, user_id, category_id)
    if not found.ok:
        return found
    category = found.value

    category.name = name
    db.add(category)
    db.commit()
    db.refresh(category)
    return Ok(category_payload(category))


@store_errors("deleting category")
def delete_category(db: Session, user_id: int, category_id: int) -> Result[Dict[str, Any]]:
    """Delete a category; its tasks survive with no category."""
    found = authorize_category_access(db, user_id, category_id)
    if not found.ok:
        return found
    category = found.value

    payload = category_payload(category)
    for task in category.tasks:
        task.category_id = None
        db.add(task)
    db.delete(category)
    db.commit()

    logger.info("User %s deleted category %s", user_id, category_id)
    return Ok(payload)
