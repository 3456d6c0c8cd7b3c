import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ..formatting import user_payload
from ..models import User
from ..result import Err, ErrorKind, Ok, Result, invalid_input, not_found, store_errors
from ..security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "A user with this email already exists"
INVALID_CREDENTIALS = "Invalid credentials"


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == email)).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user."""
    user = _find_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


@store_errors("registering user")
def register_user(
    db: Session, email: Optional[str], password: Optional[str], nome: Optional[str] = None
) -> Result[Dict[str, Any]]:
    email = (email or "").strip()
    if not email or not password:
        return invalid_input("Email and password are required")

    if _find_by_email(db, email) is not None:
        return Err(ErrorKind.CONFLICT, DUPLICATE_EMAIL)

    user = User(email=email, hashed_password=get_password_hash(password), nome=nome)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return Err(ErrorKind.CONFLICT, DUPLICATE_EMAIL)
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return Ok(user_payload(user))


@store_errors("logging in")
def login_user(db: Session, email: Optional[str], password: Optional[str]) -> Result[Dict[str, Any]]:
    email = (email or "").strip()
    if not email or not password:
        return invalid_input("Email and password are required")

    user = authenticate_user(db, email, password)
    if user is None:
        return Err(ErrorKind.UNAUTHENTICATED, INVALID_CREDENTIALS)

    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return Ok({"token": token, "user": user_payload(user)})


@store_errors("listing users")
def list_users(db: Session) -> Result[List[Dict[str, Any]]]:
    users = db.exec(select(User).order_by(col(User.id).asc())).all()
    return Ok([user_payload(u) for u in users])


@store_errors("fetching user")
def get_user(db: Session, user_id: int) -> Result[Dict[str, Any]]:
    user = db.get(User, user_id)
    if user is None:
        return not_found("User not found")
    return Ok(user_payload(user))
