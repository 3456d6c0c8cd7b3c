from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel import Session

from ..database import get_db
from ..models import User
from ..schemas.user import Credentials, UserCreate
from ..security import decode_access_token
from ..services import users as user_service
from .errors import unwrap
from .params import RecordId

router = APIRouter()


def _get_token_from_request(request: Request) -> Optional[str]:
    # second word of the header, whatever the scheme; verification decides the rest
    parts = request.headers.get("Authorization", "").split()
    if len(parts) < 2:
        return None
    return parts[1]


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer token.

    No token is 401; a token that cannot be used (bad signature, expired,
    unknown user) is 403.
    """
    token = _get_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(token)
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token.",
        )
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Create a new user account."""
    created = unwrap(user_service.register_user(db, user.email, user.password, user.nome))
    return {"message": "Registration successful!", "user": created}


@router.post("/login")
def login(credentials: Credentials, db: Session = Depends(get_db)):
    """Sign in and get JWT token."""
    session = unwrap(user_service.login_user(db, credentials.email, credentials.password))
    return {"message": "Login successful!", **session}


@router.get("/users")
def read_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(user_service.list_users(db))


@router.get("/users/{user_id}")
def read_user(
    user_id: RecordId,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(user_service.get_user(db, user_id))
