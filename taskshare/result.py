"""Tagged results returned by every service operation.

Services never raise for expected outcomes. They return ``Ok(value)`` or
``Err(kind, message)`` and the HTTP layer turns an ``Err`` into a response.
"""
import enum
import functools
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorKind(str, enum.Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_OPERATION = "invalid_operation"
    UNAUTHENTICATED = "unauthenticated"
    TOKEN_INVALID = "token_invalid"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_OPERATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.TOKEN_INVALID: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def invalid_input(message: str) -> Err:
    return Err(ErrorKind.INVALID_INPUT, message)


def store_errors(action: str):
    """Turn unexpected store failures inside a service call into ``Err(INTERNAL)``.

    The wrapped function must take the session as its first argument; it is
    rolled back before the error result is returned.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db, *args: Any, **kwargs: Any):
            try:
                return func(db, *args, **kwargs)
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Store failure while %s", action)
                return Err(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)

        return wrapper

    return decorator
