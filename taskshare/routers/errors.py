from typing import TypeVar

from fastapi import HTTPException

from ..result import Err, Result

T = TypeVar("T")


def unwrap(result: Result[T]) -> T:
    """Return the value of an ``Ok`` or raise the matching HTTP error."""
    if isinstance(result, Err):
        raise HTTPException(status_code=result.kind.status_code, detail=result.message)
    return result.value
