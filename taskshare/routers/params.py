from typing import Annotated

from fastapi import Path

from ..models.base import MAX_ID

# Path ids outside the integer column range are rejected as bad input
RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]
