"""Shared field types and response envelopes used by every entity module."""

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, Iterable, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, Field, StringConstraints

T = TypeVar("T")

DEFAULT_SCHOOL_ID = "default"

# UUID (versions 1-5) or CUID2 (21-25 lowercase alphanumerics)
ID_PATTERN = (
    r"^(?:[a-z0-9]{21,25}"
    r"|[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12})$"
)

# Japanese scripts, Latin letters, digits, hyphen, underscore and whitespace
NAME_PATTERN = "^[a-zA-Z0-9\u3040-\u309f\u30a0-\u30ff\u4e00-\u9faf\\-_\\s]+$"

Name = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=100, pattern=NAME_PATTERN),
]
Grade = Annotated[int, Field(ge=1, le=6)]
Period = Annotated[int, Field(ge=1, le=10)]
WeeklyHours = Annotated[int, Field(ge=1, le=10)]
GradeKey = Annotated[str, StringConstraints(pattern=r"^[1-6]$")]
HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


Timestamp = Annotated[datetime, AfterValidator(_as_utc)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Pagination(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=100)
    total: int = Field(..., ge=0)
    totalPages: int = Field(..., ge=0)


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {success: true, data, message?}."""

    success: bool = True
    data: T
    message: Optional[str] = None


class DeletedEntity(BaseModel):
    deletedId: str
    deletedName: str
    deletedAt: Timestamp


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    details: Optional[dict] = None


# Documents the error envelope on every route in the OpenAPI schema
ERROR_RESPONSES = {
    code: {"model": ErrorResponse, "description": description}
    for code, description in (
        (400, "Validation error"),
        (401, "Missing or invalid token"),
        (404, "Resource not found"),
        (500, "Server error"),
    )
}


def clean_grades(values: Iterable[Any]) -> List[int]:
    """Keep the valid grade numbers of a stored list, dropping anything else."""
    return [
        v for v in values
        if isinstance(v, int) and not isinstance(v, bool) and 1 <= v <= 6
    ]
