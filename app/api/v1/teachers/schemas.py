from typing import Annotated, Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
)

from app.core.enums import RESTRICTION_LEVEL_LABELS, RestrictionLevel
from app.core.schemas import DEFAULT_SCHOOL_ID, Grade, Name, Pagination, Period, Timestamp


def _restriction_level(value: Any) -> Any:
    if isinstance(value, str):
        return RESTRICTION_LEVEL_LABELS.get(value.strip(), value)
    return value


class AssignmentRestriction(BaseModel):
    """A day and periods the teacher should (or must) not be scheduled."""

    displayOrder: Optional[int] = Field(None, ge=1)
    restrictedDay: str = Field(..., min_length=1, max_length=20)
    restrictedPeriods: List[Period] = Field(..., min_length=1)
    restrictionLevel: Annotated[RestrictionLevel, BeforeValidator(_restriction_level)]
    reason: Optional[str] = Field(None, max_length=200)


class TeacherCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Name
    email: Optional[EmailStr] = None
    subjects: List[str] = Field(default_factory=list, description="Subject names or ids")
    grades: List[Grade] = Field(default_factory=list)
    assignmentRestrictions: List[AssignmentRestriction] = Field(
        default_factory=list,
        validation_alias=AliasChoices("assignmentRestrictions", "assignment_restrictions"),
    )
    order: Optional[int] = Field(None, ge=1, le=100)


class TeacherUpdate(TeacherCreate):
    name: Optional[Name] = None


class TeacherResponse(BaseModel):
    id: str
    name: str
    school_id: str = DEFAULT_SCHOOL_ID
    email: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    grades: List[int] = Field(default_factory=list)
    assignmentRestrictions: List[AssignmentRestriction] = Field(default_factory=list)
    order: int = 1
    created_at: Timestamp
    updated_at: Timestamp

    @computed_field
    @property
    def assignment_restrictions(self) -> List[AssignmentRestriction]:
        return list(self.assignmentRestrictions)


class TeacherListData(BaseModel):
    teachers: List[TeacherResponse]
    pagination: Pagination
