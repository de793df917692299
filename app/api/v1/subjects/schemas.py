from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, Json, computed_field

from app.core.enums import ClassroomType
from app.core.json_columns import dump_json
from app.core.schemas import (
    DEFAULT_SCHOOL_ID,
    Grade,
    GradeKey,
    HexColor,
    Name,
    Pagination,
    Timestamp,
    WeeklyHours,
)

DEFAULT_COLOR = "#3B82F6"
# Grades a flat weekly-hours value is spread over when the subject targets every grade
DEFAULT_EXPANSION_GRADES = [1, 2, 3]


def requires_special_classroom(special_classroom: Optional[str]) -> bool:
    return bool(special_classroom) and special_classroom != ClassroomType.REGULAR.value


class SubjectCreate(BaseModel):
    """
    Subject payload. Besides the current snake_case fields, the aliases sent by
    older front-end builds are accepted; the service folds them into one value
    per column (see ``service._subject_columns``).
    """

    model_config = ConfigDict(extra="ignore")

    name: Name
    school_id: Optional[str] = Field(None, max_length=50, description="School id (default: 'default')")
    weekly_hours: Optional[WeeklyHours] = Field(None, description="Lessons per week")
    target_grades: Optional[Union[List[Grade], Json[List[Grade]]]] = Field(
        None, description="Target grades as an array or a JSON-encoded array"
    )
    special_classroom: Optional[str] = Field(None, max_length=50, description="Special classroom type")
    color: Optional[HexColor] = None
    description: Optional[str] = Field(None, max_length=1000)
    order: Optional[int] = Field(None, ge=1, le=100, description="Display order")

    # Legacy aliases
    grades: Optional[List[Grade]] = None
    weeklyHours: Optional[Union[WeeklyHours, Dict[GradeKey, WeeklyHours]]] = None
    requiresSpecialClassroom: Optional[bool] = None
    classroomType: Optional[str] = Field(None, max_length=50)
    specialClassroom: Optional[str] = Field(None, max_length=50)


class SubjectUpdate(SubjectCreate):
    name: Optional[Name] = None


class SubjectResponse(BaseModel):
    """
    Canonical subject shape. The camelCase and raw-column aliases that older
    front ends still read are derived from it in one place, below.
    """

    id: str
    name: str
    school_id: str = DEFAULT_SCHOOL_ID
    grades: List[int] = Field(default_factory=list)
    weekly_hours: Optional[int] = None
    special_classroom: Optional[str] = None
    color: str = DEFAULT_COLOR
    order: int = 1
    description: Optional[str] = None
    created_at: Timestamp
    updated_at: Timestamp

    @computed_field
    @property
    def targetGrades(self) -> List[int]:
        return list(self.grades)

    @computed_field
    @property
    def target_grades(self) -> str:
        return dump_json(self.grades)

    @computed_field
    @property
    def weeklyHours(self) -> Dict[str, int]:
        # Approximation: the single stored value is repeated for every grade
        if not self.weekly_hours:
            return {}
        grades = self.grades or DEFAULT_EXPANSION_GRADES
        return {str(grade): self.weekly_hours for grade in grades}

    @computed_field
    @property
    def requiresSpecialClassroom(self) -> bool:
        return requires_special_classroom(self.special_classroom)

    @computed_field
    @property
    def specialClassroom(self) -> str:
        return self.special_classroom or ""

    @computed_field
    @property
    def classroomType(self) -> str:
        return self.special_classroom or ClassroomType.REGULAR.value


class SubjectListData(BaseModel):
    subjects: List[SubjectResponse]
    pagination: Pagination
