from typing import Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.core.schemas import Timestamp


class SchoolSettingsUpdate(BaseModel):
    """All five values are required together; snake_case column names are accepted too."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    grade1Classes: int = Field(..., ge=1, le=20, validation_alias=AliasChoices("grade1Classes", "grade1_classes"))
    grade2Classes: int = Field(..., ge=1, le=20, validation_alias=AliasChoices("grade2Classes", "grade2_classes"))
    grade3Classes: int = Field(..., ge=1, le=20, validation_alias=AliasChoices("grade3Classes", "grade3_classes"))
    dailyPeriods: int = Field(..., ge=1, le=10, validation_alias=AliasChoices("dailyPeriods", "daily_periods"))
    saturdayPeriods: int = Field(..., ge=0, le=8, validation_alias=AliasChoices("saturdayPeriods", "saturday_periods"))


class SettingsStatistics(BaseModel):
    totalTeachers: int = 0
    totalSubjects: int = 0
    totalClassrooms: int = 0
    totalClasses: int = 0


class SettingsValidation(BaseModel):
    isConfigured: bool
    hasMinimumTeachers: bool
    hasMinimumSubjects: bool
    warnings: List[str] = Field(default_factory=list)


class SchoolSettingsResponse(BaseModel):
    """Stored settings plus the derived calendar and entity counts."""

    id: str
    grade1Classes: int
    grade2Classes: int
    grade3Classes: int
    dailyPeriods: int
    saturdayPeriods: int
    created_at: Timestamp
    updated_at: Timestamp

    days: List[str]
    grades: List[int]
    classesPerGrade: Dict[str, List[str]]
    statistics: SettingsStatistics
    validation: SettingsValidation
