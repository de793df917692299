import logging
import math
import string
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings as app_settings
from app.core.enums import SATURDAY, WEEKDAYS
from app.core.errors import validation_issues
from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.models import SETTINGS_ID, Classroom, SchoolSettings, Subject, Teacher
from app.core.schemas import utcnow

from .schemas import (
    SchoolSettingsResponse,
    SchoolSettingsUpdate,
    SettingsStatistics,
    SettingsValidation,
)

logger = logging.getLogger(__name__)

ENTITY = "settings"

GRADES = [1, 2, 3]
MIN_TEACHERS = 5
MIN_SUBJECTS = 8
TEACHER_SHORTAGE_WARNING = "教師が不足しています（推奨：5人以上）"
SUBJECT_SHORTAGE_WARNING = "教科が不足しています（推奨：8教科以上）"

# API field -> (column, fallback used by the lenient update path)
FIELDS = {
    "grade1Classes": ("grade1_classes", 4),
    "grade2Classes": ("grade2_classes", 4),
    "grade3Classes": ("grade3_classes", 3),
    "dailyPeriods": ("daily_periods", 6),
    "saturdayPeriods": ("saturday_periods", 4),
}


def _lenient_number(raw: Any, default: int) -> Any:
    """Numeric coercion where anything missing, zero or unparsable becomes ``default``."""
    if isinstance(raw, bool):
        return int(raw) or default
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    return int(number) if number.is_integer() else number


def _coerce_leniently(body: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for field, (column, default) in FIELDS.items():
        raw = body.get(field, body.get(column))
        values[field] = _lenient_number(raw, default)
    return values


def _validate_update(body: Dict[str, Any]) -> SchoolSettingsUpdate:
    try:
        return SchoolSettingsUpdate.model_validate(body)
    except ValidationError as exc:
        if app_settings.settings_strict_validation:
            raise ValidationFailedError("Invalid request data", validation_issues(exc.errors()))
        logger.warning(
            "School settings update failed validation (%d issues); applying defaults for invalid values",
            exc.error_count(),
        )

    try:
        return SchoolSettingsUpdate.model_validate(_coerce_leniently(body))
    except ValidationError as exc:
        raise ValidationFailedError("Invalid request data", validation_issues(exc.errors()))


def _class_letters(count: int) -> list:
    letters = string.ascii_uppercase
    return [letters[i] if i < len(letters) else str(i + 1) for i in range(count)]


async def _get_row(db: AsyncSession) -> Optional[SchoolSettings]:
    result = await db.execute(
        select(SchoolSettings)
        .where(SchoolSettings.id == SETTINGS_ID)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _entity_counts(db: AsyncSession) -> Dict[str, int]:
    # One round trip; an AsyncSession cannot run statements concurrently
    result = await db.execute(
        select(
            select(func.count()).select_from(Teacher).scalar_subquery().label("teachers"),
            select(func.count()).select_from(Subject).scalar_subquery().label("subjects"),
            select(func.count()).select_from(Classroom).scalar_subquery().label("classrooms"),
        )
    )
    row = result.one()
    return {
        "teachers": row.teachers or 0,
        "subjects": row.subjects or 0,
        "classrooms": row.classrooms or 0,
    }


def _to_response(row: SchoolSettings, counts: Dict[str, int]) -> SchoolSettingsResponse:
    class_counts = {
        1: row.grade1_classes,
        2: row.grade2_classes,
        3: row.grade3_classes,
    }
    days = list(WEEKDAYS)
    if row.saturday_periods > 0:
        days.append(SATURDAY)

    warnings = []
    if counts["teachers"] < MIN_TEACHERS:
        warnings.append(TEACHER_SHORTAGE_WARNING)
    if counts["subjects"] < MIN_SUBJECTS:
        warnings.append(SUBJECT_SHORTAGE_WARNING)

    return SchoolSettingsResponse(
        id=row.id,
        grade1Classes=row.grade1_classes,
        grade2Classes=row.grade2_classes,
        grade3Classes=row.grade3_classes,
        dailyPeriods=row.daily_periods,
        saturdayPeriods=row.saturday_periods,
        created_at=row.created_at,
        updated_at=row.updated_at,
        days=days,
        grades=list(GRADES),
        classesPerGrade={str(g): _class_letters(n) for g, n in class_counts.items()},
        statistics=SettingsStatistics(
            totalTeachers=counts["teachers"],
            totalSubjects=counts["subjects"],
            totalClassrooms=counts["classrooms"],
            totalClasses=sum(class_counts.values()),
        ),
        validation=SettingsValidation(
            isConfigured=counts["teachers"] > 0 and counts["subjects"] > 0,
            hasMinimumTeachers=counts["teachers"] >= MIN_TEACHERS,
            hasMinimumSubjects=counts["subjects"] >= MIN_SUBJECTS,
            warnings=warnings,
        ),
    )


async def get_school_settings(db: AsyncSession) -> SchoolSettingsResponse:
    row = await _get_row(db)
    if not row:
        raise NotFoundError(ENTITY, "School settings not found")
    return _to_response(row, await _entity_counts(db))


async def update_school_settings(db: AsyncSession, body: Dict[str, Any]) -> SchoolSettingsResponse:
    """
    Replace the five settings values.

    Invalid input is coerced field by field (missing, zero or non-numeric
    values take the defaults) unless strict validation is configured. Values
    still out of range after coercion are rejected before anything is written.
    """
    payload = _validate_update(body)
    values = {column: getattr(payload, field) for field, (column, _) in FIELDS.items()}
    now = utcnow()

    if await _get_row(db) is None:
        logger.info("School settings row missing; creating it")
        db.add(SchoolSettings(id=SETTINGS_ID, created_at=now, updated_at=now, **values))
    else:
        await db.execute(
            update(SchoolSettings)
            .where(SchoolSettings.id == SETTINGS_ID)
            .values(updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
    await db.commit()
    return await get_school_settings(db)
