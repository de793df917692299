import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import String, delete, or_, select, type_coerce, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ClassroomType, SortDirection
from app.core.exceptions import DeleteFailedError, NotFoundError
from app.core.models import Subject
from app.core.pagination import apply_sort, paginate
from app.core.schemas import DEFAULT_SCHOOL_ID, DeletedEntity, clean_grades, utcnow

from .schemas import (
    DEFAULT_COLOR,
    SubjectCreate,
    SubjectListData,
    SubjectResponse,
    SubjectUpdate,
    requires_special_classroom,
)

logger = logging.getLogger(__name__)

ENTITY = "subject"

SORT_COLUMNS = {
    "name": Subject.name,
    "created_at": Subject.created_at,
    "order": Subject.display_order,
}

_UNSET = object()


def _to_response(s: Subject) -> SubjectResponse:
    return SubjectResponse(
        id=s.id,
        name=s.name,
        school_id=s.school_id or DEFAULT_SCHOOL_ID,
        grades=clean_grades(s.target_grades or []),
        weekly_hours=s.weekly_hours,
        special_classroom=s.special_classroom,
        color=s.color or DEFAULT_COLOR,
        order=s.display_order or 1,
        description=s.description,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def _grades(payload: SubjectCreate, supplied: set) -> Optional[List[int]]:
    if "target_grades" in supplied:
        grades = payload.target_grades or []
    elif "grades" in supplied:
        grades = payload.grades or []
    elif isinstance(payload.weeklyHours, dict) and payload.weeklyHours:
        grades = sorted(int(key) for key in payload.weeklyHours)
    else:
        return None
    return list(dict.fromkeys(grades))


def _weekly_hours(payload: SubjectCreate, supplied: set) -> Any:
    if "weekly_hours" in supplied:
        return payload.weekly_hours
    if "weeklyHours" in supplied:
        if isinstance(payload.weeklyHours, dict):
            # Per-grade values collapse to the first one submitted
            return next(iter(payload.weeklyHours.values()), None)
        return payload.weeklyHours
    return _UNSET


def _special_classroom(payload: SubjectCreate, supplied: set) -> Any:
    if "special_classroom" in supplied:
        return payload.special_classroom or ""
    if "specialClassroom" in supplied:
        return payload.specialClassroom or ""
    if payload.classroomType:
        if payload.classroomType == ClassroomType.REGULAR.value:
            return ""
        return payload.classroomType
    if payload.requiresSpecialClassroom is False:
        return ""
    return _UNSET


def _subject_columns(payload: SubjectCreate, partial: bool) -> Dict[str, Any]:
    """
    Fold the canonical fields and their legacy aliases into column values.

    With ``partial`` set only the columns the caller actually sent are
    returned, so an update never resets fields it did not mention.
    """
    supplied = payload.model_fields_set
    values: Dict[str, Any] = {}

    if payload.name is not None:
        values["name"] = payload.name
    if "school_id" in supplied or not partial:
        values["school_id"] = payload.school_id or DEFAULT_SCHOOL_ID

    weekly_hours = _weekly_hours(payload, supplied)
    if weekly_hours is not _UNSET:
        values["weekly_hours"] = weekly_hours
    elif not partial:
        values["weekly_hours"] = None

    grades = _grades(payload, supplied)
    if grades is not None:
        values["target_grades"] = grades
    elif not partial:
        values["target_grades"] = []

    special = _special_classroom(payload, supplied)
    if special is _UNSET and not partial:
        special = ""
    if special is not _UNSET:
        values["special_classroom"] = special
        values["requires_special_room"] = int(requires_special_classroom(special))

    if "color" in supplied:
        values["color"] = payload.color
    if "description" in supplied:
        values["description"] = payload.description
    if "order" in supplied:
        values["display_order"] = payload.order
    return values


async def _get_row(db: AsyncSession, subject_id: str) -> Optional[Subject]:
    result = await db.execute(
        select(Subject)
        .where(Subject.id == subject_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_subjects(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    grade: Optional[int] = None,
    classroom_type: Optional[ClassroomType] = None,
    sort: str = "name",
    order: SortDirection = SortDirection.ASC,
) -> SubjectListData:
    stmt = select(Subject)
    if search:
        stmt = stmt.where(Subject.name.contains(search, autoescape=True))
    if grade is not None:
        grades_text = type_coerce(Subject.target_grades, String)
        # An empty grade list means the subject is taught in every grade
        stmt = stmt.where(
            or_(
                grades_text.contains(str(grade)),
                grades_text == "[]",
                Subject.target_grades.is_(None),
            )
        )
    if classroom_type == ClassroomType.REGULAR:
        stmt = stmt.where(
            or_(
                Subject.special_classroom.is_(None),
                Subject.special_classroom.in_(["", ClassroomType.REGULAR.value]),
            )
        )
    elif classroom_type is not None:
        stmt = stmt.where(Subject.special_classroom == classroom_type.value)

    stmt = apply_sort(stmt, SORT_COLUMNS[sort], order, Subject.id)
    rows, pagination = await paginate(db, stmt, page, limit)
    return SubjectListData(
        subjects=[_to_response(s) for s in rows],
        pagination=pagination,
    )


async def get_subject(db: AsyncSession, subject_id: str) -> SubjectResponse:
    obj = await _get_row(db, subject_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def create_subject(db: AsyncSession, payload: SubjectCreate) -> SubjectResponse:
    now = utcnow()
    obj = Subject(
        id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        **_subject_columns(payload, partial=False),
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    logger.info("Created subject %s (%s)", obj.id, obj.name)
    return _to_response(obj)


async def update_subject(
    db: AsyncSession,
    subject_id: str,
    payload: SubjectUpdate,
) -> SubjectResponse:
    if not await _get_row(db, subject_id):
        raise NotFoundError(ENTITY)

    values = _subject_columns(payload, partial=True)
    values["updated_at"] = utcnow()
    result = await db.execute(
        update(Subject)
        .where(Subject.id == subject_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError(ENTITY)
    await db.commit()

    obj = await _get_row(db, subject_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def delete_subject(db: AsyncSession, subject_id: str) -> DeletedEntity:
    obj = await _get_row(db, subject_id)
    if not obj:
        raise NotFoundError(ENTITY)
    name = obj.name

    result = await db.execute(
        delete(Subject)
        .where(Subject.id == subject_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise DeleteFailedError(ENTITY)
    await db.commit()
    logger.info("Deleted subject %s (%s)", subject_id, name)
    return DeletedEntity(deletedId=subject_id, deletedName=name, deletedAt=utcnow())
