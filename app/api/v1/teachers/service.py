import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import String, delete, select, type_coerce, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SortDirection
from app.core.exceptions import DeleteFailedError, NotFoundError
from app.core.json_columns import dump_json
from app.core.models import Teacher
from app.core.pagination import apply_sort, paginate
from app.core.schemas import DEFAULT_SCHOOL_ID, DeletedEntity, clean_grades, utcnow

from .schemas import (
    AssignmentRestriction,
    TeacherCreate,
    TeacherListData,
    TeacherResponse,
    TeacherUpdate,
)

logger = logging.getLogger(__name__)

ENTITY = "teacher"

SORT_COLUMNS = {
    "name": Teacher.name,
    "created_at": Teacher.created_at,
    "order": Teacher.display_order,
}

_restrictions_adapter = TypeAdapter(List[AssignmentRestriction])


def _parse_restrictions(raw: Any, teacher_id: str) -> List[AssignmentRestriction]:
    try:
        return _restrictions_adapter.validate_python(raw or [])
    except ValidationError as exc:
        logger.warning(
            "Ignoring unreadable assignment restrictions of teacher %s: %s",
            teacher_id,
            exc.error_count(),
        )
        return []


def _to_response(t: Teacher) -> TeacherResponse:
    return TeacherResponse(
        id=t.id,
        name=t.name,
        school_id=t.school_id or DEFAULT_SCHOOL_ID,
        email=t.email,
        subjects=[str(s) for s in (t.subjects or []) if isinstance(s, (str, int))],
        grades=clean_grades(t.grades or []),
        assignmentRestrictions=_parse_restrictions(t.assignment_restrictions, t.id),
        order=t.display_order or 1,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


def _teacher_columns(payload: TeacherCreate, partial: bool) -> Dict[str, Any]:
    supplied = payload.model_fields_set
    values: Dict[str, Any] = {}

    def wants(field: str) -> bool:
        return field in supplied or not partial

    if payload.name is not None:
        values["name"] = payload.name
    if wants("email"):
        values["email"] = str(payload.email) if payload.email else None
    if wants("subjects"):
        values["subjects"] = [s.strip() for s in payload.subjects if s and s.strip()]
    if wants("grades"):
        values["grades"] = list(dict.fromkeys(payload.grades))
    if wants("assignmentRestrictions"):
        values["assignment_restrictions"] = [
            r.model_dump(mode="json") for r in payload.assignmentRestrictions
        ]
    if wants("order"):
        values["display_order"] = payload.order
    if not partial:
        values["school_id"] = DEFAULT_SCHOOL_ID
    return values


async def _get_row(db: AsyncSession, teacher_id: str) -> Optional[Teacher]:
    result = await db.execute(
        select(Teacher)
        .where(Teacher.id == teacher_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_teachers(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    subject: Optional[str] = None,
    grade: Optional[int] = None,
    sort: str = "name",
    order: SortDirection = SortDirection.ASC,
) -> TeacherListData:
    stmt = select(Teacher)
    if search:
        stmt = stmt.where(Teacher.name.contains(search, autoescape=True))
    if subject:
        # Match a whole JSON string element, not a substring of another subject
        stmt = stmt.where(
            type_coerce(Teacher.subjects, String).contains(dump_json(subject), autoescape=True)
        )
    if grade is not None:
        stmt = stmt.where(type_coerce(Teacher.grades, String).contains(str(grade)))

    stmt = apply_sort(stmt, SORT_COLUMNS[sort], order, Teacher.id)
    rows, pagination = await paginate(db, stmt, page, limit)
    return TeacherListData(
        teachers=[_to_response(t) for t in rows],
        pagination=pagination,
    )


async def get_teacher(db: AsyncSession, teacher_id: str) -> TeacherResponse:
    obj = await _get_row(db, teacher_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def create_teacher(db: AsyncSession, payload: TeacherCreate) -> TeacherResponse:
    now = utcnow()
    obj = Teacher(
        id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        **_teacher_columns(payload, partial=False),
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    logger.info("Created teacher %s (%s)", obj.id, obj.name)
    return _to_response(obj)


async def update_teacher(
    db: AsyncSession,
    teacher_id: str,
    payload: TeacherUpdate,
) -> TeacherResponse:
    if not await _get_row(db, teacher_id):
        raise NotFoundError(ENTITY)

    values = _teacher_columns(payload, partial=True)
    values["updated_at"] = utcnow()
    result = await db.execute(
        update(Teacher)
        .where(Teacher.id == teacher_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError(ENTITY)
    await db.commit()

    obj = await _get_row(db, teacher_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def delete_teacher(db: AsyncSession, teacher_id: str) -> DeletedEntity:
    obj = await _get_row(db, teacher_id)
    if not obj:
        raise NotFoundError(ENTITY)
    name = obj.name

    result = await db.execute(
        delete(Teacher)
        .where(Teacher.id == teacher_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise DeleteFailedError(ENTITY)
    await db.commit()
    logger.info("Deleted teacher %s (%s)", teacher_id, name)
    return DeletedEntity(deletedId=teacher_id, deletedName=name, deletedAt=utcnow())
