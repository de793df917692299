import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ClassroomType, SortDirection
from app.core.exceptions import DeleteFailedError, NotFoundError
from app.core.models import Classroom
from app.core.pagination import apply_sort, paginate
from app.core.schemas import DeletedEntity, utcnow

from .schemas import (
    ClassroomCreate,
    ClassroomListData,
    ClassroomResponse,
    ClassroomSummary,
    ClassroomUpdate,
)

logger = logging.getLogger(__name__)

ENTITY = "classroom"

SORT_COLUMNS = {
    "name": Classroom.name,
    "type": Classroom.type,
    "capacity": Classroom.capacity,
    "created_at": Classroom.created_at,
    "order": Classroom.display_order,
}


def _to_response(c: Classroom) -> ClassroomResponse:
    return ClassroomResponse(
        id=c.id,
        name=c.name,
        type=c.type,
        capacity=c.capacity,
        count=c.count or 1,
        location=c.location,
        order=c.display_order or 1,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def _classroom_columns(payload: ClassroomCreate, partial: bool) -> Dict[str, Any]:
    supplied = payload.model_fields_set
    values: Dict[str, Any] = {}
    if payload.name is not None:
        values["name"] = payload.name
    if payload.type is not None:
        values["type"] = payload.type.value
    for field in ("capacity", "count", "location"):
        if field in supplied or not partial:
            values[field] = getattr(payload, field)
    if "count" in values and values["count"] is None:
        values["count"] = 1
    if "order" in supplied or not partial:
        values["display_order"] = payload.order
    return values


async def _get_row(db: AsyncSession, classroom_id: str) -> Optional[Classroom]:
    result = await db.execute(
        select(Classroom)
        .where(Classroom.id == classroom_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _summarize(db: AsyncSession, stmt: Select) -> ClassroomSummary:
    """Total seats (capacity x count) and room count per type over the filtered rows."""
    filtered = stmt.subquery()
    result = await db.execute(
        select(
            filtered.c.type,
            func.coalesce(func.sum(func.coalesce(filtered.c.capacity, 0) * filtered.c.count), 0),
            func.coalesce(func.sum(filtered.c.count), 0),
        ).group_by(filtered.c.type)
    )
    summary = ClassroomSummary()
    for room_type, capacity, rooms in result.all():
        summary.totalCapacity += int(capacity)
        summary.typeDistribution[room_type] = int(rooms)
    return summary


async def list_classrooms(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    room_type: Optional[ClassroomType] = None,
    capacity_min: Optional[int] = None,
    capacity_max: Optional[int] = None,
    sort: str = "created_at",
    order: SortDirection = SortDirection.DESC,
) -> ClassroomListData:
    stmt = select(Classroom)
    if search:
        stmt = stmt.where(Classroom.name.contains(search, autoescape=True))
    if room_type is not None:
        stmt = stmt.where(Classroom.type == room_type.value)
    if capacity_min is not None:
        stmt = stmt.where(Classroom.capacity >= capacity_min)
    if capacity_max is not None:
        stmt = stmt.where(Classroom.capacity <= capacity_max)

    summary = await _summarize(db, stmt)
    stmt = apply_sort(stmt, SORT_COLUMNS[sort], order, Classroom.id)
    rows, pagination = await paginate(db, stmt, page, limit)
    return ClassroomListData(
        classrooms=[_to_response(c) for c in rows],
        pagination=pagination,
        summary=summary,
    )


async def get_classroom(db: AsyncSession, classroom_id: str) -> ClassroomResponse:
    obj = await _get_row(db, classroom_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def create_classroom(db: AsyncSession, payload: ClassroomCreate) -> ClassroomResponse:
    now = utcnow()
    obj = Classroom(
        id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        **_classroom_columns(payload, partial=False),
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    logger.info("Created classroom %s (%s)", obj.id, obj.name)
    return _to_response(obj)


async def update_classroom(
    db: AsyncSession,
    classroom_id: str,
    payload: ClassroomUpdate,
) -> ClassroomResponse:
    if not await _get_row(db, classroom_id):
        raise NotFoundError(ENTITY)

    values = _classroom_columns(payload, partial=True)
    values["updated_at"] = utcnow()
    result = await db.execute(
        update(Classroom)
        .where(Classroom.id == classroom_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError(ENTITY)
    await db.commit()

    obj = await _get_row(db, classroom_id)
    if not obj:
        raise NotFoundError(ENTITY)
    return _to_response(obj)


async def delete_classroom(db: AsyncSession, classroom_id: str) -> DeletedEntity:
    obj = await _get_row(db, classroom_id)
    if not obj:
        raise NotFoundError(ENTITY)
    name = obj.name

    result = await db.execute(
        delete(Classroom)
        .where(Classroom.id == classroom_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise DeleteFailedError(ENTITY)
    await db.commit()
    logger.info("Deleted classroom %s (%s)", classroom_id, name)
    return DeletedEntity(deletedId=classroom_id, deletedName=name, deletedAt=utcnow())
