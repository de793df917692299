from typing import Any, List, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SortDirection
from app.core.schemas import Pagination


def apply_sort(stmt: Select, column, direction: SortDirection, tie_breaker) -> Select:
    """Order by ``column`` then by ``tie_breaker`` so page boundaries are stable."""
    primary = column.asc() if direction == SortDirection.ASC else column.desc()
    return stmt.order_by(primary, tie_breaker.asc())


async def paginate(
    db: AsyncSession,
    stmt: Select,
    page: int,
    limit: int,
) -> Tuple[Sequence[Any], Pagination]:
    """Run a COUNT over the filtered statement, then fetch one LIMIT/OFFSET page of it."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_result = await db.execute(count_stmt)
    total = total_result.scalar() or 0

    offset = (page - 1) * limit
    result = await db.execute(stmt.offset(offset).limit(limit))
    rows: List[Any] = list(result.scalars().all())

    total_pages = (total + limit - 1) // limit if limit else 0
    return rows, Pagination(page=page, limit=limit, total=total, totalPages=total_pages)
