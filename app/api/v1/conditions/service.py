import logging
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.json_columns import dump_json, load_json
from app.core.models import CONDITIONS_ID, Condition
from app.core.schemas import utcnow

from .schemas import ConditionsResponse, ConditionsUpdate

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _stored_text(raw: Optional[str]) -> str:
    if not raw:
        return ""
    if not raw.lstrip().startswith("{"):
        # Written by older builds as plain text
        return raw
    parsed: Any = load_json(raw, None)
    if isinstance(parsed, dict) and isinstance(parsed.get("constraints"), list):
        return "\n".join(str(line) for line in parsed["constraints"])
    return raw


async def _get_row(db: AsyncSession) -> Optional[Condition]:
    result = await db.execute(
        select(Condition)
        .where(Condition.id == CONDITIONS_ID)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_conditions(db: AsyncSession) -> ConditionsResponse:
    row = await _get_row(db)
    if not row:
        return ConditionsResponse(id=CONDITIONS_ID, conditions="")
    return ConditionsResponse(
        id=row.id,
        conditions=_stored_text(row.data),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


async def save_conditions(db: AsyncSession, payload: ConditionsUpdate) -> ConditionsResponse:
    lines = split_lines(payload.conditions)
    data = dump_json({"constraints": lines})
    now = utcnow()

    if await _get_row(db) is None:
        db.add(Condition(id=CONDITIONS_ID, data=data, created_at=now, updated_at=now))
    else:
        await db.execute(
            update(Condition)
            .where(Condition.id == CONDITIONS_ID)
            .values(data=data, updated_at=now)
            .execution_options(synchronize_session=False)
        )
    await db.commit()
    logger.info("Saved %d timetable conditions", len(lines))
    return await get_conditions(db)
