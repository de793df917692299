from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.schemas import ApiResponse
from app.db.session import get_db

from .schemas import ConditionsResponse, ConditionsUpdate
from . import service

router = APIRouter(prefix="/conditions", tags=["conditions"])


@router.get("", response_model=ApiResponse[ConditionsResponse])
async def get_conditions(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Free-text rules for timetable generation, one per line."""
    return ApiResponse(data=await service.get_conditions(db))


@router.put("", response_model=ApiResponse[ConditionsResponse])
async def save_conditions(
    payload: ConditionsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.save_conditions(db, payload)
    return ApiResponse(data=data, message="条件設定を保存しました")
