from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.schemas import ApiResponse
from app.db.session import get_db

from .schemas import SchoolSettingsResponse
from . import service

router = APIRouter(prefix="/school-settings", tags=["school-settings"])


@router.get("", response_model=ApiResponse[SchoolSettingsResponse])
async def get_school_settings(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return ApiResponse(data=await service.get_school_settings(db))


@router.put("", response_model=ApiResponse[SchoolSettingsResponse])
async def update_school_settings(
    body: Dict[str, Any] = Body(..., description="grade1Classes, grade2Classes, grade3Classes, dailyPeriods, saturdayPeriods"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.update_school_settings(db, body)
    return ApiResponse(data=data, message="学校設定を更新しました")
