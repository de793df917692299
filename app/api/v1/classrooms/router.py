from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import ClassroomType, SortDirection
from app.core.schemas import ID_PATTERN, ApiResponse, DeletedEntity
from app.db.session import get_db

from .schemas import ClassroomCreate, ClassroomListData, ClassroomResponse, ClassroomUpdate
from . import service

router = APIRouter(prefix="/classrooms", tags=["classrooms"])


@router.get("", response_model=ApiResponse[ClassroomListData])
async def list_classrooms(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    type: Optional[ClassroomType] = Query(None),
    capacity_min: Optional[int] = Query(None, ge=0),
    capacity_max: Optional[int] = Query(None, ge=0),
    sort: Literal["name", "type", "capacity", "created_at", "order"] = Query("created_at"),
    order: SortDirection = Query(SortDirection.DESC),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """List classrooms with a capacity/type summary over every matching row."""
    data = await service.list_classrooms(
        db,
        page=page,
        limit=limit,
        search=search,
        room_type=type,
        capacity_min=capacity_min,
        capacity_max=capacity_max,
        sort=sort,
        order=order,
    )
    return ApiResponse(data=data)


@router.get("/{classroom_id}", response_model=ApiResponse[ClassroomResponse])
async def get_classroom(
    classroom_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return ApiResponse(data=await service.get_classroom(db, classroom_id))


@router.post(
    "",
    response_model=ApiResponse[ClassroomResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_classroom(
    payload: ClassroomCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.create_classroom(db, payload)
    return ApiResponse(data=data, message=f"教室「{data.name}」を作成しました")


@router.put("/{classroom_id}", response_model=ApiResponse[ClassroomResponse])
async def update_classroom(
    payload: ClassroomUpdate,
    classroom_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.update_classroom(db, classroom_id, payload)
    return ApiResponse(data=data, message=f"教室「{data.name}」を更新しました")


@router.delete("/{classroom_id}", response_model=ApiResponse[DeletedEntity])
async def delete_classroom(
    classroom_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.delete_classroom(db, classroom_id)
    return ApiResponse(data=data, message=f"教室「{data.deletedName}」を削除しました")
