from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import SortDirection
from app.core.schemas import ID_PATTERN, ApiResponse, DeletedEntity
from app.db.session import get_db

from .schemas import TeacherCreate, TeacherListData, TeacherResponse, TeacherUpdate
from . import service

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.get("", response_model=ApiResponse[TeacherListData])
async def list_teachers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    subject: Optional[str] = Query(None, max_length=100, description="Subject taught"),
    grade: Optional[int] = Query(None, ge=1, le=6),
    sort: Literal["name", "created_at", "order"] = Query("name"),
    order: SortDirection = Query(SortDirection.ASC),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.list_teachers(
        db,
        page=page,
        limit=limit,
        search=search,
        subject=subject,
        grade=grade,
        sort=sort,
        order=order,
    )
    return ApiResponse(data=data)


@router.get("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def get_teacher(
    teacher_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return ApiResponse(data=await service.get_teacher(db, teacher_id))


@router.post(
    "",
    response_model=ApiResponse[TeacherResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_teacher(
    payload: TeacherCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.create_teacher(db, payload)
    return ApiResponse(data=data, message=f"教師「{data.name}」を作成しました")


@router.put("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def update_teacher(
    payload: TeacherUpdate,
    teacher_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.update_teacher(db, teacher_id, payload)
    return ApiResponse(data=data, message=f"教師「{data.name}」を更新しました")


@router.delete("/{teacher_id}", response_model=ApiResponse[DeletedEntity])
async def delete_teacher(
    teacher_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.delete_teacher(db, teacher_id)
    return ApiResponse(data=data, message=f"教師「{data.deletedName}」を削除しました")
