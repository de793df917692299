from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import ClassroomType, SortDirection
from app.core.schemas import ID_PATTERN, ApiResponse, DeletedEntity
from app.db.session import get_db

from .schemas import SubjectCreate, SubjectListData, SubjectResponse, SubjectUpdate
from . import service

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("", response_model=ApiResponse[SubjectListData])
async def list_subjects(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    grade: Optional[int] = Query(None, ge=1, le=6),
    classroomType: Optional[ClassroomType] = Query(None),
    sort: Literal["name", "created_at", "order"] = Query("name"),
    order: SortDirection = Query(SortDirection.ASC),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.list_subjects(
        db,
        page=page,
        limit=limit,
        search=search,
        grade=grade,
        classroom_type=classroomType,
        sort=sort,
        order=order,
    )
    return ApiResponse(data=data)


@router.get("/{subject_id}", response_model=ApiResponse[SubjectResponse])
async def get_subject(
    subject_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return ApiResponse(data=await service.get_subject(db, subject_id))


@router.post(
    "",
    response_model=ApiResponse[SubjectResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_subject(
    payload: SubjectCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Create a subject. Legacy field aliases are normalized before storage."""
    data = await service.create_subject(db, payload)
    return ApiResponse(data=data, message=f"教科「{data.name}」を作成しました")


@router.put("/{subject_id}", response_model=ApiResponse[SubjectResponse])
async def update_subject(
    payload: SubjectUpdate,
    subject_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Partial update: fields absent from the body keep their stored values."""
    data = await service.update_subject(db, subject_id, payload)
    return ApiResponse(data=data, message=f"教科「{data.name}」を更新しました")


@router.delete("/{subject_id}", response_model=ApiResponse[DeletedEntity])
async def delete_subject(
    subject_id: str = Path(..., pattern=ID_PATTERN),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    data = await service.delete_subject(db, subject_id)
    return ApiResponse(data=data, message=f"教科「{data.deletedName}」を削除しました")
