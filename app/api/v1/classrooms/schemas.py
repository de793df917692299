from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import ClassroomType
from app.core.schemas import Name, Pagination, Timestamp


class ClassroomCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Name
    type: ClassroomType
    capacity: Optional[int] = Field(None, ge=1, le=100)
    count: int = Field(1, ge=1, le=50, description="Number of identical rooms")
    location: Optional[str] = Field(None, max_length=100)
    order: Optional[int] = Field(None, ge=1)


class ClassroomUpdate(ClassroomCreate):
    name: Optional[Name] = None
    type: Optional[ClassroomType] = None


class ClassroomResponse(BaseModel):
    id: str
    name: str
    # Plain string: rows written before the type list was closed may hold other labels
    type: str
    capacity: Optional[int] = None
    count: int = 1
    location: Optional[str] = None
    order: int = 1
    created_at: Timestamp
    updated_at: Timestamp


class ClassroomSummary(BaseModel):
    totalCapacity: int = 0
    typeDistribution: Dict[str, int] = Field(default_factory=dict)


class ClassroomListData(BaseModel):
    classrooms: List[ClassroomResponse]
    pagination: Pagination
    summary: ClassroomSummary
