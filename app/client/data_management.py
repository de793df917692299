import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.api.v1.classrooms.schemas import ClassroomListData, ClassroomResponse
from app.api.v1.school_settings.schemas import SchoolSettingsResponse
from app.api.v1.subjects.schemas import SubjectListData, SubjectResponse
from app.api.v1.teachers.schemas import TeacherListData, TeacherResponse

from .api_client import ApiClient, ApiError, ResponseValidationError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class DataManagementState(BaseModel):
    """Everything the data-management screen shows, fetched in one go."""

    subjects: List[SubjectResponse] = Field(default_factory=list)
    teachers: List[TeacherResponse] = Field(default_factory=list)
    classrooms: List[ClassroomResponse] = Field(default_factory=list)
    school_settings: Optional[SchoolSettingsResponse] = None
    # resource name -> error message, for the lists that could not be loaded
    errors: Dict[str, str] = Field(default_factory=dict)


async def _fetch_all(client: ApiClient, endpoint: str, list_model: Any, key: str) -> List[Any]:
    """Walk every page of a list endpoint, not just the first."""
    first = await client.get(endpoint, list_model, params={"page": 1, "limit": PAGE_SIZE})
    items = list(getattr(first, key))
    rest = await asyncio.gather(
        *(
            client.get(endpoint, list_model, params={"page": page, "limit": PAGE_SIZE})
            for page in range(2, first.pagination.totalPages + 1)
        )
    )
    for result in rest:
        items.extend(getattr(result, key))
    return items


async def load_data_management(client: ApiClient) -> DataManagementState:
    """Fetch subjects, teachers, classrooms and settings concurrently.

    Lists are read page by page until ``pagination.totalPages`` is reached.
    A failing resource does not hide the others; its message ends up in ``errors``.
    """
    names = ["subjects", "teachers", "classrooms", "school_settings"]
    results = await asyncio.gather(
        _fetch_all(client, "/subjects", SubjectListData, "subjects"),
        _fetch_all(client, "/teachers", TeacherListData, "teachers"),
        _fetch_all(client, "/classrooms", ClassroomListData, "classrooms"),
        client.get("/school-settings", SchoolSettingsResponse),
        return_exceptions=True,
    )

    state = DataManagementState()
    for name, result in zip(names, results):
        if isinstance(result, (ApiError, ResponseValidationError)):
            logger.warning("Could not load %s: %s", name, result)
            state.errors[name] = str(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            setattr(state, name, result)
    return state
