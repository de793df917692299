from typing import Optional

from pydantic import BaseModel, Field

from app.core.schemas import Timestamp


class ConditionsUpdate(BaseModel):
    conditions: str = Field("", max_length=10000, description="One rule per line")


class ConditionsResponse(BaseModel):
    id: str
    conditions: str = ""
    created_at: Optional[Timestamp] = None
    updated_at: Optional[Timestamp] = None
