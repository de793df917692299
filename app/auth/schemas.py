from typing import Optional

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Caller identity taken from the verified bearer token."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
