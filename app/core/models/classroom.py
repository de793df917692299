"""Physical rooms. ``count`` is the number of identical rooms of this type."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String

from app.core.schemas import utcnow
from app.db.session import Base


class Classroom(Base):
    __tablename__ = "classrooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    capacity = Column(Integer, nullable=True)
    count = Column(Integer, nullable=False, default=1)
    location = Column(String(100), nullable=True)
    display_order = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
