"""Subjects taught at the school (e.g. 数学, 理科). Grades and weekly hours are stored flat."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.core.json_columns import JSONText
from app.core.schemas import DEFAULT_SCHOOL_ID, utcnow
from app.db.session import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, index=True)
    school_id = Column(String(50), nullable=False, default=DEFAULT_SCHOOL_ID)
    # One value for every target grade; per-grade differences are not representable
    weekly_hours = Column(Integer, nullable=True)
    # JSON int array; empty means the subject applies to every grade
    target_grades = Column(JSONText(list), nullable=False, default=list)
    special_classroom = Column(String(50), nullable=True)
    requires_special_room = Column(Integer, nullable=False, default=0)
    color = Column(String(7), nullable=True)
    description = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
