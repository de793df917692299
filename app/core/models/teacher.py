import uuid

from sqlalchemy import Column, DateTime, Integer, String

from app.core.json_columns import JSONText
from app.core.schemas import DEFAULT_SCHOOL_ID, utcnow
from app.db.session import Base


class Teacher(Base):
    """Teacher with the subjects and grades they teach and their availability restrictions."""

    __tablename__ = "teachers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, index=True)
    school_id = Column(String(50), nullable=False, default=DEFAULT_SCHOOL_ID)
    email = Column(String(255), nullable=True)
    # Subject names or ids, as submitted by the front end
    subjects = Column(JSONText(list), nullable=False, default=list)
    grades = Column(JSONText(list), nullable=False, default=list)
    # Serialized list of {displayOrder, restrictedDay, restrictedPeriods, restrictionLevel, reason}
    assignment_restrictions = Column(JSONText(list), nullable=False, default=list)
    display_order = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
