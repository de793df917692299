"""Free-text conditions for timetable generation. Single row keyed ``default``."""

from sqlalchemy import Column, DateTime, String, Text

from app.core.schemas import utcnow
from app.db.session import Base

CONDITIONS_ID = "default"


class Condition(Base):
    __tablename__ = "conditions"

    id = Column(String(36), primary_key=True, default=CONDITIONS_ID)
    # {"constraints": ["line", ...]} or, in rows written by older builds, plain text
    data = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
