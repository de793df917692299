"""School-wide settings. Exactly one live row, keyed ``default``."""

from sqlalchemy import Column, DateTime, Integer, String

from app.core.schemas import utcnow
from app.db.session import Base

SETTINGS_ID = "default"


class SchoolSettings(Base):
    __tablename__ = "school_settings"

    id = Column(String(36), primary_key=True, default=SETTINGS_ID)
    grade1_classes = Column(Integer, nullable=False, default=4)
    grade2_classes = Column(Integer, nullable=False, default=4)
    grade3_classes = Column(Integer, nullable=False, default=3)
    daily_periods = Column(Integer, nullable=False, default=6)
    saturday_periods = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
