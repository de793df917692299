from app.core.models.classroom import Classroom
from app.core.models.condition import CONDITIONS_ID, Condition
from app.core.models.school_settings import SETTINGS_ID, SchoolSettings
from app.core.models.subject import Subject
from app.core.models.teacher import Teacher

__all__ = [
    "CONDITIONS_ID",
    "Classroom",
    "Condition",
    "SETTINGS_ID",
    "SchoolSettings",
    "Subject",
    "Teacher",
]
