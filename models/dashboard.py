# models/dashboard.py
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from models.student import StudentSummary


class StudentFilter(BaseModel):
    """Dashboard search and filter selections, passed by value."""
    model_config = ConfigDict(frozen=True)

    search_term: str = ""
    status: Literal["all", "ACTIVE", "INACTIVE"] = "all"
    course: str = "all"

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        # The dashboard select sends "active"/"inactive"
        if isinstance(value, str) and value.lower() != "all":
            return value.upper()
        if isinstance(value, str):
            return "all"
        return value


class StudentStats(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    uniqueCourses: List[str] = []


class Dashboard(BaseModel):
    students: List[StudentSummary]
    stats: StudentStats
