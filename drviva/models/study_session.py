"""
Study plan models - weekly sessions and export references
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from drviva.models.drive_file import DriveFile


def slot_key(day: str, index: int, subject: str) -> str:
    """Composite key identifying one session slot in the weekly plan."""
    return f"{day}__{index}__{subject}"


class StudySession(BaseModel):
    time: str
    subject: str
    instructor: str = ""
    attachment: Optional[DriveFile] = None


class DaySchedule(BaseModel):
    day: str
    sessions: List[StudySession] = []


class SessionRef(BaseModel):
    """A session selected for export"""
    model_config = ConfigDict(populate_by_name=True)

    day: str
    time: str
    subject: str
    instructor: Optional[str] = None
    file_id: Optional[str] = Field(default=None, alias="fileId")
