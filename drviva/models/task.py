"""
Task model - one row of the Tasks spreadsheet tab
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


# Column order of the Tasks tab (A..F)
TASK_HEADER = ["Timestamp", "Title", "Description", "Status", "Scheduled Date", "ID"]


class NewTask(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    status: Optional[str] = None
    scheduled_date: Optional[str] = Field(default=None, alias="scheduledDate")


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    row: int
    timestamp: str = ""
    title: str = ""
    description: str = ""
    status: str = TaskStatus.PENDING.value
    scheduled_date: str = Field(default="", alias="scheduledDate")

    @classmethod
    def from_row(cls, values: list, row: int) -> "Task":
        """Build a task from a sheet row; short rows degrade to empty fields."""
        cells = [str(v) if v is not None else "" for v in values]
        cells += [""] * (len(TASK_HEADER) - len(cells))
        return cls(
            id=cells[5] or str(row),
            row=row,
            timestamp=cells[0],
            title=cells[1],
            description=cells[2],
            status=cells[3] or TaskStatus.PENDING.value,
            scheduled_date=cells[4],
        )
