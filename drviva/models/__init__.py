from drviva.models.task import Task, NewTask, TaskStatus, TASK_HEADER
from drviva.models.drive_file import DriveFile, FOLDER_MIME_TYPE
from drviva.models.study_session import StudySession, DaySchedule, SessionRef, slot_key

__all__ = [
    "Task",
    "NewTask",
    "TaskStatus",
    "TASK_HEADER",
    "DriveFile",
    "FOLDER_MIME_TYPE",
    "StudySession",
    "DaySchedule",
    "SessionRef",
    "slot_key",
]
