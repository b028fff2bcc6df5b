"""
Weekly study plan kept in process memory.

Sessions and their attachments are UI state: nothing here is persisted and a
restart brings back the default week. Each session slot holds at most one
attachment; attaching again replaces it.
"""
import threading
from typing import List, Optional

from drviva.errors import ErrorKind, ServiceError
from drviva.models.drive_file import DriveFile
from drviva.models.study_session import DaySchedule, SessionRef, StudySession, slot_key

DEFAULT_WEEK = [
    ("Monday", [("9:00 AM - 11:00 AM", "Anatomy & Histology"), ("1:00 PM - 3:00 PM", "Physiology")]),
    ("Tuesday", [("10:00 AM - 12:00 PM", "Biochemistry"), ("2:00 PM - 4:00 PM", "Medical Ethics")]),
    ("Wednesday", [("9:00 AM - 11:00 AM", "Physiology"), ("1:00 PM - 3:00 PM", "Anatomy & Histology")]),
    ("Thursday", [("10:00 AM - 12:00 PM", "Medical Ethics"), ("2:00 PM - 4:00 PM", "Biochemistry")]),
    ("Friday", [("9:00 AM - 12:00 PM", "Anatomy & Histology"), ("2:00 PM - 4:00 PM", "Physiology")]),
]


def default_schedule() -> List[DaySchedule]:
    return [
        DaySchedule(day=day, sessions=[StudySession(time=t, subject=s) for t, s in sessions])
        for day, sessions in DEFAULT_WEEK
    ]


class StudyPlan:
    def __init__(self, days: Optional[List[DaySchedule]] = None):
        self._days = days if days is not None else default_schedule()
        self._lock = threading.Lock()

    def schedule(self) -> List[DaySchedule]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._days]

    def _find_day(self, day: str) -> Optional[DaySchedule]:
        for entry in self._days:
            if entry.day == day:
                return entry
        return None

    def _get_session(self, day: str, index: int) -> StudySession:
        entry = self._find_day(day)
        if entry is None or not 0 <= index < len(entry.sessions):
            raise ServiceError(ErrorKind.NOT_FOUND, f"No session {index} on {day}")
        return entry.sessions[index]

    def add_session(self, day: str, session: StudySession) -> str:
        """Append a session to ``day`` and return its slot key."""
        if not day.strip() or not session.subject.strip() or not session.time.strip():
            raise ServiceError(ErrorKind.VALIDATION, "Day, subject and time are required")
        with self._lock:
            entry = self._find_day(day)
            if entry is None:
                entry = DaySchedule(day=day, sessions=[])
                self._days.append(entry)
            entry.sessions.append(session)
            return slot_key(day, len(entry.sessions) - 1, session.subject)

    def attach_file(self, day: str, index: int, drive_file: DriveFile) -> StudySession:
        with self._lock:
            session = self._get_session(day, index)
            session.attachment = drive_file
            return session.model_copy(deep=True)

    def detach_file(self, day: str, index: int) -> StudySession:
        with self._lock:
            session = self._get_session(day, index)
            session.attachment = None
            return session.model_copy(deep=True)

    def attachment_for(self, key: str) -> Optional[DriveFile]:
        with self._lock:
            for entry in self._days:
                for index, session in enumerate(entry.sessions):
                    if slot_key(entry.day, index, session.subject) == key:
                        return session.attachment
        return None

    def export_refs(self, day: Optional[str] = None) -> List[SessionRef]:
        with self._lock:
            return [
                SessionRef(
                    day=entry.day,
                    time=session.time,
                    subject=session.subject,
                    instructor=session.instructor or None,
                    file_id=session.attachment.id if session.attachment else None,
                )
                for entry in self._days
                if day is None or entry.day == day
                for session in entry.sessions
            ]
