"""
Google Sheets task store - the Tasks tab used as a makeshift table.

Each task is one row ``[timestamp, title, description, status, scheduled date, id]``
(columns A-F, row 1 is the header). Every public method performs its remote
calls once, logs failures and hands back a ``Result`` instead of raising.
"""
import logging
import re
import uuid
from datetime import datetime
from typing import Any, Callable, List, Optional

from drviva.errors import ErrorKind, Result, ServiceError, classify_google_error
from drviva.models.task import NewTask, Task, TaskStatus

logger = logging.getLogger(__name__)

DATA_COLUMNS = "A:F"
STATUS_COLUMN = "D"
TIMESTAMP_FORMAT = "%m/%d/%Y, %H:%M:%S"

_UPDATED_ROW_RE = re.compile(r"![A-Z]+(\d+)")


def format_timestamp(moment: datetime) -> str:
    """Render a creation time the way the sheet has always stored it."""
    return moment.strftime(TIMESTAMP_FORMAT)


def _row_from_updated_range(updated_range: Optional[str]) -> int:
    if not updated_range:
        return 0
    match = _UPDATED_ROW_RE.search(updated_range)
    return int(match.group(1)) if match else 0


def _is_blank(values: list) -> bool:
    return all(not str(v).strip() for v in values)


class TaskSheetStore:
    def __init__(
        self,
        service_factory: Callable[[], Any],
        spreadsheet_id: str,
        sheet_name: str = "Tasks",
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.service_factory = service_factory
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.clock = clock or datetime.now
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def _range(self, a1: str) -> str:
        return f"{self.sheet_name}!{a1}"

    def _values(self):
        return self.service_factory().spreadsheets().values()

    def _read_rows(self) -> List[list]:
        response = self._values().get(
            spreadsheetId=self.spreadsheet_id,
            range=self._range(DATA_COLUMNS),
        ).execute()
        return response.get("values", [])

    def _write_status(self, row_index: int, new_status: str) -> None:
        self._values().update(
            spreadsheetId=self.spreadsheet_id,
            range=self._range(f"{STATUS_COLUMN}{row_index}"),
            valueInputOption="USER_ENTERED",
            body={"values": [[new_status]]},
        ).execute()

    def append_row(self, task: NewTask) -> Result[Task]:
        try:
            timestamp = format_timestamp(self.clock())
            task_id = self.id_factory()
            row = [
                timestamp,
                task.title,
                task.description,
                task.status or TaskStatus.PENDING.value,
                task.scheduled_date or "",
                task_id,
            ]
            logger.debug(f"Appending row to {self.sheet_name}: {row}")

            # RAW keeps ids and timestamps as the exact strings written

            response = self._values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(DATA_COLUMNS),
                valueInputOption="RAW",
                body={"values": [row]},
            ).execute()

            row_number = _row_from_updated_range(
                (response.get("updates") or {}).get("updatedRange")
            )
            logger.info(f"Appended task {task_id} at row {row_number or '?'}")
            return Result.ok(Task.from_row(row, row_number))
        except Exception as e:
            logger.error(f"Google Sheets append failed: {e}")
            return Result.fail(classify_google_error(e, "Google Sheets error"))

    def update_cell(self, row_index: int, new_status: str) -> Result[None]:
        """Overwrite the status cell of a task addressed by its row number."""
        if row_index < 2:
            return Result.fail(ServiceError(
                ErrorKind.VALIDATION,
                f"Row {row_index} is not a task row (row 1 is the header)",
            ))
        try:
            rows = self._read_rows()
            if row_index > len(rows):
                return Result.fail(ServiceError(ErrorKind.NOT_FOUND, f"Row {row_index} does not exist"))
            self._write_status(row_index, new_status)
            logger.info(f"Row {row_index} status set to '{new_status}'")
            return Result.ok()
        except Exception as e:
            logger.error(f"Google Sheets status update failed for row {row_index}: {e}")
            return Result.fail(classify_google_error(e, "Google Sheets error"))

    def update_status(self, task_id: str, new_status: str) -> Result[None]:
        """Overwrite the status cell of the task carrying ``task_id``."""
        try:
            rows = self._read_rows()
            row_index = None
            for index, values in enumerate(rows[1:], start=2):
                if Task.from_row(values, index).id == task_id:
                    row_index = index
                    break
            if row_index is None:
                return Result.fail(ServiceError(ErrorKind.NOT_FOUND, f"Task {task_id} not found"))

            self._write_status(row_index, new_status)
            logger.info(f"Task {task_id} (row {row_index}) status set to '{new_status}'")
            return Result.ok()
        except Exception as e:
            logger.error(f"Google Sheets status update failed for task {task_id}: {e}")
            return Result.fail(classify_google_error(e, "Google Sheets error"))

    def list_all(self) -> Result[List[Task]]:
        try:
            rows = self._read_rows()
            tasks = [
                Task.from_row(values, index)
                for index, values in enumerate(rows[1:], start=2)
                if not _is_blank(values)
            ]
            logger.debug(f"Read {len(tasks)} tasks from {self.sheet_name}")
            return Result.ok(tasks)
        except Exception as e:
            logger.error(f"Google Sheets read failed: {e}")
            return Result.fail(classify_google_error(e, "Google Sheets error"))


__all__ = ["TaskSheetStore", "format_timestamp"]
