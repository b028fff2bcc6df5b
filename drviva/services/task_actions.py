"""
Task actions - the only read/write paths from the UI to the Tasks sheet.

Each action validates its input, runs the sheet bootstrap where needed and
turns adapter failures into a uniform ``ActionResult``. Nothing is retried.
"""
import logging
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from drviva.errors import ErrorKind, ServiceError
from drviva.models.task import NewTask, Task, TaskStatus
from drviva.services.sheet_bootstrap import SheetBootstrap
from drviva.services.sheets_store import TaskSheetStore

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in TaskStatus]


class ActionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = Field(default=None, alias="errorKind")
    task: Optional[Task] = None
    tasks: Optional[List[Task]] = None

    @classmethod
    def failure(cls, error: ServiceError, prefix: str = "", **extra) -> "ActionResult":
        message = f"{prefix}{error.message}" if prefix else error.message
        return cls(success=False, error=message, error_kind=error.kind, **extra)


def _validate_status(status: Optional[str]) -> Optional[ServiceError]:
    if status not in VALID_STATUSES:
        return ServiceError(
            ErrorKind.VALIDATION,
            f"Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}",
        )
    return None


def _text(fields: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = fields.get(name)
        if value is not None:
            return str(value).strip()
    return ""


class TaskActions:
    def __init__(self, store: TaskSheetStore, bootstrap: SheetBootstrap):
        self.store = store
        self.bootstrap = bootstrap

    def create_task(self, fields: Mapping[str, Any]) -> ActionResult:
        try:
            title = _text(fields, "title")
            description = _text(fields, "description")
            if not title or not description:
                return ActionResult.failure(
                    ServiceError(ErrorKind.VALIDATION, "Title and description are required")
                )

            status = _text(fields, "status") or TaskStatus.PENDING.value
            invalid = _validate_status(status)
            if invalid:
                return ActionResult.failure(invalid)

            init = self.bootstrap.ensure_ready()
            if not init.success:
                return ActionResult.failure(init.error, prefix="Failed to initialize sheet: ")

            result = self.store.append_row(NewTask(
                title=title,
                description=description,
                status=status,
                scheduled_date=_text(fields, "scheduled_date", "scheduledDate") or None,
            ))
            if not result.success:
                self.bootstrap.invalidate()
                return ActionResult.failure(result.error)

            return ActionResult(success=True, message="Task created successfully!", task=result.value)
        except Exception as e:
            logger.exception(f"Error in create_task: {e}")
            return ActionResult(success=False, error=f"Server error: {e}", error_kind=ErrorKind.INTERNAL)

    def set_task_status(self, task_id: str, status: str) -> ActionResult:
        try:
            if not str(task_id or "").strip():
                return ActionResult.failure(ServiceError(ErrorKind.VALIDATION, "Task id is required"))
            invalid = _validate_status(status)
            if invalid:
                return ActionResult.failure(invalid)

            result = self.store.update_status(str(task_id).strip(), status)
            if not result.success:
                if result.error.kind != ErrorKind.NOT_FOUND:
                    self.bootstrap.invalidate()
                return ActionResult.failure(result.error)

            return ActionResult(success=True, message="Task status updated successfully!")
        except Exception as e:
            logger.exception(f"Error in set_task_status: {e}")
            return ActionResult(success=False, error=f"Server error: {e}", error_kind=ErrorKind.INTERNAL)

    def list_tasks(self) -> ActionResult:
        try:
            init = self.bootstrap.ensure_ready()
            if not init.success:
                return ActionResult.failure(init.error, prefix="Failed to initialize sheet: ", tasks=[])

            result = self.store.list_all()
            if not result.success:
                self.bootstrap.invalidate()
                return ActionResult.failure(result.error, tasks=[])

            return ActionResult(success=True, tasks=result.value)
        except Exception as e:
            logger.exception(f"Error in list_tasks: {e}")
            return ActionResult(success=False, error=f"Server error: {e}", error_kind=ErrorKind.INTERNAL, tasks=[])
