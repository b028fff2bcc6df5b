"""
Task API endpoints - study tasks stored in the Google Sheets Tasks tab
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from drviva.errors import ErrorKind
from drviva.google_api import get_task_actions
from drviva.services.task_actions import ActionResult, TaskActions

router = APIRouter()

ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.AUTH: 502,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.INTERNAL: 500,
}


# --- Pydantic Schemas ---

class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    scheduled_date: Optional[str] = Field(default=None, alias="scheduledDate")


class TaskStatusUpdate(BaseModel):
    status: str


# --- Helper ---

def _respond(result: ActionResult) -> JSONResponse:
    status_code = 200 if result.success else ERROR_STATUS.get(result.error_kind, 500)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


# --- Endpoints ---

@router.get("/")
async def list_tasks(actions: TaskActions = Depends(get_task_actions)):
    """List all tasks in sheet order"""
    result = await run_in_threadpool(actions.list_tasks)
    return _respond(result)


@router.post("/")
async def create_task(data: TaskCreate, actions: TaskActions = Depends(get_task_actions)):
    """Append a new task (status defaults to Pending)"""
    result = await run_in_threadpool(actions.create_task, data.model_dump())
    return _respond(result)


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    data: TaskStatusUpdate,
    actions: TaskActions = Depends(get_task_actions),
):
    """Overwrite a task's status"""
    result = await run_in_threadpool(actions.set_task_status, task_id, data.status)
    return _respond(result)
