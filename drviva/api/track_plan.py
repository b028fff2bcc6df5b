"""
Track-plan API endpoints - weekly study schedule, session attachments and the
ZIP export of session files
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from drviva.config import get_settings
from drviva.errors import ErrorKind, ServiceError
from drviva.google_api import get_drive_service, get_session_bundler, get_study_plan
from drviva.models.drive_file import DriveFile
from drviva.models.study_session import DaySchedule, SessionRef, StudySession
from drviva.services.drive_service import DriveService
from drviva.services.session_export import SessionExportBundler, iter_chunks, parse_sessions
from drviva.services.study_plan import StudyPlan

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Schemas ───

class SessionCreate(BaseModel):
    day: str
    time: str
    subject: str
    instructor: str = ""


class SessionCreated(BaseModel):
    key: str
    session: StudySession


class AttachmentSelect(BaseModel):
    file_id: str


class PlanExportRequest(BaseModel):
    day: Optional[str] = None


# ─── Helpers ───

async def _export(bundler: SessionExportBundler, sessions: List[SessionRef]):
    settings = get_settings()
    try:
        archive = await run_in_threadpool(bundler.build_archive, sessions)
    except ServiceError as e:
        if e.kind == ErrorKind.VALIDATION:
            return PlainTextResponse(e.message, status_code=400)
        logger.error(f"ZIP export error: {e.message}")
        return PlainTextResponse("Failed to export ZIP", status_code=500)
    except Exception as e:
        logger.exception(f"ZIP export error: {e}")
        return PlainTextResponse("Failed to export ZIP", status_code=500)

    headers = {"Content-Disposition": f'attachment; filename="{settings.EXPORT_ARCHIVE_NAME}"'}
    return StreamingResponse(iter_chunks(archive), media_type="application/zip", headers=headers)


def _raise_http(e: ServiceError):
    status = {ErrorKind.VALIDATION: 400, ErrorKind.NOT_FOUND: 404}.get(e.kind, 502)
    raise HTTPException(status, e.message)


# ─── Endpoints ───

@router.post("/export-sessions-zip")
async def export_sessions_zip(
    request: Request,
    bundler: SessionExportBundler = Depends(get_session_bundler),
):
    """
    Bundle the Drive files of the given sessions into one ZIP archive.
    Body: { "sessions": [{ "day", "time", "subject", "instructor"?, "fileId"? }, ...] }
    """
    try:
        payload = await request.json()
        sessions = parse_sessions(payload)
    except ServiceError as e:
        return PlainTextResponse(e.message, status_code=400)
    except ValueError as e:
        logger.error(f"ZIP export error: malformed request: {e}")
        return PlainTextResponse("Failed to export ZIP", status_code=500)

    return await _export(bundler, sessions)


@router.get("/schedule", response_model=List[DaySchedule])
async def get_schedule(plan: StudyPlan = Depends(get_study_plan)):
    """Current weekly study schedule"""
    return plan.schedule()


@router.post("/sessions", response_model=SessionCreated)
async def add_session(data: SessionCreate, plan: StudyPlan = Depends(get_study_plan)):
    """Add a study session to a day"""
    session = StudySession(time=data.time, subject=data.subject, instructor=data.instructor)
    try:
        key = plan.add_session(data.day, session)
    except ServiceError as e:
        _raise_http(e)
    return SessionCreated(key=key, session=session)


@router.put("/sessions/{day}/{index}/attachment", response_model=StudySession)
async def attach_session_file(
    day: str,
    index: int,
    data: AttachmentSelect,
    plan: StudyPlan = Depends(get_study_plan),
    drive: DriveService = Depends(get_drive_service),
):
    """Attach a Drive file to a session slot, replacing any previous one"""
    try:
        drive_file: DriveFile = await run_in_threadpool(drive.get_file, data.file_id)
        return plan.attach_file(day, index, drive_file)
    except ServiceError as e:
        _raise_http(e)


@router.delete("/sessions/{day}/{index}/attachment", response_model=StudySession)
async def detach_session_file(day: str, index: int, plan: StudyPlan = Depends(get_study_plan)):
    """Remove the attachment from a session slot"""
    try:
        return plan.detach_file(day, index)
    except ServiceError as e:
        _raise_http(e)


@router.post("/export")
async def export_plan(
    data: PlanExportRequest,
    plan: StudyPlan = Depends(get_study_plan),
    bundler: SessionExportBundler = Depends(get_session_bundler),
):
    """Export the plan's own sessions (optionally one day) as a ZIP archive"""
    return await _export(bundler, plan.export_refs(data.day))


@router.get("/attachments/{key}", response_model=DriveFile)
async def get_slot_attachment(key: str, plan: StudyPlan = Depends(get_study_plan)):
    """Attachment of the session slot ``day__index__subject``"""
    attachment = plan.attachment_for(key)
    if attachment is None:
        raise HTTPException(404, f"No attachment for slot '{key}'")
    return attachment
