"""
Google Drive API endpoints - browse study folders and upload session material.
"""
import os
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Query
from starlette.concurrency import run_in_threadpool

from drviva.errors import ErrorKind, ServiceError
from drviva.google_api import get_drive_service
from drviva.models.drive_file import DriveFile
from drviva.services.drive_service import DriveService

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50 MB

ALLOWED_EXTENSIONS = {
    ".txt", ".csv", ".md", ".pdf",
    ".doc", ".docx", ".ppt", ".pptx", ".xls", ".xlsx",
    ".jpg", ".jpeg", ".png", ".gif", ".webp",
    ".mp3", ".mp4",
}

router = APIRouter()


def _drive_http_error(e: ServiceError) -> HTTPException:
    status = {ErrorKind.VALIDATION: 400, ErrorKind.NOT_FOUND: 404}.get(e.kind, 502)
    return HTTPException(status, e.message)


# ─── Endpoints ───

@router.get("/files", response_model=List[DriveFile])
async def list_files(
    q: str = Query(""),
    page_size: int = Query(20, ge=1, le=1000),
    drive: DriveService = Depends(get_drive_service),
):
    """List Drive files matching a Drive search query."""
    try:
        return await run_in_threadpool(drive.list_files, q, page_size)
    except ServiceError as e:
        raise _drive_http_error(e)


@router.get("/folders", response_model=List[DriveFile])
async def list_folders(drive: DriveService = Depends(get_drive_service)):
    """List Drive folders."""
    try:
        return await run_in_threadpool(drive.list_folders)
    except ServiceError as e:
        raise _drive_http_error(e)


@router.get("/subjects", response_model=Dict[str, str])
async def subject_folders(drive: DriveService = Depends(get_drive_service)):
    """Configured subject -> folder id mapping."""
    return drive.subject_folder_map


@router.post("/upload", response_model=DriveFile)
async def upload_file(
    file: UploadFile = File(...),
    folder_id: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    drive: DriveService = Depends(get_drive_service),
):
    """Upload a file into a folder, given directly or through its subject."""
    if not folder_id and not subject:
        raise HTTPException(400, "folder_id or subject is required")

    ext = os.path.splitext(file.filename or "file")[1].lower()
    if ext and ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(400, f"File type '{ext}' not allowed.")

    content = await file.read()
    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(413, f"File too large. Maximum size: {MAX_FILE_SIZE // (1024 * 1024)}MB")

    try:
        if not folder_id:
            folder_id = drive.get_folder_id_for_subject(subject) or await run_in_threadpool(
                drive.ensure_folder_for_subject, subject
            )
        return await run_in_threadpool(
            drive.upload_file, file.filename or "file", content, folder_id, file.content_type
        )
    except ServiceError as e:
        raise _drive_http_error(e)
