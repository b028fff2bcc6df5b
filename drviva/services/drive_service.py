"""
Google Drive adapter: file listing, uploads, subject folders and the file
lookup behind the study-session export.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from googleapiclient.http import MediaInMemoryUpload

from drviva.errors import ErrorKind, ServiceError, classify_google_error
from drviva.models.drive_file import DriveFile, FOLDER_MIME_TYPE
from drviva.models.study_session import SessionRef
from drviva.services.session_export import SessionFile

logger = logging.getLogger(__name__)

FILE_FIELDS = "id, name, mimeType, parents"
EXPORT_MIME_TYPE = "application/pdf"


def quote_literal(value: str) -> str:
    """Quote a value for use inside a Drive ``q`` expression."""
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class DriveService:
    def __init__(
        self,
        service_factory: Callable[[], Any],
        subject_folder_map: Optional[Dict[str, str]] = None,
    ):
        self.service_factory = service_factory
        self.subject_folder_map: Dict[str, str] = dict(subject_folder_map or {})

    def _execute(self, action: str, call: Callable[[Any], Any]) -> Any:
        try:
            return call(self.service_factory())
        except Exception as e:
            logger.error(f"Google Drive {action} failed: {e}")
            raise classify_google_error(e, f"Google Drive error ({action})") from e

    # ─── Listing ───

    def list_files(self, query: str = "", page_size: int = 20) -> List[DriveFile]:
        params = {"pageSize": page_size, "fields": f"files({FILE_FIELDS})"}
        if query:
            params["q"] = query
        response = self._execute("list files", lambda s: s.files().list(**params).execute())
        return [DriveFile.model_validate(f) for f in response.get("files", [])]

    def list_folders(self) -> List[DriveFile]:
        return self.list_files(f"mimeType = '{FOLDER_MIME_TYPE}' and trashed = false")

    def list_folder_contents(self, folder_id: str) -> List[DriveFile]:
        """All non-folder files directly inside ``folder_id``, across pages."""
        query = f"{quote_literal(folder_id)} in parents and trashed = false"
        files: List[DriveFile] = []
        page_token: Optional[str] = None
        while True:
            response = self._execute(
                "list folder",
                lambda s: s.files().list(
                    q=query,
                    pageSize=100,
                    pageToken=page_token,
                    fields=f"nextPageToken, files({FILE_FIELDS})",
                ).execute(),
            )
            files.extend(DriveFile.model_validate(f) for f in response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return [f for f in files if not f.is_folder]

    def get_file(self, file_id: str) -> DriveFile:
        metadata = self._execute(
            "get file",
            lambda s: s.files().get(fileId=file_id, fields=FILE_FIELDS).execute(),
        )
        return DriveFile.model_validate(metadata)

    # ─── Upload / folders ───

    def upload_file(
        self,
        name: str,
        content: bytes,
        folder_id: str,
        mime_type: Optional[str] = None,
    ) -> DriveFile:
        media = MediaInMemoryUpload(
            content,
            mimetype=mime_type or "application/octet-stream",
            resumable=False,
        )
        created = self._execute(
            "upload",
            lambda s: s.files().create(
                body={"name": name, "parents": [folder_id]},
                media_body=media,
                fields=FILE_FIELDS,
            ).execute(),
        )
        logger.info(f"Uploaded '{name}' to folder {folder_id} ({len(content)} bytes)")
        return DriveFile.model_validate(created)

    def set_subject_folder_map(self, mapping: Dict[str, str]) -> None:
        self.subject_folder_map = dict(mapping)

    def get_folder_id_for_subject(self, subject: str) -> Optional[str]:
        return self.subject_folder_map.get(subject)

    def find_folder(self, name: str, parent_id: Optional[str] = None) -> Optional[str]:
        query = f"mimeType = '{FOLDER_MIME_TYPE}' and name = {quote_literal(name)} and trashed = false"
        if parent_id:
            query += f" and {quote_literal(parent_id)} in parents"
        folders = self.list_files(query, page_size=1)
        return folders[0].id if folders else None

    def ensure_folder_for_subject(self, subject: str, parent_id: Optional[str] = None) -> str:
        existing = self.find_folder(subject, parent_id)
        if existing:
            return existing

        body = {"name": subject, "mimeType": FOLDER_MIME_TYPE}
        if parent_id:
            body["parents"] = [parent_id]
        created = self._execute(
            "create folder",
            lambda s: s.files().create(body=body, fields="id").execute(),
        )
        logger.info(f"Created Drive folder for subject '{subject}': {created.get('id')}")
        return created["id"]

    # ─── Session export ───

    def resolve_subject_folder(self, subject: str) -> Optional[str]:
        return self.get_folder_id_for_subject(subject) or self.find_folder(subject)

    def download(self, drive_file: DriveFile) -> SessionFile:
        """Fetch file content; Google Docs/Sheets/Slides are exported as PDF."""
        if drive_file.is_folder:
            raise ServiceError(ErrorKind.VALIDATION, f"'{drive_file.name}' is a folder")

        if drive_file.is_google_document:
            content = self._execute(
                "export",
                lambda s: s.files().export_media(fileId=drive_file.id, mimeType=EXPORT_MIME_TYPE).execute(),
            )
            name = drive_file.name
            if not name.lower().endswith(".pdf"):
                name += ".pdf"
            return SessionFile(name=name, content=content)

        content = self._execute(
            "download",
            lambda s: s.files().get_media(fileId=drive_file.id).execute(),
        )
        return SessionFile(name=drive_file.name, content=content)

    def files_for_session(self, session: SessionRef) -> List[SessionFile]:
        if session.file_id:
            return [self.download(self.get_file(session.file_id))]

        folder_id = self.resolve_subject_folder(session.subject)
        if not folder_id:
            logger.info(f"No Drive folder for subject '{session.subject}'")
            return []
        return [self.download(f) for f in self.list_folder_contents(folder_id)]
