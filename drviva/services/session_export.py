"""
Session export bundler - packs the Drive files behind selected study sessions
into one ZIP archive.

The archive is built completely in memory and closed before anything is sent
to the client, so a failed Drive download surfaces as an error response
instead of a truncated download.
"""
import io
import posixpath
import shutil
import zipfile
from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Optional, Protocol, Sequence, Set

from pydantic import ValidationError

from drviva.errors import ErrorKind, ServiceError
from drviva.models.study_session import SessionRef
from drviva.utils.logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class SessionFile:
    """One file to place in the archive, given as bytes or as a readable stream"""
    name: str
    content: Optional[bytes] = None
    stream: Optional[BinaryIO] = None


class SessionFileResolver(Protocol):
    def files_for_session(self, session: SessionRef) -> List[SessionFile]:
        ...


def parse_sessions(payload) -> List[SessionRef]:
    """Validate an export request body ``{"sessions": [...]}``.

    A missing, empty or non-list ``sessions`` is a validation error; a malformed
    entry raises ``ValueError``.
    """
    sessions = payload.get("sessions") if isinstance(payload, dict) else None
    if not isinstance(sessions, list) or not sessions:
        raise ServiceError(ErrorKind.VALIDATION, "No sessions provided")

    refs = []
    for index, item in enumerate(sessions):
        try:
            refs.append(SessionRef.model_validate(item))
        except ValidationError as e:
            raise ValueError(f"Invalid session at index {index}: {e.errors()[0]['msg']}") from e
    return refs


def _safe_part(value: str) -> str:
    return str(value).replace("/", "_").replace("\\", "_").strip()


def entry_name(session: SessionRef, filename: str) -> str:
    return f"{_safe_part(session.day)}_{_safe_part(session.time)}_{_safe_part(filename)}"


def unique_entry_name(name: str, used: Set[str]) -> str:
    """Suffix repeated archive names: ``notes.pdf``, ``notes (2).pdf``, ..."""
    if name not in used:
        used.add(name)
        return name
    stem, ext = posixpath.splitext(name)
    counter = 2
    while f"{stem} ({counter}){ext}" in used:
        counter += 1
    candidate = f"{stem} ({counter}){ext}"
    used.add(candidate)
    return candidate


class SessionExportBundler:
    def __init__(self, resolver: SessionFileResolver, compression_level: int = 9):
        self.resolver = resolver
        self.compression_level = compression_level

    def build_archive(self, sessions: Sequence[SessionRef]) -> bytes:
        if not isinstance(sessions, (list, tuple)) or not sessions:
            raise ServiceError(ErrorKind.VALIDATION, "No sessions provided")

        buffer = io.BytesIO()
        used: Set[str] = set()
        count = 0

        with zipfile.ZipFile(
            buffer, "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compression_level,
        ) as archive:
            for session in sessions:
                files = self.resolver.files_for_session(session)
                logger.debug(f"{session.day} {session.time} {session.subject}: {len(files)} file(s)")
                for session_file in files:
                    name = unique_entry_name(entry_name(session, session_file.name), used)
                    if self._append(archive, name, session_file):
                        count += 1

        logger.info(f"Built session archive: {len(sessions)} session(s), {count} file(s), {buffer.tell()} bytes")
        return buffer.getvalue()

    def _append(self, archive: zipfile.ZipFile, name: str, session_file: SessionFile) -> bool:
        if session_file.content is not None:
            archive.writestr(name, session_file.content)
            return True
        if session_file.stream is not None:
            try:
                with archive.open(name, "w") as target:
                    shutil.copyfileobj(session_file.stream, target, CHUNK_SIZE)
            finally:
                session_file.stream.close()
            return True
        logger.warning(f"Skipping '{session_file.name}': no content")
        return False


def iter_chunks(data: bytes, size: int = CHUNK_SIZE) -> Iterable[bytes]:
    for start in range(0, len(data), size):
        yield data[start:start + size]
