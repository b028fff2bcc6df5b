"""
Drive file metadata - read-only projection of a Google Drive files resource
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
GOOGLE_APPS_MIME_PREFIX = "application/vnd.google-apps."


class DriveFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    mime_type: str = Field(default="application/octet-stream", alias="mimeType")
    parents: List[str] = []

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE

    @property
    def is_google_document(self) -> bool:
        return self.mime_type.startswith(GOOGLE_APPS_MIME_PREFIX) and not self.is_folder
