"""
Configuration management for the Dr Viva study platform backend
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Dr Viva Study Platform"
    APP_VERSION: str = "2.0.0"
    DEBUG: bool = False

    # Google Sheets task store (service account)
    GOOGLE_CLIENT_EMAIL: str = ""
    GOOGLE_PRIVATE_KEY: str = ""
    SPREADSHEET_ID: str = "1R7U3iKwTgxLONcliIXqZR45LV8S_aHf_J8Mqam9eWYo"
    TASKS_SHEET_NAME: str = "Tasks"
    SHEET_READINESS_CACHE: bool = False  # remember a successful bootstrap for the process lifetime

    # Google Drive (OAuth client used by the study-plan file picker)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/api/oauth/callback"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"

    # Subject name -> Drive folder id
    SUBJECT_FOLDER_MAP: dict[str, str] = {}

    # Session export
    EXPORT_ARCHIVE_NAME: str = "sessions.zip"
    EXPORT_COMPRESSION_LEVEL: int = 9

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
