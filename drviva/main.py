"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from drviva.config import get_settings
from drviva.api import tasks, track_plan, drive, oauth
from drviva.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.GOOGLE_CLIENT_EMAIL or not settings.GOOGLE_PRIVATE_KEY:
        logger.warning("Google service account not configured - task and Drive calls will fail")
    else:
        logger.info(f"Tasks sheet: {settings.SPREADSHEET_ID} / '{settings.TASKS_SHEET_NAME}'")
    if settings.SUBJECT_FOLDER_MAP:
        logger.info(f"Subject folders configured: {', '.join(sorted(settings.SUBJECT_FOLDER_MAP))}")
    if not settings.GOOGLE_CLIENT_ID:
        logger.info("GOOGLE_CLIENT_ID not set - OAuth callback disabled")

    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(track_plan.router, prefix="/api/track-plan", tags=["Track Plan"])
app.include_router(drive.router, prefix="/api/drive", tags=["Drive"])
app.include_router(oauth.router, prefix="/api/oauth", tags=["OAuth"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "drviva.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
