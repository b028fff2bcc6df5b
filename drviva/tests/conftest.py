"""
Test fixtures - in-memory Sheets/Drive fakes + HTTP client bound to the app
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from drviva.google_api import get_drive_service, get_study_plan, get_task_actions
from drviva.main import app
from drviva.models.task import TASK_HEADER
from drviva.services.drive_service import DriveService
from drviva.services.study_plan import StudyPlan
from drviva.tests.fakes import FakeDriveService, FakeSheetsService, make_actions


@pytest.fixture()
def sheets():
    """Spreadsheet with no Tasks tab yet"""
    return FakeSheetsService()


@pytest.fixture()
def ready_sheets():
    """Spreadsheet whose Tasks tab already has its header row"""
    return FakeSheetsService(sheets={"Tasks": [list(TASK_HEADER)]})


@pytest.fixture()
def task_actions(sheets):
    return make_actions(sheets)


@pytest.fixture()
def drive_fake():
    """Drive with an Anatomy folder holding two files and an empty Physiology folder"""
    fake = FakeDriveService()
    anatomy = fake.add_folder("Anatomy & Histology", file_id="folder-anatomy")
    fake.add_folder("Physiology", file_id="folder-physiology")
    fake.add("Upper Limb.pdf", parents=[anatomy], content=b"upper limb notes", file_id="file-upper-limb")
    fake.add("Histology Atlas", "application/vnd.google-apps.document", [anatomy],
             content=b"atlas", file_id="doc-atlas")
    return fake


@pytest.fixture()
def drive(drive_fake):
    return DriveService(lambda: drive_fake, {"Anatomy & Histology": "folder-anatomy"})


@pytest_asyncio.fixture()
async def client(ready_sheets, drive):
    """httpx AsyncClient bound to the FastAPI app with fake Google services"""
    actions = make_actions(ready_sheets)
    plan = StudyPlan()

    app.dependency_overrides[get_task_actions] = lambda: actions
    app.dependency_overrides[get_drive_service] = lambda: drive
    app.dependency_overrides[get_study_plan] = lambda: plan

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
