"""
Tasks sheet setup script
"""
import sys

from drviva.config import get_settings
from drviva.google_api import get_task_actions


def init_sheet() -> int:
    """Create the Tasks tab and header row if they are missing"""
    settings = get_settings()
    print(f"Checking spreadsheet {settings.SPREADSHEET_ID}...")

    result = get_task_actions().bootstrap.ensure_ready()
    if not result.success:
        print(f"Sheet initialization failed ({result.error.kind.value}): {result.error.message}")
        return 1

    print(f"Sheet '{settings.TASKS_SHEET_NAME}' is ready")
    return 0


if __name__ == "__main__":
    sys.exit(init_sheet())
