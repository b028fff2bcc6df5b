"""
Tasks tab initializer.

Makes sure the spreadsheet is reachable, the Tasks tab exists and row 1 holds
the header before the task store reads or appends. Every step reads before it
writes, so running it against a ready spreadsheet costs two reads and no
mutations.
"""
import logging
from typing import Any, Callable, Optional

from drviva.errors import Result, classify_google_error
from drviva.models.task import TASK_HEADER

logger = logging.getLogger(__name__)

HEADER_BACKGROUND = {"red": 0.9, "green": 0.9, "blue": 0.9}


def _column_letter(count: int) -> str:
    # Header never grows past column Z
    return chr(ord("A") + count - 1)


class SheetBootstrap:
    def __init__(
        self,
        service_factory: Callable[[], Any],
        spreadsheet_id: str,
        sheet_name: str = "Tasks",
        cache_readiness: bool = False,
    ):
        self.service_factory = service_factory
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.cache_readiness = cache_readiness
        self._ready = False

    @property
    def header_range(self) -> str:
        return f"{self.sheet_name}!A1:{_column_letter(len(TASK_HEADER))}1"

    def invalidate(self) -> None:
        """Forget a cached successful run so the next call checks again."""
        self._ready = False

    def ensure_ready(self) -> Result[None]:
        if self.cache_readiness and self._ready:
            return Result.ok()

        try:
            service = self.service_factory()
        except Exception as e:
            logger.error(f"Could not create Google Sheets client: {e}")
            return Result.fail(classify_google_error(e, "Google Sheets client error"))

        # 1. spreadsheet reachable
        try:
            spreadsheet = service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id,
                fields="properties.title,sheets.properties",
            ).execute()
        except Exception as e:
            logger.error(f"Spreadsheet {self.spreadsheet_id} is not reachable: {e}")
            return Result.fail(classify_google_error(e, "Spreadsheet not reachable"))

        title = (spreadsheet.get("properties") or {}).get("title")
        logger.debug(f"Spreadsheet found: {title}")

        # 2. Tasks tab exists
        sheet_id = self._find_sheet_id(spreadsheet)
        if sheet_id is None:
            try:
                sheet_id = self._create_sheet(service)
            except Exception as e:
                logger.error(f"Could not create sheet '{self.sheet_name}': {e}")
                return Result.fail(classify_google_error(e, f"Could not create sheet '{self.sheet_name}'"))

        # 3. header row present
        try:
            self._ensure_header(service, sheet_id)
        except Exception as e:
            logger.error(f"Could not write header row to '{self.sheet_name}': {e}")
            return Result.fail(classify_google_error(e, "Could not write header row"))

        self._ready = True
        return Result.ok()

    def _find_sheet_id(self, spreadsheet: dict) -> Optional[int]:
        for sheet in spreadsheet.get("sheets", []):
            properties = sheet.get("properties") or {}
            if properties.get("title") == self.sheet_name:
                return properties.get("sheetId")
        return None

    def _create_sheet(self, service) -> Optional[int]:
        logger.info(f"Sheet '{self.sheet_name}' not found, creating it")
        response = service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={"requests": [{"addSheet": {"properties": {"title": self.sheet_name}}}]},
        ).execute()
        replies = response.get("replies") or [{}]
        return ((replies[0].get("addSheet") or {}).get("properties") or {}).get("sheetId")

    def _ensure_header(self, service, sheet_id: Optional[int]) -> None:
        values = service.spreadsheets().values()
        response = values.get(
            spreadsheetId=self.spreadsheet_id,
            range=self.header_range,
        ).execute()
        rows = response.get("values") or []
        header = [str(cell) for cell in rows[0]] if rows else []

        if header == TASK_HEADER:
            return

        if header and TASK_HEADER[:len(header)] != header:
            logger.warning(f"Unexpected header in '{self.sheet_name}': {header}; leaving it untouched")
            return

        values.update(
            spreadsheetId=self.spreadsheet_id,
            range=self.header_range,
            valueInputOption="USER_ENTERED",
            body={"values": [TASK_HEADER]},
        ).execute()

        if header:
            logger.info(f"Extended header of '{self.sheet_name}' from {len(header)} to {len(TASK_HEADER)} columns")
            return

        logger.info(f"Header row written to '{self.sheet_name}'")
        if sheet_id is None:
            return
        service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={"requests": [{
                "repeatCell": {
                    "range": {
                        "sheetId": sheet_id,
                        "startRowIndex": 0,
                        "endRowIndex": 1,
                        "startColumnIndex": 0,
                        "endColumnIndex": len(TASK_HEADER),
                    },
                    "cell": {
                        "userEnteredFormat": {
                            "textFormat": {"bold": True},
                            "backgroundColor": HEADER_BACKGROUND,
                        },
                    },
                    "fields": "userEnteredFormat(textFormat,backgroundColor)",
                },
            }]},
        ).execute()
