"""
Sheet bootstrap tests - tab creation, header row and idempotence.
"""
from drviva.errors import ErrorKind
from drviva.models.task import TASK_HEADER
from drviva.services.sheet_bootstrap import SheetBootstrap
from drviva.tests.fakes import SPREADSHEET_ID, FakeSheetsService, http_error


def _bootstrap(service, **kwargs):
    return SheetBootstrap(lambda: service, SPREADSHEET_ID, "Tasks", **kwargs)


def test_creates_missing_tab_and_formatted_header(sheets):
    result = _bootstrap(sheets).ensure_ready()

    assert result.success
    assert "Tasks" in sheets.sheets
    assert sheets.grid() == [TASK_HEADER]
    assert len(sheets.formats) == 1
    fmt = sheets.formats[0]
    assert fmt["range"]["sheetId"] == sheets.sheets["Tasks"]["sheetId"]
    assert fmt["range"]["endColumnIndex"] == len(TASK_HEADER)
    assert fmt["cell"]["userEnteredFormat"]["textFormat"] == {"bold": True}


def test_second_run_performs_no_mutations(sheets):
    bootstrap = _bootstrap(sheets)
    assert bootstrap.ensure_ready().success
    before = sheets.mutation_count()

    assert bootstrap.ensure_ready().success

    assert sheets.mutation_count() == before
    second_run = sheets.calls[-2:]
    assert [name for name, _ in second_run] == ["get", "values.get"]


def test_existing_tab_without_header_gets_header():
    service = FakeSheetsService(sheets={"Tasks": []})

    assert _bootstrap(service).ensure_ready().success

    assert service.grid() == [TASK_HEADER]
    requests = [r for name, kw in service.calls if name == "batchUpdate" for r in kw["body"]["requests"]]
    assert not any("addSheet" in r for r in requests)
    assert any("repeatCell" in r for r in requests)


def test_legacy_five_column_header_is_extended_without_reformatting():
    service = FakeSheetsService(sheets={"Tasks": [TASK_HEADER[:5], ["t", "x", "y", "Done", ""]]})

    assert _bootstrap(service).ensure_ready().success

    assert service.grid()[0] == TASK_HEADER
    assert service.grid()[1][1] == "x"
    assert service.formats == []


def test_foreign_header_is_left_alone():
    service = FakeSheetsService(sheets={"Tasks": [["Name", "Email"]]})

    assert _bootstrap(service).ensure_ready().success

    assert service.grid()[0] == ["Name", "Email"]
    assert service.mutation_count() == 0


def test_unreachable_spreadsheet_aborts(sheets):
    sheets.fail("get", http_error(404, "Requested entity was not found."))

    result = _bootstrap(sheets).ensure_ready()

    assert not result.success
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert "Requested entity was not found." in result.error.message
    assert sheets.mutation_count() == 0


def test_header_write_failure_is_repaired_on_next_run(sheets):
    sheets.fail("values.update", http_error(500, "Internal error"))
    bootstrap = _bootstrap(sheets)

    first = bootstrap.ensure_ready()
    assert not first.success
    assert "Tasks" in sheets.sheets

    del sheets.failures["values.update"]
    assert bootstrap.ensure_ready().success
    assert sheets.grid() == [TASK_HEADER]


def test_readiness_cache_skips_remote_checks(ready_sheets):
    bootstrap = _bootstrap(ready_sheets, cache_readiness=True)
    bootstrap.ensure_ready()
    calls = len(ready_sheets.calls)

    bootstrap.ensure_ready()
    assert len(ready_sheets.calls) == calls

    bootstrap.invalidate()
    bootstrap.ensure_ready()
    assert len(ready_sheets.calls) == calls + 2
