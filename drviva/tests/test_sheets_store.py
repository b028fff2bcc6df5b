"""
Task sheet store tests - row layout, reads and single-cell status writes
against the in-memory Sheets fake.
"""
from drviva.errors import ErrorKind
from drviva.models.task import NewTask, TASK_HEADER
from drviva.services.sheets_store import TaskSheetStore, format_timestamp
from drviva.tests.fakes import FIXED_NOW, SPREADSHEET_ID, FakeSheetsService, http_error


def _store(service):
    return TaskSheetStore(
        lambda: service, SPREADSHEET_ID, "Tasks",
        clock=lambda: FIXED_NOW, id_factory=lambda: "abc123",
    )


def test_format_timestamp_is_24_hour_with_seconds():
    assert format_timestamp(FIXED_NOW) == "03/14/2026, 15:09:26"


def test_append_row_writes_six_columns(ready_sheets):
    store = _store(ready_sheets)

    result = store.append_row(NewTask(title="Read Gray's", description="Chapter 3"))

    assert result.success
    assert ready_sheets.grid()[1] == ["03/14/2026, 15:09:26", "Read Gray's", "Chapter 3", "Pending", "", "abc123"]
    assert result.value.id == "abc123"
    assert result.value.row == 2
    assert result.value.status == "Pending"


def test_append_row_keeps_scheduled_date(ready_sheets):
    store = _store(ready_sheets)
    store.append_row(NewTask(title="Quiz", description="Cardio", status="In Progress", scheduledDate="2026-03-20"))

    row = ready_sheets.grid()[1]
    assert row[3] == "In Progress"
    assert row[4] == "2026-03-20"


def test_append_row_stores_numeric_looking_id_verbatim(ready_sheets):
    store = TaskSheetStore(
        lambda: ready_sheets, SPREADSHEET_ID, "Tasks",
        clock=lambda: FIXED_NOW, id_factory=lambda: "12345e7",
    )

    created = store.append_row(NewTask(title="A", description="B"))

    assert ready_sheets.calls[-1][1]["valueInputOption"] == "RAW"
    listed = store.list_all().value
    assert listed[0].id == created.value.id == "12345e7"
    assert store.update_status("12345e7", "Done").success


def test_list_all_skips_header_and_defaults_missing_fields():
    service = FakeSheetsService(sheets={"Tasks": [
        list(TASK_HEADER),
        ["01/01/2026, 08:00:00", "Old task", "From before ids"],
        [],
        ["01/02/2026, 09:00:00", "Full", "Row", "Done", "2026-01-05", "id-9"],
    ]})
    result = _store(service).list_all()

    assert result.success
    tasks = result.value
    assert len(tasks) == 2

    legacy, full = tasks
    assert legacy.id == "2"
    assert legacy.row == 2
    assert legacy.status == "Pending"
    assert legacy.scheduled_date == ""
    assert full.id == "id-9"
    assert full.row == 4
    assert full.status == "Done"


def test_list_all_on_header_only_sheet(ready_sheets):
    result = _store(ready_sheets).list_all()
    assert result.success
    assert result.value == []


def test_update_status_writes_single_cell(ready_sheets):
    store = _store(ready_sheets)
    store.append_row(NewTask(title="A", description="B"))

    result = store.update_status("abc123", "Done")

    assert result.success
    assert ready_sheets.grid()[1][3] == "Done"
    name, kwargs = ready_sheets.calls[-1]
    assert name == "values.update"
    assert kwargs == {"range": "Tasks!D2", "values": [["Done"]]}


def test_update_status_addresses_legacy_rows_by_row_number():
    service = FakeSheetsService(sheets={"Tasks": [list(TASK_HEADER), ["t", "Legacy", "row"]]})
    result = _store(service).update_status("2", "In Progress")
    assert result.success
    assert service.grid()[1][3] == "In Progress"


def test_update_status_unknown_id_writes_nothing(ready_sheets):
    result = _store(ready_sheets).update_status("missing", "Done")

    assert not result.success
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert ready_sheets.mutation_count() == 0


def test_update_cell_rejects_header_and_out_of_range_rows(ready_sheets):
    store = _store(ready_sheets)

    header = store.update_cell(1, "Done")
    assert header.error.kind == ErrorKind.VALIDATION

    beyond = store.update_cell(7, "Done")
    assert beyond.error.kind == ErrorKind.NOT_FOUND
    assert ready_sheets.mutation_count() == 0


def test_update_cell_overwrites_existing_row(ready_sheets):
    store = _store(ready_sheets)
    store.append_row(NewTask(title="A", description="B"))

    assert store.update_cell(2, "In Progress").success
    assert ready_sheets.grid()[1][3] == "In Progress"


def test_transport_failure_is_returned_not_raised(ready_sheets):
    ready_sheets.fail("values.append", http_error(503, "Backend unavailable"))

    result = _store(ready_sheets).append_row(NewTask(title="A", description="B"))

    assert not result.success
    assert result.error.kind == ErrorKind.TRANSPORT
    assert "Backend unavailable" in result.error.message


def test_permission_failure_is_auth_error(ready_sheets):
    ready_sheets.fail("values.get", http_error(403, "The caller does not have permission"))

    result = _store(ready_sheets).list_all()

    assert result.error.kind == ErrorKind.AUTH
