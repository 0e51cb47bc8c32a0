import threading

import pytest

from database.db import SheetStore
from database.lock import StoreLock
from services.errors import LockTimeoutError, SheetNotFoundError


def test_header_only_sheet_has_no_records():
    table = SheetStore().ensure_sheet("People", ["id", "name"])
    assert table.values() == [["id", "name"]]
    assert table.records() == []


def test_empty_sheet_reads_nothing():
    store = SheetStore()
    table = store.ensure_sheet("Blank")
    assert table.values() == []
    assert table.records() == []
    assert table.last_row == 0


def test_unknown_sheet_raises():
    with pytest.raises(SheetNotFoundError):
        SheetStore().table("Nope")


def test_append_update_delete_rows():
    table = SheetStore().ensure_sheet("People", ["id", "name"])

    assert table.append_row([1, "Amal"]) == 2
    assert table.append_rows([[2, "Badr"], [3, "Huda"]]) == 4
    assert [r["name"] for r in table.records()] == ["Amal", "Badr", "Huda"]

    table.set_cell(3, 2, "Badr K.")
    assert table.get_row(3) == {"id": 2, "name": "Badr K."}

    table.delete_row(2)
    assert table.records() == [{"id": 2, "name": "Badr K."}, {"id": 3, "name": "Huda"}]

    # appends land right after the last row, no gap after a delete
    assert table.append_row([4, "Sara"]) == 4
    assert table.records()[-1] == {"id": 4, "name": "Sara"}


def test_header_stops_at_first_blank_cell():
    table = SheetStore().ensure_sheet("People", ["id", "name"])
    table.write_cell("D1", "stray")
    table.append_row([1, "Amal"])

    assert table.header == ["id", "name"]
    assert table.column_index("name") == 1
    assert table.column_index("stray") == -1
    assert table.records() == [{"id": 1, "name": "Amal"}]


def test_commit_persists_workbook(tmp_path):
    path = tmp_path / "school.xlsx"
    store = SheetStore(str(path))
    store.ensure_sheet("People", ["id", "name"]).append_row([1, "Amal"])
    store.commit()

    reopened = SheetStore(str(path))
    assert reopened.sheet_names() == ["People"]
    assert reopened.table("People").records() == [{"id": 1, "name": "Amal"}]


def test_lock_times_out_while_held():
    lock = StoreLock()
    held = threading.Event()
    release = threading.Event()

    def holder():
        with lock.hold(1):
            held.set()
            release.wait(2)

    worker = threading.Thread(target=holder)
    worker.start()
    held.wait(1)
    try:
        with pytest.raises(LockTimeoutError):
            with lock.hold(0.05):
                pass
    finally:
        release.set()
        worker.join()
    assert not lock.locked()


def test_lock_released_when_body_raises():
    lock = StoreLock()
    with pytest.raises(RuntimeError):
        with lock.hold(1):
            raise RuntimeError("boom")
    assert not lock.locked()
