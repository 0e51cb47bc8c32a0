"""
services/row_service.py

Generic row operations shared by every id-keyed sheet
(Students / Teachers / Subjects / Announcements).

- add_row: next id = 1 + max numeric id of the first column, no store lock
- update_row / delete_row: linear scan by id under the store lock
- approve_student: status -> active, located by header names, no store lock
- nothing is written unless every cell of the row is a plain value
"""

import logging
from datetime import date
from typing import Any, Dict, List, Sequence

from config.settings import settings
from database.db import SheetStore, SheetTable
from models.students import Student
from services.errors import MissingColumnError, NotFoundError, ValidationFailedError
from utils.cells import as_number, loose_equal

logger = logging.getLogger(__name__)

PASSWORD_FIELD = "password"


def strip_password(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k != PASSWORD_FIELD}


def public_records(table: SheetTable) -> List[Dict[str, Any]]:
    """Every record of the sheet without password fields (the only read path)"""
    return [strip_password(r) for r in table.records()]


def next_id(table: SheetTable) -> int:
    numeric_ids = [
        number
        for number in (as_number(row[0]) for row in table.values()[1:] if row)
        if number is not None
    ]
    return int(max([0, *numeric_ids])) + 1


def _find_row(rows: Sequence[Sequence[Any]], id_index: int, item_id: Any) -> int:
    """0-based index into `rows` of the data row whose id matches, -1 if none (header skipped)"""
    for index, row in enumerate(rows):
        if index == 0:
            continue
        if id_index < len(row) and loose_equal(row[id_index], item_id):
            return index
    return -1


def _check_cells(sheet_name: str, record: Dict[str, Any]) -> None:
    for column, value in record.items():
        if not isinstance(value, (str, int, float, date, type(None))):
            raise ValidationFailedError(
                f'Invalid value for "{column}" in {sheet_name}: expected text or a number.'
            )


def _require_id_column(table: SheetTable, action: str) -> int:
    id_index = table.column_index("id")
    if id_index == -1:
        raise MissingColumnError(f'Sheet must have an "id" column for {action}.')
    return id_index


# ==========================================================
# ADD
# ==========================================================
def add_row(
    store: SheetStore,
    sheet_name: str,
    item: Dict[str, Any],
    columns: Sequence[str],
) -> Dict[str, Any]:
    table = store.ensure_sheet(sheet_name, columns)
    new_id = next_id(table)
    item = {**item, "id": new_id}

    cells = {column: "" if item.get(column) in (None, "") else item[column] for column in columns}
    _check_cells(sheet_name, cells)
    table.append_row([cells[column] for column in columns])
    store.commit()

    logger.info(f"Row added: sheet={sheet_name} id={new_id}")
    return strip_password(item)


# ==========================================================
# UPDATE
# ==========================================================
def update_row(store: SheetStore, sheet_name: str, item: Dict[str, Any]) -> Dict[str, Any]:
    item_id = item.get("id")
    if item_id in (None, ""):
        raise ValidationFailedError(f"An id is required to update an item in {sheet_name}.")

    with store.lock.hold(settings.LOCK_TIMEOUT_SECONDS):
        table = store.table(sheet_name)
        rows = table.values()
        id_index = _require_id_column(table, "updates")
        header = table.header

        row_index = _find_row(rows, id_index, item_id)
        if row_index == -1:
            raise NotFoundError(f"Item with ID {item_id} not found in {sheet_name}.")
        existing = table.to_record(header, rows[row_index])

        # an empty / missing password keeps the stored one
        if item.get(PASSWORD_FIELD) in (None, "") and PASSWORD_FIELD in header:
            item = {**item, PASSWORD_FIELD: existing[PASSWORD_FIELD]}

        merged = {column: item[column] if column in item else existing[column] for column in header}
        # the stored id stays as stored ("1" only locates row 1)
        merged[header[id_index]] = existing[header[id_index]]
        _check_cells(sheet_name, merged)
        table.set_row(row_index + 1, [merged[column] for column in header])
        store.commit()

    logger.info(f"Row updated: sheet={sheet_name} id={item_id}")
    return strip_password(merged)


# ==========================================================
# DELETE
# ==========================================================
def delete_row(store: SheetStore, sheet_name: str, item_id: Any) -> Dict[str, Any]:
    with store.lock.hold(settings.LOCK_TIMEOUT_SECONDS):
        table = store.table(sheet_name)
        rows = table.values()
        id_index = _require_id_column(table, "deletions")

        row_index = _find_row(rows, id_index, item_id)
        if row_index == -1:
            raise NotFoundError(f"Item with ID {item_id} not found for deletion.")
        table.delete_row(row_index + 1)
        store.commit()

    logger.info(f"Row deleted: sheet={sheet_name} id={item_id}")
    return {"id": item_id, "status": "deleted"}


# ==========================================================
# APPROVE (students only)
# ==========================================================
def approve_student(store: SheetStore, student_id: Any) -> Dict[str, Any]:
    table = store.table(Student.__sheetname__)
    rows = table.values()
    id_index = table.column_index("id")
    status_index = table.column_index("status")
    if id_index == -1 or status_index == -1:
        raise MissingColumnError('Sheet is missing "id" or "status" columns.')

    row_index = _find_row(rows, id_index, student_id)
    if row_index == -1:
        raise NotFoundError(f"Student with ID {student_id} not found.")

    table.set_cell(row_index + 1, status_index + 1, "active")
    store.commit()

    logger.info(f"Student approved: id={student_id}")
    return strip_password(table.get_row(row_index + 1))

