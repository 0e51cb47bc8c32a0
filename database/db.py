"""
database/db.py

Row store adapter over an openpyxl workbook.

- One sheet per entity, the first row is the header (= field names).
- Reads return every physical row; records are dicts keyed by the header.
- Writes are positional: append, overwrite a cell / a row, delete a row.
- Row and column numbers are 1-based like the spreadsheet itself.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import openpyxl
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from database.lock import StoreLock
from services.errors import SheetNotFoundError

logger = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return value is None or value == ""


class SheetTable:
    """Read/write surface for a single sheet"""

    def __init__(self, worksheet: Worksheet):
        self.ws = worksheet

    @property
    def name(self) -> str:
        return self.ws.title

    # ==========================================================
    # Reads
    # ==========================================================
    def values(self) -> List[List[Any]]:
        """All physical rows (header included), empty cells as ""; trailing blank rows dropped"""
        rows = [
            ["" if v is None else v for v in row]
            for row in self.ws.iter_rows(values_only=True)
        ]
        while rows and all(_blank(v) for v in rows[-1]):
            rows.pop()
        return rows

    @property
    def last_row(self) -> int:
        return len(self.values())

    @property
    def header(self) -> List[str]:
        header = []
        for cell in self.ws[1]:
            if _blank(cell.value):
                break
            header.append(str(cell.value))
        return header

    def column_index(self, name: str) -> int:
        """0-based header position of `name`, -1 when absent"""
        try:
            return self.header.index(name)
        except ValueError:
            return -1

    def records(self) -> List[Dict[str, Any]]:
        rows = self.values()
        if len(rows) < 2:
            return []
        header = self.header
        return [self.to_record(header, row) for row in rows[1:]]

    def get_row(self, row: int) -> Dict[str, Any]:
        header = self.header
        values = [
            "" if cell.value is None else cell.value
            for cell in self.ws[row][: len(header)]
        ]
        return self.to_record(header, values)

    @staticmethod
    def to_record(header: Sequence[str], row: Sequence[Any]) -> Dict[str, Any]:
        return {
            column: (row[index] if index < len(row) else "")
            for index, column in enumerate(header)
        }

    # ==========================================================
    # Writes
    # ==========================================================
    def append_row(self, row: Sequence[Any]) -> int:
        """Write `row` right after the last non-blank row, returns its row number"""
        return self.append_rows([row])

    def append_rows(self, rows: Sequence[Sequence[Any]]) -> int:
        start = self.last_row + 1
        for offset, row in enumerate(rows):
            for col, value in enumerate(row, 1):
                self.ws.cell(row=start + offset, column=col, value=value)
        return start + len(rows) - 1

    def set_cell(self, row: int, col: int, value: Any) -> None:
        self.ws.cell(row=row, column=col, value=value)

    def set_row(self, row: int, values: Sequence[Any]) -> None:
        for col, value in enumerate(values, 1):
            self.ws.cell(row=row, column=col, value=value)

    def delete_row(self, row: int) -> None:
        self.ws.delete_rows(row, 1)

    # singleton cells (e.g. "B1")
    def read_cell(self, ref: str) -> Any:
        return self.ws[ref].value

    def write_cell(self, ref: str, value: Any) -> None:
        self.ws[ref].value = value


class SheetStore:
    """
    Workbook holding every sheet.
    - path=None keeps the workbook in memory only (commit() is then a no-op)
    - access(): every read or write of the workbook happens inside it, one
      thread at a time (openpyxl objects are not thread-safe)
    - lock: bounded-wait guard for read-modify-write sequences (see database/lock.py)
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        if self.path is not None and self.path.exists():
            self.workbook: Workbook = openpyxl.load_workbook(self.path)
            logger.info(f"Workbook loaded: {self.path}")
        else:
            self.workbook = Workbook()
            # drop openpyxl's default "Sheet"
            self.workbook.remove(self.workbook.active)
        self._access = threading.RLock()
        self.lock = StoreLock()

    @contextmanager
    def access(self):
        with self._access:
            yield self

    def sheet_names(self) -> List[str]:
        return list(self.workbook.sheetnames)

    def has_sheet(self, name: str) -> bool:
        return name in self.workbook.sheetnames

    def table(self, name: str) -> SheetTable:
        if not self.has_sheet(name):
            raise SheetNotFoundError(name)
        return SheetTable(self.workbook[name])

    def ensure_sheet(self, name: str, columns: Optional[Sequence[str]] = None) -> SheetTable:
        """Create the sheet when missing and write the header row into an empty one"""
        if not self.has_sheet(name):
            self.workbook.create_sheet(title=name)
            logger.info(f"Sheet created: {name}")
        table = SheetTable(self.workbook[name])
        if columns and table.last_row == 0:
            table.append_row(list(columns))
        return table

    def commit(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.workbook.save(self.path)
