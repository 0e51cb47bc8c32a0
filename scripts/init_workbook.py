import csv
import os
from pathlib import Path

from config.settings import settings
from database.db import SheetStore
from models.registry import ALL_MODELS, init_sheets
from services.auth_service import set_admin_credentials
from utils.cells import numeric_or_text

DATA_DIR = Path("data")  # optional seed files: data/<SheetName>.csv

# columns stored as numbers, everything else is kept as text (phone numbers, passwords ...)
NUMERIC_COLUMNS = {"id", "grade", "teacherId", "studentId", "announcementId", "score"}

ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")


def _cell(column, value):
    return numeric_or_text(value) if column in NUMERIC_COLUMNS else value


def seed_sheet(store: SheetStore, model) -> int:
    csv_path = DATA_DIR / f"{model.__sheetname__}.csv"
    if not csv_path.exists():
        return 0

    table = store.table(model.__sheetname__)
    if table.last_row > 1:
        print(f"- {model.__sheetname__}: already has data, skipped")
        return 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        rows = [
            [_cell(column, row.get(column) or "") for column in model.columns]
            for row in reader
        ]
    if rows:
        table.append_rows(rows)
    print(f"- {model.__sheetname__}: {len(rows)} rows imported from {csv_path}")
    return len(rows)


def init_workbook():
    store = init_sheets(SheetStore(settings.WORKBOOK_PATH or None))

    for model in ALL_MODELS:
        seed_sheet(store, model)

    set_admin_credentials(store, ADMIN_USERNAME, ADMIN_PASSWORD)
    store.commit()
    print(f"Workbook ready: {settings.WORKBOOK_PATH} (sheets: {', '.join(store.sheet_names())})")


if __name__ == "__main__":
    init_workbook()
