import csv
import io

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from database.db import SheetStore
from dependencies.store import get_store
from models.registry import SHEETS
from services.row_service import PASSWORD_FIELD, public_records
from utils.cells import cell_text

router = APIRouter(prefix="/sheets", tags=["Sheets"])


def records_to_csv(columns, records) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow([cell_text(record.get(column)) for column in columns])
    return buf.getvalue()


# ==========================================================
# [EXPORT] tabular export of one sheet as CSV
# - only application sheets (the admin credentials sheet is never exported)
# - password columns are dropped
# ==========================================================

@router.get("/")
def list_sheets():
    return {"status": "success", "data": list(SHEETS)}


@router.get("/{sheet_name}/export")
def export_sheet(sheet_name: str, store: SheetStore = Depends(get_store)):
    if sheet_name not in SHEETS:
        raise HTTPException(status_code=404, detail=f"Sheet '{sheet_name}' not found.")

    with store.access():
        table = store.ensure_sheet(sheet_name, SHEETS[sheet_name].columns)
        columns = [c for c in table.header if c != PASSWORD_FIELD]
        content = records_to_csv(columns, public_records(table))
    return Response(content=content, media_type="text/csv; charset=utf-8")
