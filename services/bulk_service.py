"""
services/bulk_service.py

Bulk reconciliation of client-supplied sets against composite-key sheets.

- save_attendance: (studentId, date) rows are overwritten in place, the rest
  appended in one batch (store lock, 15 s)
- save_grades: (studentId, subject) rows are updated, appended, or deleted
  when the score is cleared (store lock, 20 s)
- read receipts: append-only, one row per (studentId, announcementId)
"""

import logging
from typing import Any, Dict, Tuple

from config.settings import settings
from database.db import SheetStore
from models.attendance import Attendance
from models.grades import Grade
from models.read_receipts import ReadReceipt
from schemas.announcements import MarkAnnouncementsRead, ReadAnnouncements, ReadAnnouncementsQuery
from schemas.attendance import SaveAttendanceRequest, SaveAttendanceResult, SavedAttendance
from schemas.grades import SaveGradesRequest
from services.errors import ValidationFailedError
from utils.cells import as_number, cell_text, loose_equal, numeric_or_text
from utils.clock import now_iso

logger = logging.getLogger(__name__)

ATTENDANCE_STATUS_COL = 3   # studentId, date, status
GRADE_SCORE_COL = 3         # studentId, subject, score


def _score_value(score):
    if score is None:
        return None
    return int(score) if float(score).is_integer() else score


# ==========================================================
# Attendance
# ==========================================================
def save_attendance(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    req = SaveAttendanceRequest.model_validate(payload)

    # "1" and "01" are the same student, the last status sent wins
    statuses: Dict[int, str] = {}
    for raw_id, status in req.records.items():
        number = as_number(raw_id)
        if number is None or not float(number).is_integer():
            raise ValidationFailedError(f"Invalid student id in attendance records: {raw_id!r}")
        statuses[int(number)] = status

    with store.lock.hold(settings.LOCK_TIMEOUT_SECONDS):
        table = store.ensure_sheet(Attendance.__sheetname__, Attendance.columns)
        rows = table.values()

        # (studentId, date) -> physical row number of the existing record
        existing: Dict[Tuple[str, str], int] = {}
        for row_number, row in enumerate(rows[1:], start=2):
            if len(row) < 2:
                continue
            existing[(cell_text(row[0]), cell_text(row[1]))] = row_number

        new_rows = []
        saved = []
        for student_id, status in statuses.items():
            row_number = existing.get((str(student_id), req.date))
            if row_number is not None:
                table.set_cell(row_number, ATTENDANCE_STATUS_COL, status)
            else:
                new_rows.append([student_id, req.date, status])
            saved.append(SavedAttendance(studentId=student_id, date=req.date, status=status))

        if new_rows:
            table.append_rows(new_rows)
        store.commit()

    logger.info(
        f"Attendance saved: date={req.date} updated={len(saved) - len(new_rows)} added={len(new_rows)}"
    )
    return SaveAttendanceResult(savedRecords=saved).model_dump()


# ==========================================================
# Grades
# ==========================================================
def save_grades(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    req = SaveGradesRequest.model_validate(payload)

    with store.lock.hold(settings.GRADES_LOCK_TIMEOUT_SECONDS):
        table = store.ensure_sheet(Grade.__sheetname__, Grade.columns)
        rows = table.values()

        # studentId -> row number, restricted to this subject
        grade_rows: Dict[str, int] = {}
        for row_number, row in enumerate(rows[1:], start=2):
            if len(row) > 1 and cell_text(row[1]) == req.subject:
                grade_rows[cell_text(row[0])] = row_number

        rows_to_delete = set()
        values_to_update: Dict[int, Any] = {}
        appended = 0

        for entry in req.gradesToSave:
            student_id = numeric_or_text(entry.studentId)
            score = _score_value(entry.score)
            row_number = grade_rows.get(cell_text(student_id))

            if row_number is not None:
                if score is None:
                    rows_to_delete.add(row_number)
                else:
                    values_to_update[row_number] = score
            elif score is not None:
                table.append_row([student_id, req.subject, score])
                appended += 1

        for row_number, score in values_to_update.items():
            table.set_cell(row_number, GRADE_SCORE_COL, score)

        # bottom-up so earlier deletions do not shift the later row numbers
        for row_number in sorted(rows_to_delete, reverse=True):
            table.delete_row(row_number)
        store.commit()

    logger.info(
        f"Grades saved: subject={req.subject} updated={len(values_to_update)} "
        f"added={appended} deleted={len(rows_to_delete)}"
    )
    return {"status": "success"}


# ==========================================================
# Read receipts
# ==========================================================
def get_read_announcements(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    req = ReadAnnouncementsQuery.model_validate(payload)
    receipts = store.ensure_sheet(ReadReceipt.__sheetname__, ReadReceipt.columns).records()
    read_ids = [
        r["announcementId"] for r in receipts
        if loose_equal(r.get("studentId"), req.studentId)
    ]
    return ReadAnnouncements(readAnnouncementIds=read_ids).model_dump()


def mark_announcements_as_read(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    req = MarkAnnouncementsRead.model_validate(payload)
    table = store.ensure_sheet(ReadReceipt.__sheetname__, ReadReceipt.columns)

    already_read = {
        cell_text(r.get("announcementId")) for r in table.records()
        if loose_equal(r.get("studentId"), req.studentId)
    }

    stamp = now_iso()
    new_receipts = []
    for announcement_id in req.announcementIds:
        key = cell_text(numeric_or_text(announcement_id))
        if key in already_read:
            continue
        already_read.add(key)
        new_receipts.append(
            [numeric_or_text(req.studentId), numeric_or_text(announcement_id), stamp]
        )

    if new_receipts:
        table.append_rows(new_receipts)
        store.commit()

    logger.info(f"Announcements marked as read: studentId={req.studentId} new={len(new_receipts)}")
    return {"status": "marked as read"}
