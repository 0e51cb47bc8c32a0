import pytest
from pydantic import ValidationError

from config.settings import settings
from models.attendance import Attendance
from models.grades import Grade
from models.read_receipts import ReadReceipt
from services import bulk_service
from services.errors import LockTimeoutError, ValidationFailedError


def attendance_rows(store):
    return store.table(Attendance.__sheetname__).records()


def grade_rows(store):
    return store.table(Grade.__sheetname__).records()


# ==========================================================
# Attendance
# ==========================================================

def test_save_attendance_appends_new_rows(store):
    result = bulk_service.save_attendance(
        store, {"date": "2024-09-01", "records": {"1": "present", "2": "absent"}}
    )

    assert result == {"savedRecords": [
        {"studentId": 1, "date": "2024-09-01", "status": "present"},
        {"studentId": 2, "date": "2024-09-01", "status": "absent"},
    ]}
    assert attendance_rows(store) == [
        {"studentId": 1, "date": "2024-09-01", "status": "present"},
        {"studentId": 2, "date": "2024-09-01", "status": "absent"},
    ]


def test_resaving_same_date_overwrites_in_place(store):
    bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"1": "present", "2": "absent"}})
    bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"2": "late"}})

    assert attendance_rows(store) == [
        {"studentId": 1, "date": "2024-09-01", "status": "present"},
        {"studentId": 2, "date": "2024-09-01", "status": "late"},
    ]


def test_new_date_appends(store):
    bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"1": "present"}})
    bulk_service.save_attendance(store, {"date": "2024-09-02", "records": {"1": "absent"}})

    assert [(r["date"], r["status"]) for r in attendance_rows(store)] == [
        ("2024-09-01", "present"),
        ("2024-09-02", "absent"),
    ]


def test_attendance_rejects_unknown_status(store):
    with pytest.raises(ValidationError):
        bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"1": "sleeping"}})
    assert attendance_rows(store) == []


def test_attendance_rejects_non_numeric_student(store):
    with pytest.raises(ValidationFailedError):
        bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"abc": "present"}})


def test_attendance_rejects_fractional_student_id(store):
    with pytest.raises(ValidationFailedError):
        bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"1.5": "present"}})
    assert attendance_rows(store) == []


def test_attendance_keys_naming_the_same_student_save_once(store):
    result = bulk_service.save_attendance(
        store, {"date": "2024-09-01", "records": {"1": "present", "01": "late"}}
    )

    assert result == {"savedRecords": [{"studentId": 1, "date": "2024-09-01", "status": "late"}]}
    assert attendance_rows(store) == [{"studentId": 1, "date": "2024-09-01", "status": "late"}]


def test_attendance_waits_for_the_store_lock(store, monkeypatch):
    monkeypatch.setattr(settings, "LOCK_TIMEOUT_SECONDS", 0.05)

    store.lock._lock.acquire()
    try:
        with pytest.raises(LockTimeoutError, match="0.05 seconds"):
            bulk_service.save_attendance(store, {"date": "2024-09-01", "records": {"1": "present"}})
    finally:
        store.lock._lock.release()

    assert attendance_rows(store) == []


# ==========================================================
# Grades
# ==========================================================

def test_save_grades_inserts_and_deletes(store):
    store.table(Grade.__sheetname__).append_rows([[2, "Math", 80], [2, "Science", 70]])

    result = bulk_service.save_grades(store, {
        "subject": "Math",
        "gradesToSave": [{"studentId": 1, "score": 95}, {"studentId": 2, "score": None}],
    })

    assert result == {"status": "success"}
    rows = grade_rows(store)
    assert {"studentId": 1, "subject": "Math", "score": 95} in rows
    assert {"studentId": 2, "subject": "Science", "score": 70} in rows
    assert len(rows) == 2


def test_save_grades_updates_existing_score(store):
    store.table(Grade.__sheetname__).append_rows([[3, "Math", 50], [3, "Art", 50]])

    bulk_service.save_grades(store, {"subject": "Math", "gradesToSave": [{"studentId": "3", "score": 60}]})

    assert grade_rows(store) == [
        {"studentId": 3, "subject": "Math", "score": 60},
        {"studentId": 3, "subject": "Art", "score": 50},
    ]


def test_save_grades_deletes_several_rows(store):
    store.table(Grade.__sheetname__).append_rows([[1, "Math", 10], [2, "Math", 20], [3, "Math", 30]])

    bulk_service.save_grades(store, {
        "subject": "Math",
        "gradesToSave": [{"studentId": 1, "score": None}, {"studentId": 3, "score": None}],
    })

    assert grade_rows(store) == [{"studentId": 2, "subject": "Math", "score": 20}]


def test_clearing_a_missing_grade_is_a_no_op(store):
    bulk_service.save_grades(store, {"subject": "Math", "gradesToSave": [{"studentId": 1, "score": None}]})
    assert grade_rows(store) == []


def test_score_out_of_range(store):
    with pytest.raises(ValidationError):
        bulk_service.save_grades(store, {"subject": "Math", "gradesToSave": [{"studentId": 1, "score": 101}]})


def test_grades_wait_for_the_store_lock_with_their_own_timeout(store, monkeypatch):
    monkeypatch.setattr(settings, "LOCK_TIMEOUT_SECONDS", 0.07)
    monkeypatch.setattr(settings, "GRADES_LOCK_TIMEOUT_SECONDS", 0.05)

    store.lock._lock.acquire()
    try:
        with pytest.raises(LockTimeoutError, match="0.05 seconds"):
            bulk_service.save_grades(
                store, {"subject": "Math", "gradesToSave": [{"studentId": 1, "score": 90}]}
            )
    finally:
        store.lock._lock.release()

    assert grade_rows(store) == []


# ==========================================================
# Read receipts
# ==========================================================

def test_mark_read_is_idempotent(store):
    payload = {"studentId": 1, "announcementIds": [1, 2]}
    assert bulk_service.mark_announcements_as_read(store, payload) == {"status": "marked as read"}
    bulk_service.mark_announcements_as_read(store, payload)
    bulk_service.mark_announcements_as_read(store, {"studentId": 1, "announcementIds": [2, 3, 3]})

    read = bulk_service.get_read_announcements(store, {"studentId": 1})
    assert read == {"readAnnouncementIds": [1, 2, 3]}
    assert len(store.table(ReadReceipt.__sheetname__).records()) == 3


def test_receipts_are_per_student(store):
    bulk_service.mark_announcements_as_read(store, {"studentId": 1, "announcementIds": [1]})
    bulk_service.mark_announcements_as_read(store, {"studentId": 2, "announcementIds": [1, 4]})

    assert bulk_service.get_read_announcements(store, {"studentId": "2"}) == {"readAnnouncementIds": [1, 4]}
    assert bulk_service.get_read_announcements(store, {"studentId": 9}) == {"readAnnouncementIds": []}


def test_receipt_rows_carry_timestamp(store):
    bulk_service.mark_announcements_as_read(store, {"studentId": 1, "announcementIds": [5]})
    receipt = store.table(ReadReceipt.__sheetname__).records()[0]
    assert receipt["studentId"] == 1
    assert receipt["announcementId"] == 5
    assert receipt["timestamp"].endswith("Z")
