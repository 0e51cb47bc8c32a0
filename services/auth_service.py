"""
services/auth_service.py

Admin / student login and student self-registration.

A login that matches nobody returns None (a valid, successful answer):
callers try the admin first, then the student, and only then report
"invalid credentials". A student account that exists but is pending or
disabled raises AccountStateError instead.
"""

import logging
from typing import Any, Dict, List, Optional

from config.settings import settings
from database.db import SheetStore
from models.students import Student
from schemas.auth import LoginRequest, StudentRegister
from services.errors import AccountStateError, ValidationFailedError
from services.row_service import add_row, public_records, strip_password
from utils.cells import cell_text

logger = logging.getLogger(__name__)

ADMIN_ID = 1
ADMIN_NAME = "Admin"

PENDING_MESSAGE = "Account pending review: waiting for approval by the administration."
DISABLED_MESSAGE = "Account disabled: please contact the administration."
DUPLICATE_USERNAME_MESSAGE = "This username already exists."


# ==========================================================
# Admin
# ==========================================================
def get_admin_credentials(store: SheetStore) -> Dict[str, Any]:
    table = store.ensure_sheet(settings.ADMIN_SHEET)
    return {
        "username": table.read_cell(settings.ADMIN_USERNAME_CELL),
        "password": table.read_cell(settings.ADMIN_PASSWORD_CELL),
    }


def set_admin_credentials(store: SheetStore, username: str, password: str) -> None:
    table = store.ensure_sheet(settings.ADMIN_SHEET)
    table.write_cell(settings.ADMIN_USERNAME_CELL, username)
    table.write_cell(settings.ADMIN_PASSWORD_CELL, password)
    store.commit()


def _admin_identity(username: Any) -> Dict[str, Any]:
    return {"id": ADMIN_ID, "name": ADMIN_NAME, "username": username}


def get_admin_info(store: SheetStore) -> List[Dict[str, Any]]:
    username = get_admin_credentials(store)["username"]
    if username:
        return [_admin_identity(username)]
    return []


def login_admin(store: SheetStore, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    req = LoginRequest.model_validate(payload)
    creds = get_admin_credentials(store)
    if (
        creds["username"]
        and creds["password"] not in (None, "")
        and cell_text(creds["username"]) == req.username
        and cell_text(creds["password"]) == req.password
    ):
        logger.info("Admin login succeeded")
        return _admin_identity(creds["username"])
    return None


# ==========================================================
# Students
# ==========================================================
def get_all_students(store: SheetStore) -> List[Dict[str, Any]]:
    table = store.table(Student.__sheetname__)
    return public_records(table)


def login_student(store: SheetStore, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    req = LoginRequest.model_validate(payload)
    students = store.table(Student.__sheetname__).records()

    student = next(
        (
            s for s in students
            if cell_text(s.get("username")) == req.username
            and cell_text(s.get("password")) == req.password
        ),
        None,
    )
    if student is None:
        return None

    if student.get("status") == "pending":
        raise AccountStateError(PENDING_MESSAGE)
    if student.get("status") == "inactive":
        raise AccountStateError(DISABLED_MESSAGE)

    logger.info(f"Student login succeeded: id={student.get('id')}")
    return strip_password(student)


def register_student(store: SheetStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    req = StudentRegister.model_validate(payload)
    students = store.ensure_sheet(Student.__sheetname__, Student.columns).records()

    if any(cell_text(s.get("username")) == req.username for s in students):
        raise ValidationFailedError(DUPLICATE_USERNAME_MESSAGE)

    item = {**req.row_fields(), "status": "pending"}
    return add_row(store, Student.__sheetname__, item, Student.columns)
