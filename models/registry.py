"""
models/registry.py

Every sheet the application works with, plus the workbook bootstrap.
"""

from config.settings import settings
from database.db import SheetStore
from models.announcements import Announcement
from models.attendance import Attendance
from models.grades import Grade
from models.read_receipts import ReadReceipt
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher

ALL_MODELS = (Student, Teacher, Subject, Grade, Announcement, Attendance, ReadReceipt)

SHEETS = {model.__sheetname__: model for model in ALL_MODELS}


def init_sheets(store: SheetStore) -> SheetStore:
    """Create missing sheets (with header rows) and the admin credentials sheet"""
    for model in ALL_MODELS:
        store.ensure_sheet(model.__sheetname__, model.columns)
    store.ensure_sheet(settings.ADMIN_SHEET)
    return store
