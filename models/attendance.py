from models.base import SheetModel


class Attendance(SheetModel):
    __sheetname__ = "Attendance"  # one row per (studentId, date)

    columns = (
        "studentId",  # Students.id
        "date",       # YYYY-MM-DD
        "status",     # present / absent / late
    )

    STATUSES = ("present", "absent", "late")
