from models.base import SheetModel


class Student(SheetModel):
    __sheetname__ = "Students"  # student accounts sheet

    columns = (
        "id",             # unique student id (server-assigned)
        "username",       # login name, unique (case-sensitive)
        "name",           # full name
        "grade",          # 10 / 11 / 12
        "class",          # class / section
        "guardianName",   # guardian full name
        "guardianPhone",  # guardian phone
        "status",         # active / inactive / pending
        "password",       # write-only, never returned
    )

    GRADES = (10, 11, 12)
    STATUSES = ("active", "inactive", "pending")
