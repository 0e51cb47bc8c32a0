from models.base import SheetModel


class Grade(SheetModel):
    __sheetname__ = "Grades"  # one row per (studentId, subject)

    columns = (
        "studentId",  # Students.id
        "subject",    # Subjects.name
        "score",      # 0 - 100, row removed when cleared
    )
