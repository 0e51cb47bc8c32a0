from models.base import SheetModel


class Subject(SheetModel):
    __sheetname__ = "Subjects"  # subject catalogue

    columns = (
        "id",          # unique subject id
        "name",        # subject name (also the key used by the Grades sheet)
        "code",        # short code (e.g. MATH101)
        "teacherId",   # Teachers.id, may point at a deleted teacher
    )
