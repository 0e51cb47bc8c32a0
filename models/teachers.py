from models.base import SheetModel


class Teacher(SheetModel):
    __sheetname__ = "Teachers"

    columns = (
        "id",        # unique teacher id
        "name",      # teacher name
        "subject",   # subject taught
        "email",     # email
        "phone",     # phone number
        "status",    # active / inactive
    )

    STATUSES = ("active", "inactive")
