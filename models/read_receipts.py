from models.base import SheetModel


class ReadReceipt(SheetModel):
    __sheetname__ = "ReadReceipts"  # append-only

    columns = (
        "studentId",       # Students.id
        "announcementId",  # Announcements.id
        "timestamp",       # when the student saw it (UTC, ISO 8601)
    )
