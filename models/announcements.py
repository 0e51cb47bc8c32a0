from models.base import SheetModel


class Announcement(SheetModel):
    __sheetname__ = "Announcements"

    columns = (
        "id",         # unique announcement id
        "title",      # title
        "content",    # body text
        "category",   # general / academic / urgent
        "date",       # creation date, set by the server
    )

    CATEGORIES = ("general", "academic", "urgent")
