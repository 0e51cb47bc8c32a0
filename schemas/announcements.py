from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

from models.announcements import Announcement
from schemas.common import RowPayload

AnnouncementCategory = Literal[Announcement.CATEGORIES]


# ==========================================================
# [Input] ADD_ANNOUNCEMENT / UPDATE_ANNOUNCEMENT
# ==========================================================
class AnnouncementFields(RowPayload):
    title: Optional[str] = None                       # title
    content: Optional[str] = None                     # body text
    category: Optional[AnnouncementCategory] = None   # general / academic / urgent
    date: Optional[str] = None                        # YYYY-MM-DD, stamped by the server on add


class AnnouncementCreate(AnnouncementFields):
    title: str


class AnnouncementUpdate(AnnouncementFields):
    id: Union[int, str]


# ==========================================================
# [Input] read receipts
# ==========================================================
class ReadAnnouncementsQuery(BaseModel):
    studentId: Union[int, str]


class MarkAnnouncementsRead(BaseModel):
    studentId: Union[int, str]
    announcementIds: List[Union[int, str]] = Field(default_factory=list)


# ==========================================================
# [Output]
# ==========================================================
class ReadAnnouncements(BaseModel):
    readAnnouncementIds: List[Union[int, str]]
