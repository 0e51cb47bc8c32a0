from typing import Literal, Optional, Union

from models.teachers import Teacher
from schemas.common import RowPayload

TeacherStatus = Literal[Teacher.STATUSES]


class TeacherFields(RowPayload):
    name: Optional[str] = None               # teacher name
    subject: Optional[str] = None            # subject taught
    email: Optional[str] = None              # email
    phone: Optional[str] = None              # phone number
    status: Optional[TeacherStatus] = None   # active / inactive


# [Input] ADD_TEACHER
class TeacherCreate(TeacherFields):
    name: str


# [Input] UPDATE_TEACHER
class TeacherUpdate(TeacherFields):
    id: Union[int, str]
