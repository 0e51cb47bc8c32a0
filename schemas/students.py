from pydantic import Field, field_validator
from typing import Literal, Optional, Union

from models.students import Student
from schemas.common import RowPayload

StudentStatus = Literal[Student.STATUSES]


# ==========================================================
# [Common] Students sheet columns
# ==========================================================
class StudentFields(RowPayload):
    username: Optional[str] = None           # login name
    name: Optional[str] = None               # full name
    grade: Optional[int] = None              # 10 / 11 / 12
    class_: Optional[str] = Field(default=None, alias="class")  # class / section
    guardianName: Optional[str] = None       # guardian full name
    guardianPhone: Optional[str] = None      # guardian phone
    status: Optional[StudentStatus] = None   # active / inactive / pending
    password: Optional[str] = None           # stored, never returned

    @field_validator("grade")
    @classmethod
    def _known_grade(cls, v):
        if v is not None and v not in Student.GRADES:
            raise ValueError(f"grade must be one of {', '.join(map(str, Student.GRADES))}")
        return v


# ==========================================================
# [Input] ADD_STUDENT
# ==========================================================
class StudentCreate(StudentFields):
    username: str


# ==========================================================
# [Input] UPDATE_STUDENT (only the sent fields change)
# ==========================================================
class StudentUpdate(StudentFields):
    id: Union[int, str]
