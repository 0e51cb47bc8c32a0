from pydantic import BaseModel, Field
from typing import Dict, List, Literal

from models.attendance import Attendance

AttendanceStatus = Literal[Attendance.STATUSES]


# ==========================================================
# [Input] SAVE_ATTENDANCE
# ==========================================================
class SaveAttendanceRequest(BaseModel):
    date: str                                          # YYYY-MM-DD
    records: Dict[str, AttendanceStatus] = Field(default_factory=dict)  # studentId -> status


# ==========================================================
# [Output]
# ==========================================================
class SavedAttendance(BaseModel):
    studentId: int
    date: str
    status: AttendanceStatus


class SaveAttendanceResult(BaseModel):
    savedRecords: List[SavedAttendance]
