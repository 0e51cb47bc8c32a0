from pydantic import BaseModel, Field
from typing import List, Optional, Union


# ==========================================================
# [Input] SAVE_GRADES
# ==========================================================
class GradeEntry(BaseModel):
    studentId: Union[int, str]
    score: Optional[float] = Field(default=None, ge=0, le=100)  # None = clear the grade


class SaveGradesRequest(BaseModel):
    subject: str                                   # Subjects.name
    gradesToSave: List[GradeEntry] = Field(default_factory=list)
