from pydantic import BaseModel, field_validator
from typing import Any, Optional

from schemas.students import StudentCreate


# ==========================================================
# [Login]
# ==========================================================
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

    # passwords are compared as text, "1234" and 1234 are the same input
    @field_validator("username", "password", mode="before")
    @classmethod
    def _as_text(cls, v: Any):
        if v is None or isinstance(v, str):
            return v
        return str(v)


# ==========================================================
# [Self-registration]
# ==========================================================
class StudentRegister(StudentCreate):
    username: str                            # must not exist yet
    password: str                            # stored, never returned
