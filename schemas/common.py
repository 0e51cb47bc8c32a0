"""
schemas/common.py

- Shared schemas for the RPC endpoint
- Pydantic v2
- Contents:
  1) Action names (the fixed dispatch enum)
  2) Request body: RpcRequest
  3) Response envelopes: SuccessEnvelope / ErrorEnvelope + helpers
  4) Id-only payload used by update / delete / approve
  5) Base for row payloads (blank handling, column names)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =========================================================
# 1) Action names
# =========================================================

class Action(str, Enum):
    GET_ADMIN_CREDENTIALS = "GET_ADMIN_CREDENTIALS"
    GET_ALL_STUDENTS = "GET_ALL_STUDENTS"
    LOGIN_ADMIN = "LOGIN_ADMIN"
    LOGIN_STUDENT = "LOGIN_STUDENT"
    REGISTER_STUDENT = "REGISTER_STUDENT"
    GET_READ_ANNOUNCEMENTS_BY_STUDENT = "GET_READ_ANNOUNCEMENTS_BY_STUDENT"

    ADD_STUDENT = "ADD_STUDENT"
    ADD_TEACHER = "ADD_TEACHER"
    ADD_SUBJECT = "ADD_SUBJECT"
    ADD_ANNOUNCEMENT = "ADD_ANNOUNCEMENT"

    UPDATE_STUDENT = "UPDATE_STUDENT"
    UPDATE_TEACHER = "UPDATE_TEACHER"
    UPDATE_SUBJECT = "UPDATE_SUBJECT"
    UPDATE_ANNOUNCEMENT = "UPDATE_ANNOUNCEMENT"
    APPROVE_STUDENT = "APPROVE_STUDENT"

    DELETE_STUDENT = "DELETE_STUDENT"
    DELETE_TEACHER = "DELETE_TEACHER"
    DELETE_SUBJECT = "DELETE_SUBJECT"
    DELETE_ANNOUNCEMENT = "DELETE_ANNOUNCEMENT"

    SAVE_ATTENDANCE = "SAVE_ATTENDANCE"
    SAVE_GRADES = "SAVE_GRADES"
    MARK_ANNOUNCEMENTS_AS_READ = "MARK_ANNOUNCEMENTS_AS_READ"


# =========================================================
# 2) Request body
# =========================================================

class RpcRequest(BaseModel):
    """
    Body of POST /v1/exec
    - action is kept as a plain string so that unknown names reach the
      dispatcher and come back as an error envelope
    """
    action: str = Field(..., description="Action name, e.g. ADD_STUDENT")
    payload: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 3) Response envelopes
# =========================================================

class SuccessEnvelope(BaseModel):
    status: Literal["success"] = "success"
    data: Any = None


class ErrorEnvelope(BaseModel):
    status: Literal["error"] = "error"
    message: str


def success(data: Any) -> Dict[str, Any]:
    return SuccessEnvelope(data=data).model_dump(mode="json")


def error(message: str) -> Dict[str, Any]:
    return ErrorEnvelope(message=message).model_dump(mode="json")


# =========================================================
# 4) Id-only payload
# =========================================================

class IdPayload(BaseModel):
    id: Union[int, str]

    model_config = ConfigDict(extra="allow")


# =========================================================
# 5) Base for row payloads (ADD_* / UPDATE_*)
# =========================================================

class RowPayload(BaseModel):
    """
    Base of every ADD / UPDATE payload
    - "" from an empty form field counts as "not given"
    - numbers sent for text columns (phone, code ...) are kept as text
    - unknown keys are dropped, only sheet columns are ever written
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any):
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data

    def row_fields(self) -> Dict[str, Any]:
        """Fields the client sent, keyed by column name"""
        return self.model_dump(by_alias=True, exclude_unset=True)
