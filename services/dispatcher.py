"""
services/dispatcher.py

Single entry point: (action, payload) -> envelope.

- Every action maps to one handler taking (store, payload).
- Whatever a handler raises is caught here and serialized as
  {"status": "error", "message": ...}; nothing escapes the boundary.
- `None` returned by a handler is a valid success (data: null).
- Handlers run one at a time inside `store.access()`; the store lock
  (bounded wait) is taken on top of that by update, delete and the bulk saves.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Type, Union

from pydantic import ValidationError

from database.db import SheetStore
from models.announcements import Announcement
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher
from schemas.announcements import AnnouncementCreate, AnnouncementUpdate
from schemas.common import Action, IdPayload, RowPayload, RpcRequest, error, success
from schemas.students import StudentCreate, StudentUpdate
from schemas.subjects import SubjectCreate, SubjectUpdate
from schemas.teachers import TeacherCreate, TeacherUpdate
from services import auth_service, bulk_service, row_service
from services.errors import InvalidRequestError, SchoolError, UnknownActionError
from utils.clock import today_iso

logger = logging.getLogger(__name__)

Handler = Callable[[SheetStore, Dict[str, Any]], Any]


# ==========================================================
# Generic CRUD handler factories
# ==========================================================
def _add(
    model,
    schema: Type[RowPayload],
    defaults: Optional[Dict[str, Any]] = None,
    stamps: Optional[Dict[str, Callable[[], Any]]] = None,
) -> Handler:
    """defaults fill empty fields, stamps are always set by the server"""
    def handler(store: SheetStore, payload: Dict[str, Any]):
        item = schema.model_validate(payload).row_fields()
        for field, default in (defaults or {}).items():
            if item.get(field) in (None, ""):
                item[field] = default
        for field, make in (stamps or {}).items():
            item[field] = make()
        return row_service.add_row(store, model.__sheetname__, item, model.columns)
    return handler


def _update(model, schema: Type[RowPayload]) -> Handler:
    def handler(store: SheetStore, payload: Dict[str, Any]):
        item = schema.model_validate(payload).row_fields()
        return row_service.update_row(store, model.__sheetname__, item)
    return handler


def _delete(model) -> Handler:
    def handler(store: SheetStore, payload: Dict[str, Any]):
        req = IdPayload.model_validate(payload)
        return row_service.delete_row(store, model.__sheetname__, req.id)
    return handler


def _approve(store: SheetStore, payload: Dict[str, Any]):
    req = IdPayload.model_validate(payload)
    return row_service.approve_student(store, req.id)


# ==========================================================
# Dispatch table
# ==========================================================
HANDLERS: Dict[Action, Handler] = {
    # auth / reads
    Action.GET_ADMIN_CREDENTIALS: lambda store, payload: auth_service.get_admin_info(store),
    Action.GET_ALL_STUDENTS: lambda store, payload: auth_service.get_all_students(store),
    Action.LOGIN_ADMIN: auth_service.login_admin,
    Action.LOGIN_STUDENT: auth_service.login_student,
    Action.REGISTER_STUDENT: auth_service.register_student,
    Action.GET_READ_ANNOUNCEMENTS_BY_STUDENT: bulk_service.get_read_announcements,

    # add
    Action.ADD_STUDENT: _add(Student, StudentCreate, defaults={"status": "active"}),
    Action.ADD_TEACHER: _add(Teacher, TeacherCreate),
    Action.ADD_SUBJECT: _add(Subject, SubjectCreate),
    Action.ADD_ANNOUNCEMENT: _add(Announcement, AnnouncementCreate, stamps={"date": today_iso}),

    # update
    Action.UPDATE_STUDENT: _update(Student, StudentUpdate),
    Action.UPDATE_TEACHER: _update(Teacher, TeacherUpdate),
    Action.UPDATE_SUBJECT: _update(Subject, SubjectUpdate),
    Action.UPDATE_ANNOUNCEMENT: _update(Announcement, AnnouncementUpdate),
    Action.APPROVE_STUDENT: _approve,

    # delete
    Action.DELETE_STUDENT: _delete(Student),
    Action.DELETE_TEACHER: _delete(Teacher),
    Action.DELETE_SUBJECT: _delete(Subject),
    Action.DELETE_ANNOUNCEMENT: _delete(Announcement),

    # bulk
    Action.SAVE_ATTENDANCE: bulk_service.save_attendance,
    Action.SAVE_GRADES: bulk_service.save_grades,
    Action.MARK_ANNOUNCEMENTS_AS_READ: bulk_service.mark_announcements_as_read,
}


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{location}: {err.get('msg')}")
    return "Invalid payload - " + "; ".join(parts)


def dispatch(store: SheetStore, action: Any, payload: Any = None) -> Dict[str, Any]:
    try:
        try:
            handler = HANDLERS[Action(action)]
        except ValueError:
            raise UnknownActionError(action)

        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidRequestError("Invalid request: payload must be a JSON object.")

        logger.info(f"Dispatch: action={action}")
        with store.access():
            data = handler(store, payload)
        return success(data)

    except SchoolError as e:
        logger.warning(f"Action {action} failed: {e.message}")
        return error(e.message)
    except ValidationError as e:
        message = _validation_message(e)
        logger.warning(f"Action {action} rejected: {message}")
        return error(message)
    except Exception as e:
        logger.exception(f"Action {action} crashed")
        return error(str(e) or e.__class__.__name__)


def execute_raw(store: SheetStore, body: Union[bytes, str, None]) -> Dict[str, Any]:
    """Parse a raw request body ({"action", "payload"} as JSON text) and dispatch it"""
    try:
        if not body:
            raise InvalidRequestError("Invalid request: No POST data received.")
        try:
            data = json.loads(body)
        except ValueError:
            raise InvalidRequestError("Invalid request: body is not valid JSON.")
        req = RpcRequest.model_validate(data)
    except SchoolError as e:
        logger.warning(e.message)
        return error(e.message)
    except ValidationError as e:
        message = _validation_message(e)
        logger.warning(message)
        return error(message)

    return dispatch(store, req.action, req.payload)
