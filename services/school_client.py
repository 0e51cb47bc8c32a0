import asyncio
import csv
import io
import json
import logging
from typing import Any, Dict, List, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from config.settings import settings
from models.announcements import Announcement
from models.attendance import Attendance
from models.grades import Grade
from models.subjects import Subject
from models.teachers import Teacher
from schemas.common import Action
from utils.cells import as_number

logger = logging.getLogger(__name__)

INT_FIELDS = ("id", "grade", "teacherId", "studentId")
FLOAT_FIELDS = ("score",)

NOT_CONFIGURED_MESSAGE = (
    "The school API URL is not configured. Set SCHOOL_API_BASE_URL "
    "(for example http://localhost:8000) in the environment or in the .env file."
)
CONNECTIVITY_MESSAGE = (
    "A network error occurred while contacting the school API at {url}. "
    "Check your internet connection and make sure the API server is running and reachable."
)


class SchoolAPIError(Exception):
    """Error envelope from the API, bad configuration, or an unreadable response"""
    pass


class ConnectivityError(SchoolAPIError):
    """The API could not be reached at all"""
    pass


class AppData(BaseModel):
    """Full dashboard snapshot"""
    students: List[Dict[str, Any]] = Field(default_factory=list)
    teachers: List[Dict[str, Any]] = Field(default_factory=list)
    subjects: List[Dict[str, Any]] = Field(default_factory=list)
    grades: List[Dict[str, Any]] = Field(default_factory=list)
    announcements: List[Dict[str, Any]] = Field(default_factory=list)
    attendance: List[Dict[str, Any]] = Field(default_factory=list)
    adminCredentials: List[Dict[str, Any]] = Field(default_factory=list)


class LoginResult(BaseModel):
    kind: Literal["admin", "student"]
    user: Dict[str, Any]


# ===============================================================
# CSV export parsing
# ===============================================================

def _coerce(header: str, value: str) -> Any:
    if header in INT_FIELDS:
        number = as_number(value)
        return int(number) if number is not None else None
    if header in FLOAT_FIELDS:
        number = as_number(value)
        return float(number) if number is not None else None
    return value


def parse_sheet_csv(text: str) -> List[Dict[str, Any]]:
    """
    CSV export -> list of records.
    - header cells are quoted, values may be
    - id / grade / teacherId / studentId -> int, score -> float, empty -> None
    - every other field stays a string
    """
    rows = list(csv.reader(io.StringIO(text.strip().replace("\r", ""))))
    if len(rows) < 2:
        return []

    headers = [h.strip() for h in rows[0]]
    records = []
    for row in rows[1:]:
        entry = {}
        for index, header in enumerate(headers):
            if not header:
                continue
            value = row[index].strip() if index < len(row) else ""
            entry[header] = _coerce(header, value)
        records.append(entry)
    return records


class SchoolAPIClient:
    """Async client for the school API (RPC endpoint + CSV exports)"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        url = base_url if base_url is not None else settings.SCHOOL_API_BASE_URL
        self.base_url = (url or "").rstrip("/")
        self.timeout = timeout or settings.CLIENT_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.base_url:
            raise SchoolAPIError(NOT_CONFIGURED_MESSAGE)
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        async with self._client() as client:
            try:
                return await client.request(method, path, **kwargs)
            except httpx.TransportError as e:
                logger.error(f"School API unreachable: {method} {path}: {e}")
                raise ConnectivityError(CONNECTIVITY_MESSAGE.format(url=self.base_url)) from e

    # ===============================================================
    # RPC
    # ===============================================================

    async def call(self, action: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Run one action, return its `data` or raise SchoolAPIError with the server message"""
        action = action.value if isinstance(action, Action) else action
        body = json.dumps({"action": action, "payload": payload or {}})
        # text/plain keeps the request "simple" for browsers (no CORS preflight)
        response = await self._request(
            "POST", "/v1/exec",
            content=body,
            headers={"Content-Type": "text/plain;charset=utf-8"},
        )
        try:
            result = response.json()
        except ValueError:
            raise SchoolAPIError(
                f"Unexpected response from the school API (HTTP {response.status_code})."
            )

        if result.get("status") != "success":
            logger.warning(f"Action {action} failed: {result.get('message')}")
            raise SchoolAPIError(result.get("message") or "Unknown error from the school API")
        return result.get("data")

    # ===============================================================
    # Tabular export
    # ===============================================================

    async def fetch_sheet(self, sheet_name: str) -> List[Dict[str, Any]]:
        response = await self._request(
            "GET", f"/v1/sheets/{sheet_name}/export",
            headers={"Cache-Control": "no-store"},
        )
        if response.status_code != 200:
            raise SchoolAPIError(
                f"Failed to fetch data for sheet: {sheet_name}. "
                "Make sure the sheet exists with exactly this name."
            )
        return parse_sheet_csv(response.text)

    async def fetch_all_data(self) -> AppData:
        """All tables at once; the first failure aborts the whole snapshot"""
        students, teachers, subjects, grades, announcements, attendance = await asyncio.gather(
            self.call(Action.GET_ALL_STUDENTS),  # passwords stripped server-side
            self.fetch_sheet(Teacher.__sheetname__),
            self.fetch_sheet(Subject.__sheetname__),
            self.fetch_sheet(Grade.__sheetname__),
            self.fetch_sheet(Announcement.__sheetname__),
            self.fetch_sheet(Attendance.__sheetname__),
        )
        admin_credentials = await self.call(Action.GET_ADMIN_CREDENTIALS)

        return AppData(
            students=students or [],
            teachers=teachers,
            subjects=subjects,
            grades=grades,
            announcements=announcements,
            attendance=attendance,
            adminCredentials=admin_credentials or [],
        )

    # ===============================================================
    # Auth
    # ===============================================================

    async def login(self, username: str, password: str) -> Optional[LoginResult]:
        """Admin first, then student; None when neither matches"""
        credentials = {"username": username, "password": password}

        admin = await self.call(Action.LOGIN_ADMIN, credentials)
        if admin:
            return LoginResult(kind="admin", user=admin)

        student = await self.call(Action.LOGIN_STUDENT, credentials)
        if student:
            return LoginResult(kind="student", user=student)
        return None

    async def register_student(self, student: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call(Action.REGISTER_STUDENT, student)

    # ===============================================================
    # Bulk saves / receipts
    # ===============================================================

    async def save_attendance(self, date: str, records: Dict[Any, str]) -> List[Dict[str, Any]]:
        data = await self.call(
            Action.SAVE_ATTENDANCE,
            {"date": date, "records": {str(k): v for k, v in records.items()}},
        )
        return data["savedRecords"]

    async def save_grades(self, subject: str, grades: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self.call(Action.SAVE_GRADES, {"subject": subject, "gradesToSave": grades})

    async def get_read_announcements(self, student_id: Any) -> List[Any]:
        data = await self.call(Action.GET_READ_ANNOUNCEMENTS_BY_STUDENT, {"studentId": student_id})
        return data["readAnnouncementIds"]

    async def mark_announcements_as_read(self, student_id: Any, announcement_ids: List[Any]):
        return await self.call(
            Action.MARK_ANNOUNCEMENTS_AS_READ,
            {"studentId": student_id, "announcementIds": announcement_ids},
        )
