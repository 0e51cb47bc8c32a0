from typing import Optional, Union

from schemas.common import RowPayload


class SubjectFields(RowPayload):
    name: Optional[str] = None               # subject name (key of the Grades sheet)
    code: Optional[str] = None               # short code, e.g. MATH101
    teacherId: Optional[int] = None          # Teachers.id


class SubjectCreate(SubjectFields):
    name: str


class SubjectUpdate(SubjectFields):
    id: Union[int, str]
