"""
services/dashboard.py

Derived views over an AppData snapshot (admin dashboard / student dashboard).
Pure functions, no I/O.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List

from services.school_client import AppData
from utils.cells import cell_text, loose_equal

UNASSIGNED = "unassigned"


def dashboard_totals(data: AppData) -> Dict[str, int]:
    return {
        "students": len(data.students),
        "teachers": len(data.teachers),
        "pendingStudents": sum(1 for s in data.students if s.get("status") == "pending"),
    }


def enrollment_by_grade(students: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Students per grade: [{"name": "Grade 10", "students": 12}, ...] sorted by name"""
    counts = Counter(f"Grade {s.get('grade')}" for s in students)
    return [{"name": name, "students": n} for name, n in sorted(counts.items())]


def attendance_summary(attendance: Iterable[Dict[str, Any]], student_id: Any) -> Dict[str, int]:
    statuses = Counter(
        a.get("status") for a in attendance if loose_equal(a.get("studentId"), student_id)
    )
    return {
        "present": statuses.get("present", 0),
        "absent": statuses.get("absent", 0),
        "late": statuses.get("late", 0),
    }


def student_grades(grades: Iterable[Dict[str, Any]], student_id: Any) -> List[Dict[str, Any]]:
    return [g for g in grades if loose_equal(g.get("studentId"), student_id)]


def unread_announcement_ids(
    announcements: Iterable[Dict[str, Any]], read_ids: Iterable[Any]
) -> List[Any]:
    read = list(read_ids)
    return [
        a.get("id") for a in announcements
        if not any(loose_equal(a.get("id"), r) for r in read)
    ]


def teacher_name_for_subject(subject: Dict[str, Any], teachers: Iterable[Dict[str, Any]]) -> str:
    """Name of the subject's teacher; teacherId may dangle after a delete"""
    teacher_id = subject.get("teacherId")
    if teacher_id in (None, ""):
        return UNASSIGNED
    for teacher in teachers:
        if loose_equal(teacher.get("id"), teacher_id):
            return teacher.get("name") or UNASSIGNED
    return UNASSIGNED


def newest_first(records: Iterable[Dict[str, Any]], field: str = "date") -> List[Dict[str, Any]]:
    """Announcements / attendance with the latest YYYY-MM-DD first"""
    return sorted(records, key=lambda r: cell_text(r.get(field)), reverse=True)


def classes_in_grade(students: Iterable[Dict[str, Any]], grade: Any) -> List[str]:
    return sorted({
        cell_text(s.get("class")) for s in students
        if loose_equal(s.get("grade"), grade) and s.get("class") not in (None, "")
    })


def class_roster(students: Iterable[Dict[str, Any]], grade: Any, class_name: str) -> List[Dict[str, Any]]:
    """Students of one grade and class, by name (attendance / grade entry sheets)"""
    roster = [
        s for s in students
        if loose_equal(s.get("grade"), grade) and cell_text(s.get("class")) == class_name
    ]
    return sorted(roster, key=lambda s: cell_text(s.get("name")))
