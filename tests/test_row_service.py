import pytest

from models.grades import Grade
from models.students import Student
from models.teachers import Teacher
from services import row_service
from services.errors import MissingColumnError, NotFoundError, ValidationFailedError


def add_student(store, **fields):
    item = {"username": "u", "name": "Student", "grade": 10, "class": "A",
            "status": "active", "password": "pw", **fields}
    return row_service.add_row(store, Student.__sheetname__, item, Student.columns)


def students_sheet(store):
    return store.table(Student.__sheetname__)


# ==========================================================
# add
# ==========================================================

def test_first_id_is_one_then_increments(store):
    assert add_student(store, username="a")["id"] == 1
    assert add_student(store, username="b")["id"] == 2


def test_next_id_ignores_non_numeric_ids(store):
    table = store.table(Teacher.__sheetname__)
    table.append_rows([["T-9", "x"], ["7", "y"], [3, "z"]])

    added = row_service.add_row(store, Teacher.__sheetname__, {"name": "New"}, Teacher.columns)
    assert added["id"] == 8


def test_id_not_reused_after_deleting_an_older_row(store):
    add_student(store, username="a")
    add_student(store, username="b")
    row_service.delete_row(store, Student.__sheetname__, 1)

    assert add_student(store, username="c")["id"] == 3


def test_deleting_the_newest_row_frees_its_id(store):
    # ids come from the rows that exist now, there is no counter
    add_student(store, username="a")
    add_student(store, username="b")
    row_service.delete_row(store, Student.__sheetname__, 2)

    assert add_student(store, username="c")["id"] == 2


def test_add_with_nested_value_writes_nothing(store):
    with pytest.raises(ValidationFailedError, match='"subject"'):
        row_service.add_row(
            store, Teacher.__sheetname__, {"name": "Mona", "subject": {"x": 1}}, Teacher.columns
        )
    assert store.table(Teacher.__sheetname__).values() == [list(Teacher.columns)]


def test_add_writes_fixed_column_order_and_hides_password(store):
    added = add_student(store, username="amal", guardianName=None)

    assert "password" not in added
    assert added["username"] == "amal"
    row = students_sheet(store).values()[1]
    assert row == [1, "amal", "Student", 10, "A", "", "", "active", "pw"]


def test_add_creates_header_on_empty_sheet(store):
    store.ensure_sheet("Scratch")
    row_service.add_row(store, "Scratch", {"name": "x"}, ("id", "name"))
    assert store.table("Scratch").values() == [["id", "name"], [1, "x"]]


# ==========================================================
# update
# ==========================================================

def test_update_keeps_password_when_empty(store):
    add_student(store, username="amal", guardianName="Omar")
    updated = row_service.update_row(
        store, Student.__sheetname__, {"id": 1, "name": "Amal H.", "password": ""}
    )

    assert "password" not in updated
    record = students_sheet(store).records()[0]
    assert record["name"] == "Amal H."
    assert record["password"] == "pw"
    assert record["guardianName"] == "Omar"


def test_update_keeps_password_when_absent_and_accepts_string_id(store):
    add_student(store)
    updated = row_service.update_row(store, Student.__sheetname__, {"id": "1", "class": "B"})
    assert updated["id"] == 1

    record = students_sheet(store).records()[0]
    assert record["id"] == 1
    assert record["class"] == "B"
    assert record["password"] == "pw"


def test_update_overwrites_non_empty_password(store):
    add_student(store)
    row_service.update_row(store, Student.__sheetname__, {"id": 1, "password": "new-pw"})
    assert students_sheet(store).records()[0]["password"] == "new-pw"


def test_update_with_nested_value_leaves_row_untouched(store):
    add_student(store, username="amal")
    with pytest.raises(ValidationFailedError):
        row_service.update_row(
            store, Student.__sheetname__, {"id": 1, "name": "Changed", "class": ["x"]}
        )

    record = students_sheet(store).records()[0]
    assert record["name"] == "Student"
    assert record["class"] == "A"
    assert not store.lock.locked()


def test_update_unknown_id_is_not_found(store):
    add_student(store)
    with pytest.raises(NotFoundError):
        row_service.update_row(store, Student.__sheetname__, {"id": 99, "name": "x"})


def test_update_requires_id(store):
    with pytest.raises(ValidationFailedError):
        row_service.update_row(store, Student.__sheetname__, {"name": "x"})


def test_update_on_sheet_without_id_column(store):
    with pytest.raises(MissingColumnError):
        row_service.update_row(store, Grade.__sheetname__, {"id": 1})


# ==========================================================
# delete
# ==========================================================

def test_delete_removes_only_the_matching_row(store):
    add_student(store, username="a")
    add_student(store, username="b")

    result = row_service.delete_row(store, Student.__sheetname__, 1)

    assert result == {"id": 1, "status": "deleted"}
    assert [r["username"] for r in students_sheet(store).records()] == ["b"]


def test_delete_unknown_id_is_not_found(store):
    with pytest.raises(NotFoundError):
        row_service.delete_row(store, Student.__sheetname__, 5)


def test_delete_releases_lock_after_error(store):
    with pytest.raises(NotFoundError):
        row_service.delete_row(store, Student.__sheetname__, 5)
    assert not store.lock.locked()


# ==========================================================
# approve
# ==========================================================

def test_approve_sets_status_active(store):
    add_student(store, status="pending")
    approved = row_service.approve_student(store, 1)

    assert approved["status"] == "active"
    assert "password" not in approved
    assert students_sheet(store).records()[0]["status"] == "active"


def test_approve_unknown_student(store):
    with pytest.raises(NotFoundError):
        row_service.approve_student(store, 42)


def test_public_records_strip_passwords(store):
    add_student(store)
    assert all("password" not in r for r in row_service.public_records(students_sheet(store)))
