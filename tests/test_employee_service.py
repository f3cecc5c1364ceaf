import pytest
from bson import ObjectId

from conftest import make_employee
from hrdesk.services.employee_service import EmployeeServiceError
from hrdesk.utils.hashing import verify_password


def test_create_employee_persists_record(employee_service):
    employee = employee_service.create_employee(make_employee(1), actor="admin-1")

    assert "password" not in employee
    stored = employee_service.users.find_one({"_id": employee["_id"]})
    assert stored["role"] == "employee"
    assert stored["email"] == "employee1@example.com"
    assert stored["created_by"] == "admin-1"
    assert verify_password("EMP001", stored["password"])


def test_create_assigns_next_identifier(employee_service):
    employee_service.create_employee(make_employee(7))
    payload = make_employee(8)
    del payload["personal"]["employeeId"]

    employee = employee_service.create_employee(payload)
    assert employee["personal"]["employeeId"] == "EMP008"


def test_create_rejects_invalid_payload(employee_service):
    payload = make_employee(1, statutory={"pan": "bad"})
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.create_employee(payload)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Validation Error"
    assert exc_info.value.errors[0].startswith("PAN Number must be in format")
    assert employee_service.users.count_documents({}) == 0


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"contact": {"email": "EMPLOYEE1@example.com"}}, "Email already exists"),
        ({"personal": {"employeeId": "EMP001"}}, "Employee ID already exists"),
        ({"personal": {"accessCardNumber": "AC1001"}}, "Access Card Number already exists"),
    ],
)
def test_create_rejects_duplicates(employee_service, overrides, message):
    employee_service.create_employee(make_employee(1))
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.create_employee(make_employee(2, **overrides))
    assert exc_info.value.message == message


def test_duplicate_check_order(employee_service):
    employee_service.create_employee(make_employee(1))
    duplicate = employee_service.find_duplicate("employee1@example.com", "EMP001", "AC1001")
    assert duplicate == "Email already exists"
    assert employee_service.find_duplicate("", "", "") is None


def test_update_merges_sections(employee_service):
    created = employee_service.create_employee(make_employee(1))
    contact = dict(make_employee(1)["contact"], phone="9222222222")

    updated = employee_service.update_employee(str(created["_id"]), {"contact": contact}, actor="hr-1")
    assert updated["contact"]["phone"] == "9222222222"
    assert updated["bank"]["ifsc"] == "HDFC0001234"
    assert updated["updated_by"] == "hr-1"
    assert "password" not in updated


def test_update_keeps_stored_alternate_phone(employee_service):
    created = employee_service.create_employee(make_employee(1))
    contact = make_employee(1)["contact"]
    del contact["alternatePhone"]

    updated = employee_service.update_employee(str(created["_id"]), {"contact": contact})
    assert updated["contact"]["alternatePhone"] == "9876500000"


def test_update_allows_own_email_but_not_anothers(employee_service):
    first = employee_service.create_employee(make_employee(1))
    employee_service.create_employee(make_employee(2))

    same = make_employee(1)["contact"]
    assert employee_service.update_employee(str(first["_id"]), {"contact": same})

    taken = dict(same, email="employee2@example.com")
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.update_employee(str(first["_id"]), {"contact": taken})
    assert exc_info.value.message == "Email already exists"


def test_update_replaces_education(employee_service):
    created = employee_service.create_employee(make_employee(1))
    education = [{"level": "postgraduate", "institution": "IISc", "year": 2016, "percentage": 81}]

    updated = employee_service.update_employee(str(created["_id"]), {"education": education})
    assert updated["education"] == education
    assert len(updated["experience"]) == 1


def test_update_validates_sent_sections(employee_service):
    created = employee_service.create_employee(make_employee(1))
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.update_employee(str(created["_id"]), {"bank": {"ifsc": "HDFC0001234"}})
    assert "Account Number is required" in exc_info.value.errors


@pytest.mark.parametrize("employee_id", ["not-an-id", str(ObjectId())])
def test_update_missing_employee(employee_service, employee_id):
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.update_employee(employee_id, {})
    assert exc_info.value.status_code == 404


def test_bulk_import_continues_after_failures(employee_service):
    items = [make_employee(1), make_employee(2, statutory={"pan": "abcde1234f"}), make_employee(3)]

    result = employee_service.bulk_import(items)

    assert (result.total, result.success, result.failed) == (3, 2, 1)
    assert result.errors[0]["index"] == 2
    assert result.errors[0]["name"] == "Asha Rao"
    assert result.errors[0]["errors"][0].startswith("PAN Number")
    assert employee_service.users.count_documents({}) == 2


def test_bulk_import_generates_distinct_ids(employee_service):
    items = []
    for index in (1, 2, 3):
        payload = make_employee(index)
        del payload["personal"]["employeeId"]
        items.append(payload)

    result = employee_service.bulk_import(items)
    ids = [employee["personal"]["employeeId"] for employee in result.successful_employees]
    assert ids == ["EMP001", "EMP002", "EMP003"]


def test_bulk_import_reports_duplicates_within_batch(employee_service):
    result = employee_service.bulk_import([make_employee(1), make_employee(1), "junk"])

    assert result.success == 1
    assert result.errors[0] == {"index": 2, "name": "Asha Rao", "errors": ["Email already exists"]}
    assert result.errors[1]["name"] == "Employee 3"
    assert result.errors[1]["errors"] == ["Employee payload must be an object"]


def test_list_employees_search_and_pagination(employee_service):
    for index in range(1, 6):
        employee_service.create_employee(make_employee(index))

    page = employee_service.list_employees(page=2, limit=2)
    assert len(page["employees"]) == 2
    assert page["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalEmployees": 5,
        "hasNext": True,
        "hasPrev": True,
    }

    found = employee_service.list_employees(search="emp003")
    assert [e["personal"]["employeeId"] for e in found["employees"]] == ["EMP003"]
    assert "password" not in found["employees"][0]

    # Regex metacharacters are matched literally
    assert employee_service.list_employees(search=".*")["employees"] == []


def test_get_and_delete_employee(employee_service):
    created = employee_service.create_employee(make_employee(1))
    assert employee_service.get_employee(str(created["_id"]))["email"] == "employee1@example.com"

    employee_service.delete_employee(str(created["_id"]))
    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.get_employee(str(created["_id"]))
    assert exc_info.value.status_code == 404
    with pytest.raises(EmployeeServiceError):
        employee_service.delete_employee(str(created["_id"]))


def test_identifiers_are_stored_stripped(employee_service):
    employee_service.create_employee(make_employee(1, personal={"accessCardNumber": " AC5555 "}))

    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.create_employee(make_employee(2, personal={"accessCardNumber": "AC5555"}))
    assert exc_info.value.message == "Access Card Number already exists"

    stored = employee_service.users.find_one({"personal.employeeId": "EMP001"})
    assert stored["personal"]["accessCardNumber"] == "AC5555"


def test_update_strips_identifiers(employee_service):
    created = employee_service.create_employee(make_employee(1))
    personal = dict(make_employee(1)["personal"], employeeId=" EMP009 ", accessCardNumber=" AC9009 ")

    updated = employee_service.update_employee(str(created["_id"]), {"personal": personal})
    assert updated["personal"]["employeeId"] == "EMP009"
    assert updated["personal"]["accessCardNumber"] == "AC9009"

    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.create_employee(make_employee(9))
    assert exc_info.value.message == "Employee ID already exists"


def test_update_cannot_blank_employee_id(employee_service):
    created = employee_service.create_employee(make_employee(1))
    personal = dict(make_employee(1)["personal"], employeeId="")

    with pytest.raises(EmployeeServiceError) as exc_info:
        employee_service.update_employee(str(created["_id"]), {"personal": personal})
    assert exc_info.value.errors == ["Employee ID is required"]
    stored = employee_service.users.find_one({"_id": created["_id"]})
    assert stored["personal"]["employeeId"] == "EMP001"
