import copy
from datetime import date

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from config import settings
from hrdesk.api.routes import (
    auth_module,
    dashboard_module,
    employee_module,
    settings_module,
    user_module,
)
from hrdesk.services.auth_service import AuthService
from hrdesk.services.dashboard_service import DashboardService
from hrdesk.services.employee_service import EmployeeService
from hrdesk.services.settings_service import SettingsService
from hrdesk.services.user_service import UserService
from hrdesk.utils.auth_utils import create_jwt_token

VALID_EMPLOYEE = {
    "personal": {
        "firstName": "Asha",
        "lastName": "Rao",
        "employeeId": "EMP001",
        "accessCardNumber": "AC1001",
        "dob": "1990-05-14",
        "gender": "female",
        "bloodGroup": "O+",
        "maritalStatus": "single",
    },
    "contact": {
        "email": "asha.rao@example.com",
        "phone": "+91 98765 43210",
        "alternatePhone": "9876500000",
        "address": {
            "current": "12 MG Road, Bengaluru, Karnataka",
            "permanent": "45 Lake View, Mysuru, Karnataka",
        },
        "emergencyContact": {"name": "Ravi Rao", "relation": "Brother", "phone": "9123456780"},
    },
    "statutory": {
        "pan": "ABCDE1234F",
        "aadhaar": "123456789012",
        "uan": "100200300400",
        "esic": "1234567890",
        "pfNumber": "KA/BNG/12345",
    },
    "bank": {
        "accountHolderName": "Asha Rao",
        "accountNumber": "123456789012",
        "ifsc": "HDFC0001234",
        "bankName": "HDFC Bank",
        "branch": "Indiranagar",
        "accountType": "savings",
    },
    "employment": {
        "department": "Engineering",
        "designation": "Software Engineer",
        "joiningDate": "2023-04-01",
        "employmentType": "fulltime",
        "status": "active",
    },
    "education": [
        {"level": "undergraduate", "institution": "RV College", "year": 2012, "percentage": 78.5},
    ],
    "experience": [
        {
            "company": "Acme Labs",
            "designation": "Developer",
            "department": "Platform",
            "from": "2013-06-01",
            "to": "2023-03-01",
            "current": False,
        }
    ],
    "documents": {"driveLink": "https://drive.example.com/folders/asha"},
}

TODAY = date(2025, 6, 1)


def make_employee(index: int = 1, **overrides) -> dict:
    """A valid payload whose unique keys are derived from ``index``."""
    payload = copy.deepcopy(VALID_EMPLOYEE)
    payload["personal"]["employeeId"] = f"EMP{index:03d}"
    payload["personal"]["accessCardNumber"] = f"AC{1000 + index}"
    payload["contact"]["email"] = f"employee{index}@example.com"
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(payload.get(section), dict):
            payload[section].update(values)
        else:
            payload[section] = values
    return payload


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(settings, "PASSWORD_HASH_ROUNDS", 4)


@pytest.fixture
def valid_payload():
    return copy.deepcopy(VALID_EMPLOYEE)


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["hrdesk_test"]


@pytest.fixture
def employee_service(mongo_db):
    service = EmployeeService(database=mongo_db)
    service.ensure_indexes()
    return service


@pytest.fixture
def client(mongo_db, monkeypatch):
    employees = EmployeeService(database=mongo_db)
    employees.ensure_indexes()
    monkeypatch.setattr(employee_module, "service", employees)
    monkeypatch.setattr(user_module, "service", UserService(database=mongo_db))
    monkeypatch.setattr(dashboard_module, "service", DashboardService(database=mongo_db))
    monkeypatch.setattr(settings_module, "service", SettingsService(database=mongo_db))
    monkeypatch.setattr(auth_module, "service", AuthService(database=mongo_db))

    from index import app

    return TestClient(app)


def auth_header(role: str = "admin") -> dict:
    token = create_jwt_token({"_id": ObjectId(), "email": f"{role}@example.com", "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_header("admin")


@pytest.fixture
def hr_headers():
    return auth_header("hr")
