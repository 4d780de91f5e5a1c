from __future__ import annotations

import pytest

from hrms_lite.attendance.repository import AttendanceRepository
from hrms_lite.attendance.service import AttendanceService
from hrms_lite.auth.policy import CallerContext
from hrms_lite.database.memory_store import InMemoryDocumentStore
from hrms_lite.employees.repository import EmployeeRepository
from hrms_lite.employees.service import EmployeeService
from hrms_lite.main import create_app


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(role="admin", employee_id="A1")


@pytest.fixture
def employee_e1() -> CallerContext:
    return CallerContext(role="employee", employee_id="E1")


@pytest.fixture
def attendance_service(store) -> AttendanceService:
    return AttendanceService(AttendanceRepository(store))


@pytest.fixture
def employee_service(store) -> EmployeeService:
    return EmployeeService(EmployeeRepository(store))


@pytest.fixture
def app():
    return create_app(settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, role: str, employee_id: str | None = None) -> None:
    """Write the caller into the session the way the auth layer would."""
    with client.session_transaction() as sess:
        sess["role"] = role
        if employee_id is not None:
            sess["employee_id"] = employee_id


def attendance_payload(**overrides) -> dict:
    data = {
        "employeeId": "E1",
        "employeeName": "Alice",
        "date": "2026-02-02",
        "checkIn": "09:00",
        "checkOut": "17:30",
        "status": "present",
    }
    data.update(overrides)
    return data


def employee_payload(**overrides) -> dict:
    data = {
        "employeeId": "E1",
        "name": "Alice Nguyen",
        "email": "alice@example.com",
        "department": "Engineering",
        "position": "Developer",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_attendance():
    return attendance_payload


@pytest.fixture
def make_employee():
    return employee_payload


@pytest.fixture
def login():
    return login_as
