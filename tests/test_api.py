from __future__ import annotations


def _create_employee(client, login, payload):
    login(client, "admin", "A1")
    return client.post("/api/employees", json=payload)


def test_root_banner(client):
    body = client.get("/").get_json()
    assert body == {"success": True, "message": "HRMS Lite API", "version": "1.0.0"}


def test_unknown_route(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Route not found"}


def test_requests_without_caller_are_rejected(client):
    res = client.get("/api/attendance")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_attendance_flow(client, login, make_attendance):
    login(client, "admin", "A1")

    created = client.post("/api/attendance", json=make_attendance())
    assert created.status_code == 201
    record = created.get_json()["data"]
    assert record["workHours"] == 8.5

    dup = client.post("/api/attendance", json=make_attendance())
    assert dup.status_code == 409
    assert dup.get_json()["message"] == "Attendance already marked for this date"

    updated = client.put(f"/api/attendance/{record['id']}", json={"checkOut": "12:00"})
    assert updated.get_json()["data"]["workHours"] == 3

    listing = client.get("/api/attendance?employeeId=E1&startDate=2026-02-01&endDate=2026-02-28").get_json()
    assert listing["count"] == 1

    deleted = client.delete(f"/api/attendance/{record['id']}")
    assert deleted.get_json() == {
        "success": True,
        "data": {},
        "message": "Attendance record deleted successfully",
    }
    assert client.get(f"/api/attendance/{record['id']}").status_code == 404


def test_validation_errors_are_listed(client, login, make_attendance):
    login(client, "admin", "A1")

    res = client.post("/api/attendance", json=make_attendance(status="vacation", date="yesterday"))

    assert res.status_code == 400
    fields = {e["field"] for e in res.get_json()["errors"]}
    assert fields == {"status", "date"}


def test_update_with_non_string_time_is_a_bad_request(client, login, make_attendance):
    login(client, "admin", "A1")
    record = client.post("/api/attendance", json=make_attendance()).get_json()["data"]

    res = client.put(f"/api/attendance/{record['id']}", json={"checkIn": 900})

    assert res.status_code == 400
    assert {e["field"] for e in res.get_json()["errors"]} == {"checkIn"}


def test_bad_query_args(client, login):
    login(client, "admin", "A1")
    res = client.get("/api/attendance?startDate=02/01/2026&status=gone")
    assert res.status_code == 400


def test_employee_sees_only_own_attendance_and_stats(client, login, make_attendance):
    login(client, "admin", "A1")
    client.post("/api/attendance", json=make_attendance())
    client.post("/api/attendance", json=make_attendance(employeeId="E2", employeeName="Bob"))

    login(client, "employee", "E1")
    listing = client.get("/api/attendance?employeeId=E2").get_json()
    assert [r["employeeId"] for r in listing["data"]] == ["E1"]

    assert client.get("/api/attendance/stats/E1").get_json()["data"]["totalRecords"] == 1
    assert client.get("/api/attendance/stats/E2").status_code == 403
    assert client.post("/api/attendance", json=make_attendance(date="2026-03-01")).status_code == 403


def test_employee_directory(client, login, make_employee):
    own = _create_employee(client, login, make_employee()).get_json()["data"]
    other = _create_employee(client, login, make_employee(employeeId="E2", email="bob@example.com")).get_json()["data"]

    dup = client.post("/api/employees", json=make_employee(employeeId="E3"))
    assert dup.status_code == 409
    assert dup.get_json()["message"] == "Employee with this ID or email already exists"

    listing = client.get("/api/employees").get_json()
    assert listing["count"] == 2
    assert [p["employeeId"] for p in listing["data"]] == ["E2", "E1"]

    login(client, "employee", "E1")
    assert client.get(f"/api/employees/{own['id']}").get_json()["data"]["email"] == "alice@example.com"
    assert client.get(f"/api/employees/{other['id']}").status_code == 403
    assert client.get("/api/employees/missing").status_code == 404
    assert client.get("/api/employees").status_code == 403

    login(client, "admin", "A1")
    assert client.put(f"/api/employees/{other['id']}", json={"position": "Lead"}).get_json()["data"]["position"] == "Lead"
    assert client.delete(f"/api/employees/{other['id']}").status_code == 200
    assert client.delete(f"/api/employees/{other['id']}").status_code == 404


def test_non_object_body_is_rejected(client, login):
    login(client, "admin", "A1")
    res = client.post("/api/employees", json=["not", "an", "object"])
    assert res.status_code == 400
