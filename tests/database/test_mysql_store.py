from __future__ import annotations

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from hrms_lite.core.enums import EntityKind
from hrms_lite.database import bootstrap
from hrms_lite.database.mysql_base import is_duplicate_key
from hrms_lite.database.mysql_store import MySQLDocumentStore, compile_filter, index_name
from hrms_lite.database.store import DuplicateKeyError


def test_compile_equality_and_range():
    params: list = []
    sql = compile_filter({"employeeId": "E1", "date": {"$gte": "2026-02-01", "$lte": "2026-02-28"}}, params)

    assert sql == (
        "JSON_UNQUOTE(JSON_EXTRACT(doc, %s)) = %s AND "
        "JSON_UNQUOTE(JSON_EXTRACT(doc, %s)) >= %s AND "
        "JSON_UNQUOTE(JSON_EXTRACT(doc, %s)) <= %s"
    )
    assert params == ["$.employeeId", "E1", "$.date", "2026-02-01", "$.date", "2026-02-28"]


def test_compile_or_and_numbers():
    params: list = []
    sql = compile_filter({"$or": [{"employeeId": "E1"}, {"email": "a@x.com"}], "workHours": {"$gt": 0}}, params)

    assert sql.startswith("(JSON_UNQUOTE(JSON_EXTRACT(doc, %s)) = %s OR ")
    assert "CAST(JSON_EXTRACT(doc, %s) AS DOUBLE) > %s" in sql
    assert params[-2:] == ["$.workHours", 0]


def test_compile_empty_filter_matches_everything():
    assert compile_filter({}, []) == "TRUE"


def test_field_names_are_checked():
    with pytest.raises(ValueError):
        compile_filter({"a') OR 1=1 --": "x"}, [])


def test_index_names_match_schema():
    assert index_name(EntityKind.ATTENDANCE, ("employeeId", "date")) == "uq_attendance_employeeid_date"
    assert index_name(EntityKind.EMPLOYEE, ("email",)) == "uq_employees_email"


def test_duplicate_key_detection():
    dup = IntegrityError(msg="Duplicate entry 'E1' for key 'employees.uq_employees_employeeid'", errno=errorcode.ER_DUP_ENTRY)
    other = IntegrityError(msg="Cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)

    assert is_duplicate_key(dup)
    assert not is_duplicate_key(other)


class _FailingCursor:
    def __init__(self, exc):
        self._exc = exc
        self.rowcount = 0

    def execute(self, sql, params=None):
        raise self._exc

    def close(self):
        pass


class _FailingConnection:
    def __init__(self, exc):
        self._exc = exc
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return _FailingCursor(self._exc)

    def commit(self):
        pass

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class _Factory:
    def __init__(self, exc):
        self.conn = _FailingConnection(exc)

    def connect(self, *, with_database=True):
        return self.conn


def test_insert_duplicate_maps_to_duplicate_key_error():
    exc = IntegrityError(msg="Duplicate entry 'a@x.com' for key 'employees.uq_employees_email'", errno=errorcode.ER_DUP_ENTRY)
    factory = _Factory(exc)
    store = MySQLDocumentStore(factory)

    with pytest.raises(DuplicateKeyError) as raised:
        store.create(EntityKind.EMPLOYEE, {"employeeId": "E2", "email": "a@x.com"})

    assert raised.value.keys == ("email",)
    assert factory.conn.rolled_back


def test_other_driver_errors_propagate():
    exc = IntegrityError(msg="Column 'doc' cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)
    store = MySQLDocumentStore(_Factory(exc))

    with pytest.raises(IntegrityError):
        store.create(EntityKind.EMPLOYEE, {"employeeId": "E2"})


def test_unique_key_columns_compare_exactly():
    sql = bootstrap.SCHEMA_PATH.read_text(encoding="utf-8")
    generated = [line for line in sql.splitlines() if "GENERATED ALWAYS" in line]

    assert len(generated) == 4
    assert all("COLLATE utf8mb4_bin" in line for line in generated)
    assert "VARCHAR(64)" not in sql
