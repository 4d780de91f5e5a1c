from __future__ import annotations

from hrms_lite.employees.validation import normalize_employee, validate_employee


def test_valid_profile(make_employee):
    assert validate_employee(normalize_employee(make_employee(salary=0, phone=" 0123 "))) == []


def test_all_required_fields_reported():
    fields = {e.field for e in validate_employee(normalize_employee({}))}
    assert fields == {"employeeId", "name", "email", "department", "position"}


def test_email_shapes(make_employee):
    good = ("a.b-c@mail.example.org", "x_y@corp.io")
    bad = ("a@b", "a@@b.com", "@example.com", "a b@example.com")

    for email in good:
        assert validate_employee(normalize_employee(make_employee(email=email))) == []
    for email in bad:
        errors = validate_employee(normalize_employee(make_employee(email=email)))
        assert [e.field for e in errors] == ["email"], email


def test_salary_must_be_a_non_negative_number(make_employee):
    for salary in (-1, "100", True):
        errors = validate_employee(normalize_employee(make_employee(salary=salary)))
        assert [e.field for e in errors] == ["salary"]


def test_partial_normalize_only_keeps_given_keys():
    assert normalize_employee({"email": "X@Y.COM"}, partial=True) == {"email": "x@y.com"}


def test_key_fields_have_a_maximum_length(make_employee):
    errors = validate_employee(normalize_employee(make_employee(employeeId="E" * 256)))
    assert [e.field for e in errors] == ["employeeId"]

    long_email = "a" * 250 + "@example.com"
    errors = validate_employee(normalize_employee(make_employee(email=long_email)))
    assert [e.field for e in errors] == ["email"]
