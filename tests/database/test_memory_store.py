from __future__ import annotations

import pytest

from hrms_lite.core.enums import EntityKind
from hrms_lite.database.store import DuplicateKeyError

ATT = EntityKind.ATTENDANCE
EMP = EntityKind.EMPLOYEE


def test_create_assigns_id_and_timestamps(store):
    doc = store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})

    assert doc["id"]
    assert doc["createdAt"] == doc["updatedAt"]
    assert store.find_by_id(EMP, doc["id"])["employeeId"] == "E1"


def test_returned_documents_are_copies(store):
    doc = store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})
    doc["employeeId"] = "hacked"

    assert store.find_by_id(EMP, doc["id"])["employeeId"] == "E1"


def test_compound_unique_index(store):
    store.create(ATT, {"employeeId": "E1", "date": "2026-02-01"})
    store.create(ATT, {"employeeId": "E1", "date": "2026-02-02"})

    with pytest.raises(DuplicateKeyError) as exc:
        store.create(ATT, {"employeeId": "E1", "date": "2026-02-01"})
    assert exc.value.keys == ("employeeId", "date")


def test_independent_unique_indexes(store):
    store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})

    with pytest.raises(DuplicateKeyError):
        store.create(EMP, {"employeeId": "E2", "email": "a@x.com"})
    with pytest.raises(DuplicateKeyError):
        store.create(EMP, {"employeeId": "E1", "email": "b@x.com"})


def test_update_checks_unique_against_other_documents_only(store):
    a = store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})
    store.create(EMP, {"employeeId": "E2", "email": "b@x.com"})

    assert store.update_by_id(EMP, a["id"], {"email": "a@x.com", "name": "A"})["name"] == "A"
    with pytest.raises(DuplicateKeyError):
        store.update_by_id(EMP, a["id"], {"email": "b@x.com"})
    assert store.update_by_id(EMP, "missing", {"name": "x"}) is None


def test_filters_and_sort(store):
    for day, status in (("2026-02-01", "present"), ("2026-02-03", "late"), ("2026-02-02", "present")):
        store.create(ATT, {"employeeId": "E1", "date": day, "status": status})

    window = store.find(ATT, {"date": {"$gte": "2026-02-02", "$lte": "2026-02-03"}}, sort=[("date", -1)])
    assert [d["date"] for d in window] == ["2026-02-03", "2026-02-02"]

    either = store.find(ATT, {"$or": [{"status": "late"}, {"date": "2026-02-01"}]}, sort=[("date", 1)])
    assert [d["date"] for d in either] == ["2026-02-01", "2026-02-03"]

    assert store.count(ATT, {"status": {"$in": ["present"]}}) == 2
    assert store.find_one(ATT, {"status": "absent"}) is None


def test_unknown_operator_is_an_error(store):
    with pytest.raises(ValueError):
        store.find(ATT, {"date": {"$regex": "2026"}})


def test_unknown_operator_is_rejected_on_any_collection_state(store):
    with pytest.raises(ValueError):
        store.count(EMP, {"email": {"$regex": "."}})
    with pytest.raises(ValueError):
        store.find_one(EMP, {"$or": [{"employeeId": "E1"}, {"email": {"$exists": True}}]})

    store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})
    with pytest.raises(ValueError):
        store.aggregate(EMP, [{"$match": {"email": {"$regex": "."}}}])


def test_aggregate_group_sum(store):
    for day, status, hours in (("2026-02-01", "present", 2), ("2026-02-02", "present", 2.5), ("2026-02-03", "absent", 0)):
        store.create(ATT, {"employeeId": "E1", "date": day, "status": status, "workHours": hours})
    store.create(ATT, {"employeeId": "E2", "date": "2026-02-01", "status": "present", "workHours": 8})

    rows = store.aggregate(
        ATT,
        [
            {"$match": {"employeeId": "E1"}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}, "totalHours": {"$sum": "$workHours"}}},
        ],
    )

    assert sorted(rows, key=lambda r: r["_id"]) == [
        {"_id": "absent", "count": 1, "totalHours": 0},
        {"_id": "present", "count": 2, "totalHours": 4.5},
    ]


def test_delete(store):
    doc = store.create(EMP, {"employeeId": "E1", "email": "a@x.com"})

    assert store.delete_by_id(EMP, doc["id"]) is True
    assert store.delete_by_id(EMP, doc["id"]) is False
    assert store.find(EMP, {}) == []
