from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_date
from ..core.enums import EntityKind
from ..database.store import DocumentStore
from .model import AttendanceFilter, AttendanceRecord, StatusBucket

KIND = EntityKind.ATTENDANCE


class AttendanceRepository:
    """Attendance documents in the store, mapped to ``AttendanceRecord``.

    The store's ``DuplicateKeyError`` passes through untouched; the service
    decides what it means.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    @staticmethod
    def build_query(criteria: AttendanceFilter) -> dict:
        query: dict = {}
        if criteria.employee_id is not None:
            query["employeeId"] = criteria.employee_id

        if criteria.start_date or criteria.end_date:
            window: dict = {}
            if criteria.start_date:
                window["$gte"] = format_date(criteria.start_date)
            if criteria.end_date:
                window["$lte"] = format_date(criteria.end_date)
            query["date"] = window

        if criteria.status is not None:
            query["status"] = criteria.status.value
        return query

    def list(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        docs = self._store.find(KIND, self.build_query(criteria), sort=[("date", -1)])
        return [AttendanceRecord.from_document(d) for d in docs]

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        doc = self._store.find_by_id(KIND, record_id)
        return AttendanceRecord.from_document(doc) if doc else None

    def get_raw(self, record_id: str) -> Optional[dict]:
        return self._store.find_by_id(KIND, record_id)

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        doc = self._store.find_one(KIND, {"employeeId": employee_id, "date": format_date(work_date)})
        return AttendanceRecord.from_document(doc) if doc else None

    def create(self, doc: dict) -> AttendanceRecord:
        return AttendanceRecord.from_document(self._store.create(KIND, doc))

    def update(self, record_id: str, patch: dict) -> Optional[AttendanceRecord]:
        doc = self._store.update_by_id(KIND, record_id, patch)
        return AttendanceRecord.from_document(doc) if doc else None

    def delete(self, record_id: str) -> bool:
        return self._store.delete_by_id(KIND, record_id)

    def stats_by_status(self, employee_id: str) -> Sequence[StatusBucket]:
        rows = self._store.aggregate(
            KIND,
            [
                {"$match": {"employeeId": employee_id}},
                {
                    "$group": {
                        "_id": "$status",
                        "count": {"$sum": 1},
                        "totalHours": {"$sum": "$workHours"},
                    }
                },
            ],
        )
        return [
            StatusBucket(status=r["_id"], count=int(r["count"]), total_hours=round(float(r["totalHours"] or 0), 2))
            for r in rows
        ]

    def count_for_employee(self, employee_id: str) -> int:
        return self._store.count(KIND, {"employeeId": employee_id})
