from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_date, parse_iso_date
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    id: str
    employee_id: str
    employee_name: str
    date: date
    status: AttendanceStatus = AttendanceStatus.ABSENT
    work_hours: float = 0
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "AttendanceRecord":
        return cls(
            id=str(doc["id"]),
            employee_id=doc["employeeId"],
            employee_name=doc["employeeName"],
            date=parse_iso_date(doc["date"]),
            status=AttendanceStatus(doc.get("status") or AttendanceStatus.ABSENT.value),
            work_hours=doc.get("workHours") or 0,
            check_in=doc.get("checkIn"),
            check_out=doc.get("checkOut"),
            notes=doc.get("notes"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": format_date(self.date),
            "checkIn": self.check_in,
            "checkOut": self.check_out,
            "status": self.status.value,
            "workHours": self.work_hours,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class AttendanceFilter:
    employee_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None


@dataclass(frozen=True)
class StatusBucket:
    status: str
    count: int
    total_hours: float

    def to_dict(self) -> dict:
        return {"_id": self.status, "count": self.count, "totalHours": self.total_hours}


@dataclass(frozen=True)
class AttendanceStats:
    """Per-status counts and hours for one employee."""

    employee_id: str
    buckets: list[StatusBucket] = field(default_factory=list)
    total_records: int = 0

    def to_dict(self) -> dict:
        return {
            "stats": [b.to_dict() for b in self.buckets],
            "totalRecords": self.total_records,
        }
