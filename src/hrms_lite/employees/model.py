from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import coerce_date, format_date
from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class EmployeeProfile:
    """Domain entity: an employee's directory profile.

    ``linked_user_id`` points at an account owned by the authentication
    layer; nothing here dereferences it.
    """

    id: str
    employee_id: str
    name: str
    email: str
    department: str
    position: str
    join_date: Optional[date] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    salary: Optional[float] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    linked_user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "EmployeeProfile":
        return cls(
            id=str(doc["id"]),
            employee_id=doc["employeeId"],
            name=doc["name"],
            email=doc["email"],
            department=doc["department"],
            position=doc["position"],
            join_date=coerce_date(doc.get("joinDate")),
            phone=doc.get("phone"),
            address=doc.get("address"),
            salary=doc.get("salary"),
            status=EmployeeStatus(doc.get("status") or EmployeeStatus.ACTIVE.value),
            linked_user_id=doc.get("linkedUserId"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "position": self.position,
            "joinDate": format_date(self.join_date) if self.join_date else None,
            "phone": self.phone,
            "address": self.address,
            "salary": self.salary,
            "status": self.status.value,
            "linkedUserId": self.linked_user_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
