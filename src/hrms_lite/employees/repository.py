from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EntityKind
from ..database.store import DocumentStore
from .model import EmployeeProfile

KIND = EntityKind.EMPLOYEE


class EmployeeRepository:
    """Employee profile documents in the store, mapped to ``EmployeeProfile``."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def list_newest_first(self) -> Sequence[EmployeeProfile]:
        return [EmployeeProfile.from_document(d) for d in self._store.find(KIND, {}, sort=[("createdAt", -1)])]

    def get_by_id(self, employee_pk: str) -> Optional[EmployeeProfile]:
        doc = self._store.find_by_id(KIND, employee_pk)
        return EmployeeProfile.from_document(doc) if doc else None

    def get_raw(self, employee_pk: str) -> Optional[dict]:
        return self._store.find_by_id(KIND, employee_pk)

    def find_by_employee_id_or_email(self, *, employee_id: Optional[str], email: Optional[str]) -> Optional[EmployeeProfile]:
        alternatives = []
        # Non-string keys are left for validation to report.
        if isinstance(employee_id, str) and employee_id:
            alternatives.append({"employeeId": employee_id})
        if isinstance(email, str) and email:
            alternatives.append({"email": email})
        if not alternatives:
            return None

        doc = self._store.find_one(KIND, {"$or": alternatives})
        return EmployeeProfile.from_document(doc) if doc else None

    def create(self, doc: dict) -> EmployeeProfile:
        return EmployeeProfile.from_document(self._store.create(KIND, doc))

    def update(self, employee_pk: str, patch: dict) -> Optional[EmployeeProfile]:
        doc = self._store.update_by_id(KIND, employee_pk, patch)
        return EmployeeProfile.from_document(doc) if doc else None

    def delete(self, employee_pk: str) -> bool:
        return self._store.delete_by_id(KIND, employee_pk)
