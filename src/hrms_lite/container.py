from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .database.store import DocumentStore
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository

    attendance_service: AttendanceService
    employee_service: EmployeeService


def build_store(*, backend: str, db_config: Optional[dict] = None, auto_init_db: bool = False) -> DocumentStore:
    backend = (backend or "mysql").lower()
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend != "mysql":
        raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
    if auto_init_db:
        apply_schema(conn)
    return MySQLDocumentStore(conn)


def build_container(*, backend: str, db_config: Optional[dict] = None, auto_init_db: bool = False) -> Container:
    store = build_store(backend=backend, db_config=db_config, auto_init_db=auto_init_db)
    logger.info("Using %s document store", type(store).__name__)

    attendance_repo = AttendanceRepository(store)
    employees_repo = EmployeeRepository(store)

    return Container(
        store=store,
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        attendance_service=AttendanceService(attendance_repo),
        employee_service=EmployeeService(employees_repo),
    )
