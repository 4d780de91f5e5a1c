from __future__ import annotations

from flask import Flask

from ..auth.context import caller_required, current_caller
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @caller_required
    def employees_list():
        profiles = service.list_employees(current_caller())
        return ok([p.to_dict() for p in profiles], count=len(profiles))

    @app.route("/api/employees/<employee_pk>", methods=["GET"], endpoint="employees_get")
    @caller_required
    def employees_get(employee_pk: str):
        return ok(service.get_employee(employee_pk, current_caller()).to_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @caller_required
    def employees_create():
        profile = service.create_employee(json_body(), current_caller())
        return ok(profile.to_dict(), status=201)

    @app.route("/api/employees/<employee_pk>", methods=["PUT"], endpoint="employees_update")
    @caller_required
    def employees_update(employee_pk: str):
        return ok(service.update_employee(employee_pk, json_body(), current_caller()).to_dict())

    @app.route("/api/employees/<employee_pk>", methods=["DELETE"], endpoint="employees_delete")
    @caller_required
    def employees_delete(employee_pk: str):
        service.delete_employee(employee_pk, current_caller())
        return ok({}, message="Employee deleted successfully")
