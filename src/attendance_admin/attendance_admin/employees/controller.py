from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.http import error_response, json_errors
from ..common.validators import require_int
from ..container import Container
from ..core.constants import DEFAULT_EMPLOYEES_PER_PAGE
from .model import EmployeeFilters


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @json_errors
    def employees_list():
        if request.args.get("all") == "1":
            return jsonify({"items": [e.to_dict() for e in service.list_all()]})
        page = require_int(request.args.get("page") or "1", "page")
        per_page = require_int(request.args.get("perPage") or str(DEFAULT_EMPLOYEES_PER_PAGE), "perPage")
        data = service.list_page(page=page, per_page=per_page, filters=EmployeeFilters.from_mapping(request.args))
        data["items"] = [e.to_dict() for e in data["items"]]
        return jsonify(data)

    @app.route("/api/employees/count", methods=["GET"], endpoint="employees_count")
    @json_errors
    def employees_count():
        return jsonify({"total": service.count()})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @json_errors
    def employees_create():
        employee = service.create(request.get_json(silent=True) or {})
        return jsonify({"item": employee.to_dict()}), 201

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="employees_update")
    @json_errors
    def employees_update(employee_id: str):
        employee = service.update(employee_id, request.get_json(silent=True) or {})
        return jsonify({"item": employee.to_dict()})

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @json_errors
    def employees_delete(employee_id: str):
        service.delete(employee_id)
        return jsonify({"success": True})

    @app.route("/api/employees/bulk", methods=["POST"], endpoint="employees_bulk")
    @json_errors
    def employees_bulk():
        body = request.get_json(silent=True) or {}
        items = body.get("items") if isinstance(body, dict) else body
        if not isinstance(items, list):
            return error_response("items must be a list", 400)
        return jsonify(service.bulk_upsert(items))

    @app.route("/api/employees/<employee_id>/qr.png", methods=["GET"], endpoint="employees_qr")
    @json_errors
    def employees_qr(employee_id: str):
        """Badge QR code image (payload = employee id)."""
        return send_file(service.qr_png(employee_id), mimetype="image/png")

    @app.route("/api/auditoria/search-employees", methods=["GET"], endpoint="search_employees")
    @json_errors
    def search_employees():
        q = request.args.get("q", "")
        exact = request.args.get("exact") == "1"
        items = service.search(q, exact=exact)
        return jsonify({"items": [e.to_dict() for e in items]})
