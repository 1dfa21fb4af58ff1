from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.http import json_errors
from ..common.validators import require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.audit_service

    @app.route("/api/auditoria/logs", methods=["GET"], endpoint="audit_logs")
    @json_errors
    def audit_logs():
        page = require_int(request.args.get("page") or "1", "page")
        per_page = require_int(request.args.get("perPage") or "15", "perPage")
        data = service.list_logs(page=page, per_page=per_page)
        data["items"] = [log.to_dict() for log in data["items"]]
        return jsonify(data)

    @app.route("/api/auditoria/last-entries", methods=["GET"], endpoint="audit_last_entries")
    @json_errors
    def audit_last_entries():
        limit = require_int(request.args.get("limit") or "5", "limit")
        items = service.last_entries(request.args.get("employeeId"), limit=limit)
        return jsonify({"items": [log.to_dict() for log in items]})

    @app.route("/api/auditoria/perform", methods=["POST"], endpoint="audit_perform")
    @json_errors
    def audit_perform():
        body = request.get_json(silent=True) or {}
        log = service.perform(
            employee_id=body.get("employeeId"),
            qr_content=body.get("qrContent"),
            manual=bool(body.get("manual")),
            log_type=body.get("type"),
            timestamp=body.get("timestamp"),
            reason=body.get("reason"),
        )
        return jsonify({"item": log.to_dict()})

    @app.route("/api/auditoria/checkout-all", methods=["POST"], endpoint="audit_checkout_all")
    @json_errors
    def audit_checkout_all():
        count = service.checkout_all()
        return jsonify({"message": f"Check-out realizado para {count} colaborador(es)", "count": count})

    @app.route("/api/auditoria/clean-orphans", methods=["POST"], endpoint="audit_clean_orphans")
    @json_errors
    def audit_clean_orphans():
        result = service.clean_orphans()
        if not result["deleted"]:
            message = "Nenhum registro órfão encontrado"
        else:
            message = f"{result['deleted']} registro(s) órfão(s) removido(s) com sucesso"
        return jsonify({"message": message, **result})

    @app.route("/api/auditoria/export", methods=["GET"], endpoint="audit_export")
    @json_errors
    def audit_export():
        filename = f"auditoria-{date.today().isoformat()}.csv"
        return app.response_class(
            service.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
