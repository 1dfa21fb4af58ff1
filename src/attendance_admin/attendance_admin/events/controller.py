from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.event_service

    @app.route("/api/events/list", methods=["GET"], endpoint="events_list")
    @json_errors
    def events_list():
        items = service.list(request.args.get("q"))
        return jsonify({"items": [e.to_dict() for e in items]})

    @app.route("/api/events/create", methods=["POST"], endpoint="events_create")
    @json_errors
    def events_create():
        event = service.create(request.get_json(silent=True) or {})
        return jsonify({"item": event.to_dict()})

    @app.route("/api/events/update/<event_id>", methods=["PUT"], endpoint="events_update")
    @json_errors
    def events_update(event_id: str):
        event = service.update(event_id, request.get_json(silent=True) or {})
        return jsonify({"item": event.to_dict()})
