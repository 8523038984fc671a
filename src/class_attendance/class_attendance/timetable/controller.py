from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import to_json
from ..common.web import json_body, login_required, query_arg, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/timetable", methods=["POST"], endpoint="api_create_timetable_entry")
    @roles_required(Role.ADMIN)
    def api_create_timetable_entry():
        data = json_body()
        entry = container.timetable_service.create_entry(
            class_id=data.get("class_id"),
            subject_id=data.get("subject_id"),
            teacher_id=data.get("teacher_id"),
            day=data.get("day"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
        )
        return jsonify(to_json(entry)), 201

    @app.route("/api/timetable", methods=["GET"], endpoint="api_list_timetable")
    @login_required
    def api_list_timetable():
        entries = container.timetable_service.list_entries(
            class_id=query_arg("class_id"),
            teacher_id=query_arg("teacher_id"),
            day=query_arg("day"),
        )
        return jsonify(to_json(entries))
