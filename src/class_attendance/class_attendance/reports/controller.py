from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import to_json
from ..common.web import query_arg, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/defaulters", methods=["GET"], endpoint="api_defaulters")
    @roles_required(Role.ADMIN)
    def api_defaulters():
        defaulters = container.report_service.defaulters(query_arg("threshold"))
        return jsonify(
            [
                {
                    "student": {
                        "student_id": d.student.student_id,
                        "name": d.student.name,
                        "roll_no": d.student.roll_no,
                        "class": d.student.class_label,
                    },
                    "attendance": to_json(d.stats),
                }
                for d in defaulters
            ]
        )

    @app.route("/api/reports/classes/<int:class_id>", methods=["GET"], endpoint="api_class_report")
    @roles_required(Role.ADMIN)
    def api_class_report(class_id: int):
        return jsonify(to_json(container.report_service.class_percentage(class_id)))

    @app.route("/api/reports/overall", methods=["GET"], endpoint="api_overall_report")
    @roles_required(Role.ADMIN)
    def api_overall_report():
        return jsonify(to_json(container.report_service.overall_percentage()))
