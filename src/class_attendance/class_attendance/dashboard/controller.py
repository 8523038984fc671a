from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import to_json
from ..common.web import current_identity, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="api_dashboard_stats")
    @login_required
    def api_dashboard_stats():
        return jsonify(to_json(container.dashboard_service.stats(current_identity())))
