from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.serializers import to_json
from ..common.web import current_identity, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        identity = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = identity.user_id
        return jsonify({"user": to_json(identity)})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return jsonify({"status": "ok"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def api_me():
        return jsonify({"user": to_json(current_identity())})
