from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import to_json
from ..common.web import json_body, login_required, query_arg, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    svc = container.academics_service

    @app.route("/api/admin/classes", methods=["POST"], endpoint="api_create_class")
    @roles_required(Role.ADMIN)
    def api_create_class():
        data = json_body()
        created = svc.create_class(
            class_name=data.get("class_name", ""),
            division=data.get("division", ""),
            academic_year=data.get("academic_year", ""),
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/admin/classes", methods=["GET"], endpoint="api_list_classes")
    @login_required
    def api_list_classes():
        return jsonify(to_json(svc.list_classes()))

    @app.route("/api/admin/teachers", methods=["POST"], endpoint="api_create_teacher")
    @roles_required(Role.ADMIN)
    def api_create_teacher():
        data = json_body()
        created = svc.create_teacher(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            department=data.get("department", ""),
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/admin/teachers", methods=["GET"], endpoint="api_list_teachers")
    @login_required
    def api_list_teachers():
        return jsonify(to_json(svc.list_teachers()))

    @app.route("/api/admin/students", methods=["POST"], endpoint="api_create_student")
    @roles_required(Role.ADMIN)
    def api_create_student():
        data = json_body()
        created = svc.create_student(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            roll_no=data.get("roll_no", ""),
            class_id=data.get("class_id"),
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/admin/students", methods=["GET"], endpoint="api_list_students")
    @login_required
    def api_list_students():
        return jsonify(to_json(svc.list_students()))

    @app.route("/api/admin/subjects", methods=["POST"], endpoint="api_create_subject")
    @roles_required(Role.ADMIN)
    def api_create_subject():
        data = json_body()
        created = svc.create_subject(
            subject_code=data.get("subject_code", ""),
            subject_name=data.get("subject_name", ""),
            class_id=data.get("class_id"),
            teacher_id=data.get("teacher_id"),
        )
        return jsonify(to_json(created)), 201

    @app.route("/api/admin/subjects", methods=["GET"], endpoint="api_list_subjects")
    @login_required
    def api_list_subjects():
        return jsonify(to_json(svc.list_subjects(class_id=query_arg("class_id"))))
