from __future__ import annotations

from flask import Flask, jsonify

from ..academics.model import Subject
from ..common.serializers import to_json
from ..common.web import current_identity, json_body, login_required, query_arg, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import SessionUser


def register(app: Flask, container: Container) -> None:
    def _acting_teacher_id(identity: SessionUser, subject: Subject) -> int:
        # Teachers may only mark lectures of subjects they teach; an admin marks
        # on behalf of the subject's teacher.
        if identity.role == Role.ADMIN:
            return subject.teacher_id
        if identity.teacher_id is None or identity.teacher_id != subject.teacher_id:
            raise AuthorizationError("You do not teach this subject")
        return identity.teacher_id

    @app.route("/api/attendance", methods=["POST"], endpoint="api_mark_attendance")
    @roles_required(Role.TEACHER)
    def api_mark_attendance():
        data = json_body()
        identity = current_identity()
        subject = container.academics_service.get_subject(data.get("subject_id"))
        teacher_id = _acting_teacher_id(identity, subject)

        marks = data.get("marks")
        if marks is not None:
            if not isinstance(marks, list):
                raise ValidationError("marks must be a list")
            pairs = []
            for item in marks:
                if not isinstance(item, dict):
                    raise ValidationError("Each mark needs student_id and status")
                student = container.academics_service.get_student(item.get("student_id"))
                pairs.append((student.student_id, item.get("status")))
            records = container.attendance_service.mark_many(
                subject_id=subject.subject_id,
                on=data.get("date"),
                marks=pairs,
                teacher_id=teacher_id,
            )
            return jsonify(to_json(records))

        student = container.academics_service.get_student(data.get("student_id"))
        record = container.attendance_service.mark(
            student_id=student.student_id,
            subject_id=subject.subject_id,
            on=data.get("date"),
            status=data.get("status"),
            teacher_id=teacher_id,
        )
        return jsonify(to_json(record))

    @app.route("/api/attendance", methods=["GET"], endpoint="api_list_attendance")
    @login_required
    def api_list_attendance():
        records = container.attendance_service.list_records(
            student_id=query_arg("student_id"),
            subject_id=query_arg("subject_id"),
            teacher_id=query_arg("teacher_id"),
        )
        return jsonify(to_json(records))

    @app.route("/api/attendance/percentage", methods=["GET"], endpoint="api_attendance_percentage")
    @login_required
    def api_attendance_percentage():
        identity = current_identity()
        student_id = query_arg("student_id")
        if identity.role == Role.STUDENT:
            if student_id is None:
                student_id = identity.student_id
            elif str(student_id) != str(identity.student_id):
                raise AuthorizationError("Students may only view their own attendance")
        if student_id is None:
            raise ValidationError("student_id required")

        subject_id = query_arg("subject_id")
        if subject_id is None:
            return jsonify(to_json(container.report_service.student_percentage(student_id)))

        # Per-subject view: one student's rows for one subject
        student = container.academics_service.get_student(student_id)
        subject = container.academics_service.get_subject(subject_id)
        records = container.attendance_service.list_records(
            student_id=student.student_id, subject_id=subject.subject_id
        )
        return jsonify(to_json(container.report_service.percentage(records)))
