from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file
from PIL import UnidentifiedImageError

from ..auth.guards import bearer_required, current_claims, error_response, server_error_response
from ..container import Container
from ..core.exceptions import DomainError, InvalidQrError, ValidationError
from ..qr.codec import StudentIdentity
from ..qr.images import decode_image, render_png
from .export import render_export


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.tokens)
    ledger = container.attendance_ledger

    def _target_teacher_id(override: str | None) -> str:
        """Admins may act on another teacher's records; everyone else acts as themselves."""
        claims = current_claims()
        if claims.is_admin and override:
            return str(override).strip()
        return claims.teacher_id

    @app.route("/api/attendance/create-record", methods=["POST"], endpoint="create_record")
    @auth_required
    def create_record():
        data = request.get_json(silent=True) or {}
        try:
            session = ledger.create_record(
                current_claims().teacher_id,
                data.get("className"),
                data.get("recordName"),
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to create record")

        return jsonify(
            {
                "record": {
                    "recordId": session.record_id,
                    "className": session.class_name,
                    "recordName": session.session_name,
                    "createdAt": session.created_at,
                }
            }
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @auth_required
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        record_id = str(data.get("recordId") or "").strip()
        qr_payload = data.get("qrPayload")

        if not record_id or not qr_payload:
            return error_response(ValidationError("recordId and qrPayload are required"))

        try:
            mark = ledger.mark_attendance(record_id, _target_teacher_id(data.get("teacherId")), qr_payload)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to mark attendance")

        return jsonify({"attendance": mark.to_dict()})

    @app.route("/api/attendance/mark/image", methods=["POST"], endpoint="mark_attendance_image")
    @auth_required
    def mark_attendance_image():
        """Decode an uploaded photo of a student QR code, then mark it."""
        record_id = (request.form.get("recordId") or "").strip()
        if not record_id:
            return error_response(ValidationError("recordId is required"))
        if "image" not in request.files:
            return error_response(ValidationError("Missing image file"))

        try:
            texts = decode_image(request.files["image"].stream)
        except UnidentifiedImageError:
            return error_response(ValidationError("Uploaded file is not an image"))

        if not texts:
            return error_response(InvalidQrError("No QR code detected in the image"))

        try:
            mark = ledger.mark_attendance(
                record_id, _target_teacher_id(request.form.get("teacherId")), texts[0]
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to mark attendance")

        return jsonify({"attendance": mark.to_dict()})

    @app.route("/api/attendance/list", methods=["GET"], endpoint="list_attendance")
    @auth_required
    def list_attendance():
        claims = current_claims()
        filter_teacher_id = (request.args.get("teacherId") or "").strip()

        # Admins see everything unless they narrow the list to one teacher
        is_admin = claims.is_admin and not filter_teacher_id
        teacher_id = filter_teacher_id if claims.is_admin and filter_teacher_id else claims.teacher_id

        try:
            groups = ledger.list_attendance(teacher_id, is_admin)
            teachers = container.teacher_service.list_teachers() if claims.is_admin else []
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to fetch attendance records")

        return jsonify(
            {
                "records": [g.to_dict() for g in groups],
                "teachers": [t.to_public_dict() for t in teachers],
            }
        )

    def _load_record():
        claims = current_claims()
        record_id = (request.args.get("recordId") or "").strip()
        if not record_id:
            raise ValidationError("recordId is required")
        override = request.args.get("teacherId") if claims.is_admin else None
        return ledger.get_record(record_id, override or claims.teacher_id, claims.is_admin)

    @app.route("/api/attendance/record", methods=["GET"], endpoint="get_record")
    @auth_required
    def get_record():
        try:
            session = _load_record()
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to fetch attendance record")

        if session is None:
            return jsonify({"error": "Record not found", "code": "record_not_found"}), 404
        return jsonify({"record": session.to_dict()})

    @app.route("/api/attendance/export", methods=["GET"], endpoint="export_attendance")
    @auth_required
    def export_attendance():
        try:
            session = _load_record()
            if session is None:
                return jsonify({"error": "Record not found", "code": "record_not_found"}), 404
            body, content_type, filename = render_export(session, request.args.get("format") or "xlsx")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to export attendance")

        return send_file(io.BytesIO(body), mimetype=content_type, as_attachment=True, download_name=filename)

    @app.route("/api/student/qr", methods=["GET"], endpoint="student_qr_image")
    def student_qr_image():
        """Students render their own code; no account needed."""
        student_id = (request.args.get("studentId") or "").strip()
        student_name = (request.args.get("studentName") or "").strip()
        if not student_id or not student_name:
            return error_response(ValidationError("studentId and studentName are required"))

        payload = container.codec.encode(StudentIdentity(student_id=student_id, student_name=student_name))
        # Refuse payloads our own decoder would reject (e.g. a "|" inside the name)
        if container.codec.decode(payload) is None:
            return error_response(ValidationError("Student ID or name contains unsupported characters"))

        return send_file(render_png(payload), mimetype="image/png")
