from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import error_response, server_error_response
from ..auth.tokens import TokenClaims
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        email = str(data.get("email") or "").strip()
        password = str(data.get("password") or "")

        if not email or not password:
            return error_response(ValidationError("Email and password are required"))

        try:
            teacher = container.auth_service.authenticate(email, password)
            token = container.tokens.sign(
                TokenClaims(teacher_id=teacher.teacher_id, role=teacher.role, email=teacher.email)
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error_response("Unable to log in")

        return jsonify({"token": token, "teacher": teacher.to_public_dict()})
