from __future__ import annotations

from functools import wraps

from flask import g, jsonify, request

from ..common.app_logger import get_logger
from ..core.exceptions import AuthenticationError, DomainError
from .tokens import TokenClaims, TokenSigner, parse_bearer

logger = get_logger(__name__)


def bearer_required(tokens: TokenSigner):
    """Decorator factory: verify the bearer token and expose claims as ``g.claims``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.claims = tokens.verify(parse_bearer(request.headers.get("Authorization")))
            except AuthenticationError as e:
                logger.debug("rejected request to %s: %s", request.path, e)
                return jsonify({"error": "Unauthorized", "code": e.code}), 401
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_claims() -> TokenClaims:
    return g.claims


def error_response(e: DomainError):
    return jsonify({"error": str(e), "code": e.code}), e.http_status


def server_error_response(message: str):
    logger.exception(message)
    return jsonify({"error": message, "code": "server_error"}), 500
