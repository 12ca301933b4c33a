# Overview: Request decorators and per-request service access for API routes.

from functools import wraps
from flask import current_app, g, jsonify, request

from .domain import AccountStatus, Role, is_admin
from .services import Services, build_services


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def get_services() -> Services:
    """
    Services bound to the current request's bearer token.

    Login and register establish a new token on the returned container's
    session slot; logout clears the presented one. Built per call, so keep
    one container per route when reading the new token back.
    """
    return build_services(
        current_app.extensions["record_store"],
        current_app.config,
        token=bearer_token(),
        text_generator=current_app.extensions.get("text_generator"),
    )


def require_auth(f):
    """
    Require an established session.

    Sets g.current_user to the session's public user projection.

    SECURITY: Returns 401 if there is no token or the session is unknown or
    expired. Returns 403 (and revokes the session) if the stored account has
    since been disabled.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not bearer_token():
            return jsonify({"error": "Authentication required"}), 401

        services = get_services()
        user = services.identity.current_session()
        if not user:
            return jsonify({"error": "Invalid or expired token"}), 401

        if user.get("role") != Role.ADMIN.value:
            record = services.store.users.get(user["id"])
            if record is not None and record.get("status") == AccountStatus.DISABLED.value:
                services.identity.logout()
                return jsonify({"error": "Your account has been disabled. Please contact support."}), 403

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the built-in administrator. Use after @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not hasattr(g, "current_user"):
            return jsonify({"error": "Authentication required"}), 401
        if not is_admin(g.current_user):
            return jsonify({"error": "Permission denied"}), 403
        return f(*args, **kwargs)

    return decorated_function


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
