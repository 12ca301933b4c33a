# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/storefront/routes/auth.py
"""
Authentication API routes

Login and register return the session token. It must be sent as
``Authorization: Bearer <token>`` on protected routes.
"""

from flask import Blueprint, current_app, g, jsonify

from ..decorators import get_services, json_body, require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """Plain account registration (no business). Invitation signup lives in invitations.py."""
    data = json_body()
    services = get_services()
    user = services.identity.register(
        data.get("username", ""),
        data.get("password", ""),
        data.get("fullName") or data.get("name", ""),
    )
    current_app.logger.info("Registered account %s", user["id"])
    return jsonify({"user": user, "token": services.session.token}), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate by username or email.

    - 401: nothing matched
    - 403: the account is disabled
    """
    data = json_body()
    identifier = data.get("username") or data.get("email") or data.get("identifier")
    password = data.get("password")
    if not identifier or not password:
        return jsonify({"error": "username/email and password required"}), 400

    services = get_services()
    user = services.identity.login(identifier, password)
    return jsonify({"user": user, "token": services.session.token})


@auth_bp.post("/logout")
def logout_route():
    """Clears the presented session. Safe to call without one."""
    get_services().identity.logout()
    return jsonify({"message": "Logged out"})


@auth_bp.get("/session")
@require_auth
def session_route():
    return jsonify({"user": g.current_user})
