# Overview: Flask API routes for admin operations; user bans, deletions and the audit trail.

# backend/storefront/routes/admin.py
"""
Admin API routes

SECURITY:
- Every route requires the built-in administrator (@require_admin)
- ADMIN accounts cannot be banned or deleted (403 from the service)
- Each mutation is audited by the service, not here
"""

from flask import Blueprint, current_app, g, jsonify

from ..decorators import get_services, json_body, require_admin, require_auth


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/users")
@require_auth
@require_admin
def list_users():
    """Users in insertion order, plus total/active/disabled counts."""
    admin = get_services().admin
    users = admin.list_users()
    return jsonify({"items": users, "count": len(users), "stats": admin.user_stats()})


@admin_bp.patch("/users/<user_id>/status")
@require_auth
@require_admin
def set_user_status(user_id: str):
    """
    Body: ``{"status": "ACTIVE" | "DISABLED"}``. Omit status to toggle.
    """
    status = json_body().get("status")
    admin = get_services().admin
    if status:
        user = admin.set_status(g.current_user, user_id, status)
    else:
        user = admin.toggle_status(g.current_user, user_id)
    current_app.logger.info("Admin set %s to %s", user_id, user["status"])
    return jsonify({"user": user})


@admin_bp.delete("/users/<user_id>")
@require_auth
@require_admin
def delete_user(user_id: str):
    """Hard delete. Unknown ids succeed without effect."""
    get_services().admin.delete_user(g.current_user, user_id)
    return jsonify({"deleted": True, "id": user_id})


@admin_bp.get("/audit-logs")
@require_auth
@require_admin
def list_audit_logs():
    entries = get_services().audit.list()
    return jsonify({"items": entries, "count": len(entries)})
