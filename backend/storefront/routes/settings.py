# Overview: Flask API routes for monetization settings; admin editing and the owners' billing view.

from __future__ import annotations

from flask import Blueprint, g, jsonify

from ..decorators import get_services, json_body, require_admin, require_auth


settings_bp = Blueprint("settings", __name__, url_prefix="/api")


@settings_bp.get("/billing")
@require_auth
def billing():
    """Platform bank details, or ``null`` while the admin keeps them hidden."""
    details = get_services().settings.get_for_viewer(g.current_user)
    return jsonify({"bankDetails": details})


@settings_bp.get("/admin/monetization")
@require_auth
@require_admin
def get_monetization():
    return jsonify({"bankDetails": get_services().settings.get()})


@settings_bp.put("/admin/monetization")
@require_auth
@require_admin
def save_monetization():
    details = get_services().settings.save(json_body(), actor=g.current_user)
    return jsonify({"bankDetails": details})
