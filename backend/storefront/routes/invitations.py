# Overview: Flask API routes for invitation signup; validates codes and provisions owner + business.

from flask import Blueprint, current_app, jsonify

from ..decorators import get_services, json_body


invitations_bp = Blueprint("invitations", __name__, url_prefix="/api/invitations")


@invitations_bp.get("/<code>")
def validate_invitation_route(code: str):
    code = get_services().provisioning.validate_invitation(code)
    return jsonify({"code": code, "valid": True})


@invitations_bp.post("/<code>/signup")
def signup_route(code: str):
    """
    Create the owner account and its business in one step.

    On success the new owner is logged in and the token is returned. On
    failure neither record remains.
    """
    services = get_services()
    result = services.provisioning.provision(code, json_body())
    current_app.logger.info(
        "Provisioned business %s for %s", result.business["id"], result.user["id"]
    )
    payload = result.to_dict()
    payload["token"] = services.session.token
    return jsonify(payload), 201
