# Overview: Flask API routes for businesses operations; owner dashboard profile, AI greeting and orders.

from flask import Blueprint, g, jsonify

from ..decorators import get_services, json_body, require_auth
from ..domain import is_admin
from ..errors import BusinessNotFoundError, ForbiddenError, ValidationError
from ..services.business_service import whatsapp_link


businesses_bp = Blueprint("businesses", __name__, url_prefix="/api")


def _owned_business(business_id: str) -> dict:
    """The business, provided the caller owns it (or is the admin)."""
    business = get_services().businesses.get_by_id(business_id)
    if business is None:
        raise BusinessNotFoundError()
    if business.get("ownerId") != g.current_user["id"] and not is_admin(g.current_user):
        raise ForbiddenError("You do not own this business")
    return business


def _business_payload(business: dict, persisted: bool) -> dict:
    return {
        "business": business,
        "persisted": persisted,
        "whatsappLink": whatsapp_link(business),
    }


@businesses_bp.get("/businesses/me")
@require_auth
def my_business():
    """
    The caller's business. Owners without one get an unsaved default
    profile (``persisted: false``) they can save with PUT.
    """
    services = get_services()
    business = services.businesses.get_by_owner(g.current_user["id"])
    if business is None:
        return jsonify(_business_payload(services.businesses.default_profile(g.current_user), False))
    return jsonify(_business_payload(business, True))


@businesses_bp.put("/businesses/<business_id>")
@require_auth
def update_business(business_id: str):
    """
    Full-record replace (insert when the id is unknown).

    Send back the ``version`` you read to get a 409 instead of silently
    overwriting a concurrent save.
    """
    data = json_body()
    if data.get("id") not in (None, business_id):
        raise ValidationError("Business id in body does not match the URL")

    services = get_services()
    existing = services.businesses.get_by_id(business_id)
    if existing is not None:
        _owned_business(business_id)
        data["ownerId"] = existing["ownerId"]
    else:
        data["ownerId"] = g.current_user["id"]
    data["id"] = business_id

    business = services.businesses.update(data)
    return jsonify(_business_payload(business, True))


@businesses_bp.post("/businesses/<business_id>/welcome-message")
@require_auth
def generate_welcome_message(business_id: str):
    _owned_business(business_id)
    business = get_services().businesses.generate_welcome_message(business_id)
    return jsonify(_business_payload(business, True))


@businesses_bp.get("/businesses/<business_id>/orders")
@require_auth
def list_orders(business_id: str):
    _owned_business(business_id)
    orders = get_services().checkout.list_orders(business_id)
    return jsonify({"items": orders, "count": len(orders)})


@businesses_bp.patch("/orders/<order_id>")
@require_auth
def review_order(order_id: str):
    status = json_body().get("status")
    if not status:
        return jsonify({"error": "status is required"}), 400
    order = get_services().checkout.set_order_status(g.current_user, order_id, status)
    return jsonify({"order": order})
