# Overview: Flask API routes for the public checkout page; no session required.

from flask import Blueprint, jsonify

from ..decorators import get_services, json_body


checkout_bp = Blueprint("checkout", __name__, url_prefix="/api/checkout")


@checkout_bp.get("/<business_id>")
def checkout_details(business_id: str):
    return jsonify(get_services().checkout.checkout_details(business_id))


@checkout_bp.post("/<business_id>/proof")
def submit_proof(business_id: str):
    """
    Record a customer's payment proof as a PENDING order.

    Body: customerName, customerWhatsapp, orderReference, amount, proofUrl.
    The stored order carries the screening verdict under ``verification``.
    """
    data = json_body()
    order = get_services().checkout.submit_payment_proof(
        business_id,
        data.get("customerName", ""),
        data.get("customerWhatsapp", ""),
        data.get("orderReference", ""),
        data.get("amount"),
        data.get("proofUrl", ""),
    )
    return jsonify({"order": order}), 201
