# Overview: Service-layer operations for checkout; payment proof submission and order review.

"""
Checkout

Customers reach a business's checkout page from its QR code, transfer the
money to the business's bank account and submit a proof of payment. The
proof is screened by the text-generation collaborator and stored as a
PENDING order. The owner then confirms or rejects it.

The proof itself is an opaque image reference (URL); storing the upload
is the presentation layer's concern.
"""

from __future__ import annotations

from ..domain import OrderStatus, new_id, to_amount
from ..errors import BusinessNotFoundError, ForbiddenError, OrderNotFoundError, ValidationError
from ..repository import RecordStore
from ..time_utils import now_ms
from .ai_service import TextGenerator
from .business_service import BusinessService

REVIEW_STATUSES = {OrderStatus.CONFIRMED, OrderStatus.REJECTED}


def _require_text(value, label: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def _outward(order: dict) -> dict:
    order = dict(order)
    order.pop("version", None)
    return order


class CheckoutService:
    def __init__(self, store: RecordStore, businesses: BusinessService, text_generator: TextGenerator):
        self.store = store
        self.businesses = businesses
        self.text_generator = text_generator

    def _business(self, business_id: str) -> dict:
        business = self.businesses.get_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError()
        return business

    def checkout_details(self, business_id: str) -> dict:
        """What a customer sees on the checkout page."""
        business = self._business(business_id)
        return {
            "businessId": business["id"],
            "name": business.get("name", ""),
            "logoUrl": business.get("logoUrl", ""),
            "themeColor": business.get("themeColor", ""),
            "bankName": business.get("bankName", ""),
            "accountName": business.get("accountName", ""),
            "accountNumber": business.get("accountNumber", ""),
            "products": business.get("products", []),
        }

    def submit_payment_proof(
        self,
        business_id: str,
        customer_name: str,
        customer_whatsapp: str,
        order_reference: str,
        amount,
        proof_url: str,
    ) -> dict:
        business = self._business(business_id)
        reference = _require_text(order_reference, "orderReference")
        proof = _require_text(proof_url, "proofUrl")
        amount = to_amount(amount, "amount")

        verdict = self.text_generator.analyze_payment_proof(proof)
        order = {
            "id": new_id("ord"),
            "businessId": business["id"],
            "customerName": str(customer_name or "").strip(),
            "customerWhatsapp": str(customer_whatsapp or "").strip(),
            "orderReference": reference,
            "amount": amount,
            "proofUrl": proof,
            "status": OrderStatus.PENDING.value,
            "timestamp": now_ms(),
            "verification": verdict,
        }
        return _outward(self.store.orders.put(order["id"], order))

    def list_orders(self, business_id: str) -> list[dict]:
        orders = [o for o in self.store.orders.list() if o.get("businessId") == business_id]
        orders = list(reversed(orders))
        orders.sort(key=lambda o: o.get("timestamp") or 0, reverse=True)
        return [_outward(o) for o in orders]

    def set_order_status(self, owner: dict, order_id: str, status: OrderStatus | str) -> dict:
        try:
            status = OrderStatus(str(getattr(status, "value", status)).upper())
        except ValueError:
            raise ValidationError("status must be CONFIRMED or REJECTED")
        if status not in REVIEW_STATUSES:
            raise ValidationError("status must be CONFIRMED or REJECTED")

        order = self.store.orders.get(order_id)
        if order is None:
            raise OrderNotFoundError()
        business = self.businesses.get_by_id(order["businessId"])
        if business is None or business.get("ownerId") != owner.get("id"):
            raise ForbiddenError("Only the business owner can review its orders")

        order["status"] = status.value
        return _outward(self.store.orders.put(order_id, order))
