# Overview: Service-layer operations for businesses; profile creation, upsert and AI greeting.

"""
Business Provisioning Service

WHY: Each owner gets a storefront profile (contact number, welcome text,
bank remittance details, product catalog). Creation seeds defaults for
anything the signup form left out.

RULES:
- One business per owner is a convention, not a constraint. create() does
  not look for an existing business, so calling it twice yields two.
- update() is a full-record replace keyed by id and inserts when the id is
  unknown (the dashboard may save a default profile that was never stored).
- Products are embedded; update() is the only way to change them.
- A successful update() broadcasts ``business_updated``.
"""

from __future__ import annotations

from urllib.parse import quote

from ..domain import (
    DEFAULT_OPERATING_HOURS,
    DEFAULT_THEME_COLOR,
    DEFAULT_WELCOME_MESSAGE,
    NOT_CONFIGURED,
    PLACEHOLDER_ACCOUNT_NUMBER,
    new_id,
    normalize_business,
    starter_catalog,
)
from ..errors import BusinessNotFoundError, ValidationError
from ..repository import RecordStore
from ..signals import business_updated
from .ai_service import TextGenerator


def _text(details: dict, key: str) -> str:
    value = details.get(key)
    return str(value).strip() if value is not None else ""


class BusinessService:
    def __init__(self, store: RecordStore, text_generator: TextGenerator | None = None):
        self.store = store
        self.text_generator = text_generator or TextGenerator()

    def get_by_owner(self, owner_id: str) -> dict | None:
        return self.store.businesses.find(lambda b: b.get("ownerId") == owner_id)

    def get_by_id(self, business_id: str) -> dict | None:
        return self.store.businesses.get(business_id)

    def create(self, owner: dict, details: dict) -> dict:
        """
        Create a business owned by ``owner``.

        ``details`` uses the signup form's keys (businessName, description,
        whatsappNumber, address, operatingHours, welcomeMessage, bankName,
        accountName, accountNumber). Blank optional fields get defaults.
        """
        name = _text(details, "businessName")
        whatsapp = _text(details, "whatsappNumber")
        if not name:
            raise ValidationError("businessName is required")
        if not whatsapp:
            raise ValidationError("whatsappNumber is required")

        business = {
            "id": new_id("biz"),
            "ownerId": owner["id"],
            "name": name,
            "description": _text(details, "description"),
            "address": _text(details, "address"),
            "operatingHours": _text(details, "operatingHours") or DEFAULT_OPERATING_HOURS,
            "logoUrl": "",
            "whatsappNumber": whatsapp,
            "welcomeMessage": _text(details, "welcomeMessage") or DEFAULT_WELCOME_MESSAGE,
            "bankName": _text(details, "bankName") or NOT_CONFIGURED,
            "accountName": _text(details, "accountName") or NOT_CONFIGURED,
            "accountNumber": _text(details, "accountNumber") or PLACEHOLDER_ACCOUNT_NUMBER,
            "products": starter_catalog(),
            "themeColor": DEFAULT_THEME_COLOR,
        }
        return self.store.businesses.put(business["id"], business)

    def update(self, business: dict) -> dict:
        """
        Replace the record with ``business["id"]``, inserting it if absent.

        A ``version`` on the payload must match the stored one
        (StaleRecordError otherwise). Products missing from the payload are gone.
        """
        record = normalize_business(business)
        stored = self.store.businesses.put(record["id"], record)
        business_updated.send(self, business=stored)
        return stored

    def default_profile(self, owner: dict) -> dict:
        """Unsaved profile shown to an owner without a business. Save via update()."""
        return {
            "id": new_id("biz"),
            "ownerId": owner["id"],
            "name": f"{owner.get('name') or 'My'}'s Business",
            "description": "",
            "address": "",
            "operatingHours": DEFAULT_OPERATING_HOURS,
            "logoUrl": "",
            "whatsappNumber": "",
            "welcomeMessage": DEFAULT_WELCOME_MESSAGE,
            "bankName": NOT_CONFIGURED,
            "accountName": NOT_CONFIGURED,
            "accountNumber": PLACEHOLDER_ACCOUNT_NUMBER,
            "products": starter_catalog(),
            "themeColor": DEFAULT_THEME_COLOR,
        }

    def generate_welcome_message(self, business_id: str) -> dict:
        """Ask the text generator for a greeting and store it on the business."""
        business = self.get_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError()
        message = self.text_generator.generate_welcome_message(
            business.get("name", ""), business.get("description", "")
        )
        business["welcomeMessage"] = message
        return self.update(business)


def whatsapp_link(business: dict) -> str:
    """Deep link the storefront QR code points at."""
    number = "".join(ch for ch in business.get("whatsappNumber", "") if ch.isdigit())
    text = business.get("welcomeMessage") or "Hi"
    return f"https://wa.me/{number}?text={quote(text, safe='')}"
