# Overview: Record shapes, enums, defaults and normalizers shared by the services.

"""
Domain records are plain JSON documents (camelCase keys, epoch-millisecond
timestamps) because that is what the store persists and what the
storefront front end consumes. This module owns their vocabulary:

- enums for roles, account status, audit actions and order status
- id generation ("user-", "biz-", "log-", "ord-", "prod-" prefixes)
- outward projections (passwords never leave the service layer)
- defaults seeded into new businesses
- input normalizers raising ValidationError
"""

from __future__ import annotations

import math
import secrets
import string
from enum import Enum
from typing import Any

from .errors import ValidationError


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"
    GUEST = "GUEST"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"


class AuditAction(str, Enum):
    USER_BANNED = "USER_BANNED"
    USER_UNBANNED = "USER_UNBANNED"
    USER_DELETED = "USER_DELETED"
    SYSTEM_UPDATE = "SYSTEM_UPDATE"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"


_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_id(prefix: str) -> str:
    """Random record id like ``user-k3j9x0a1b``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{suffix}"


def default_avatar(seed: str) -> str:
    return f"https://picsum.photos/seed/{seed}/100/100"


# =============================================================================
# USERS
# =============================================================================

ADMIN_USER_ID = "admin-1"
ADMIN_DISPLAY_NAME = "Super Admin"


def public_user(record: dict) -> dict:
    """Outward projection of a user record. Password material is excluded."""
    return {
        "id": record["id"],
        "username": record.get("username") or record.get("email"),
        "email": record.get("email") or record.get("username"),
        "name": record.get("name") or "",
        "role": record.get("role") or Role.USER.value,
        "status": record.get("status") or AccountStatus.ACTIVE.value,
        "avatar": record.get("avatar") or default_avatar(record["id"]),
        "createdAt": record.get("createdAt"),
    }


def admin_user(record: dict, fallback_joined_at: int | None = None) -> dict:
    """Row shown in the admin console's user table."""
    return {
        "id": record["id"],
        "email": record.get("email") or record.get("username"),
        "name": record.get("name") or "",
        "role": record.get("role") or Role.USER.value,
        "avatar": record.get("avatar") or default_avatar(record["id"]),
        "status": record.get("status") or AccountStatus.ACTIVE.value,
        "joinedAt": record.get("createdAt") or fallback_joined_at,
    }


def user_label(record: dict) -> str:
    """How an account is named in the audit trail."""
    return record.get("email") or record.get("username") or record["id"]


def is_admin(user: dict | None) -> bool:
    return bool(user) and user.get("role") == Role.ADMIN.value


def parse_status(value: Any) -> AccountStatus:
    try:
        return AccountStatus(str(value).upper())
    except ValueError:
        raise ValidationError(f"status must be one of: {', '.join(s.value for s in AccountStatus)}")


# =============================================================================
# BUSINESSES & PRODUCTS
# =============================================================================

DEFAULT_OPERATING_HOURS = "Mon-Fri: 9AM - 5PM"
DEFAULT_WELCOME_MESSAGE = "Hello! Thanks for reaching out. Browse our catalog and let us know how we can help you today."
DEFAULT_THEME_COLOR = "#2563eb"
NOT_CONFIGURED = "Not Configured"
PLACEHOLDER_ACCOUNT_NUMBER = "0000000000"

# Upper bound for prices and payment amounts, in major currency units
MAX_AMOUNT = 9_999_999.99

STARTER_PRODUCTS = (
    {"name": "Starter Package", "price": 99, "description": "Entry-level bundle for new customers"},
    {"name": "Premium Package", "price": 299, "description": "Full service with priority support"},
    {"name": "Consultation", "price": 49, "description": "One-hour session over WhatsApp"},
)


def starter_catalog() -> list[dict]:
    """Fresh copy of the starter catalog with unique product ids."""
    return [{"id": new_id("prod"), **product} for product in STARTER_PRODUCTS]


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _required_text(raw: dict, key: str, label: str | None = None) -> str:
    text = _to_text(raw.get(key))
    if not text:
        raise ValidationError(f"{label or key} is required")
    return text


def to_amount(value: Any, field: str = "price") -> float | int:
    """
    Parse a non-negative money amount in major units (numbers or numeric strings).

    Rejects NaN, infinities and anything above MAX_AMOUNT.
    """
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            raise ValidationError(f"{field} must be a number")
    if isinstance(number, float) and not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    if number < 0:
        raise ValidationError(f"{field} must be zero or greater")
    if number > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT:,.2f}")
    return number


def normalize_product(raw: Any) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError("product must be an object")
    product = {
        "id": _to_text(raw.get("id")) or new_id("prod"),
        "name": _required_text(raw, "name", "product name"),
        "price": to_amount(raw.get("price")),
    }
    description = _to_text(raw.get("description"))
    if description:
        product["description"] = description
    return product


def normalize_products(raw: Any) -> list[dict]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("products must be a list")
    products = [normalize_product(item) for item in raw]
    ids = [p["id"] for p in products]
    if len(ids) != len(set(ids)):
        raise ValidationError("product ids must be unique within a business")
    return products


BUSINESS_TEXT_FIELDS = (
    "name",
    "description",
    "address",
    "operatingHours",
    "logoUrl",
    "whatsappNumber",
    "welcomeMessage",
    "bankName",
    "accountName",
    "accountNumber",
    "themeColor",
)


def normalize_business(raw: Any) -> dict:
    """Full business record for a replace write. Unknown keys are dropped."""
    if not isinstance(raw, dict):
        raise ValidationError("business must be an object")
    business = {
        "id": _required_text(raw, "id"),
        "ownerId": _required_text(raw, "ownerId"),
    }
    for field in BUSINESS_TEXT_FIELDS:
        business[field] = _to_text(raw.get(field))
    if not business["name"]:
        raise ValidationError("name is required")
    business["themeColor"] = business["themeColor"] or DEFAULT_THEME_COLOR
    business["products"] = normalize_products(raw.get("products"))
    if raw.get("version") is not None:
        business["version"] = raw["version"]
    return business


# =============================================================================
# MONETIZATION
# =============================================================================

def empty_bank_details() -> dict:
    return {"bankName": "", "accountName": "", "accountNumber": "", "isVisible": False}


def normalize_bank_details(raw: Any) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError("bank details must be an object")
    is_visible = raw.get("isVisible", False)
    if not isinstance(is_visible, bool):
        raise ValidationError("isVisible must be a boolean")
    return {
        "bankName": _to_text(raw.get("bankName")),
        "accountName": _to_text(raw.get("accountName")),
        "accountNumber": _to_text(raw.get("accountNumber")),
        "isVisible": is_visible,
    }
