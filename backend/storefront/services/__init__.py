"""
Service wiring.

``build_services`` assembles every service around one RecordStore and one
client session slot. Routes build a container per request (the slot holds
the request's bearer token); in-process callers and tests build one and
keep it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from ..repository import RecordStore
from .admin_service import AdminService
from .ai_service import TextGenerator
from .audit_service import AuditService
from .business_service import BusinessService
from .checkout_service import CheckoutService
from .identity_service import IdentityService
from .provisioning_service import ProvisioningService
from .session_service import SessionSlot
from .settings_service import SettingsService


@dataclass
class Services:
    store: RecordStore
    session: SessionSlot
    text_generator: TextGenerator
    audit: AuditService
    identity: IdentityService
    businesses: BusinessService
    provisioning: ProvisioningService
    admin: AdminService
    settings: SettingsService
    checkout: CheckoutService


def build_services(
    store: RecordStore,
    config: Mapping[str, Any] | None = None,
    *,
    token: str | None = None,
    text_generator: TextGenerator | None = None,
) -> Services:
    config = config or {}

    session = SessionSlot(
        store.sessions,
        token=token,
        lifetime=timedelta(hours=int(config.get("SESSION_LIFETIME_HOURS", 24))),
    )
    if text_generator is None:
        text_generator = TextGenerator(
            api_key=config.get("GEMINI_API_KEY", ""),
            model=config.get("GEMINI_MODEL", "gemini-3-flash-preview"),
            base_url=config.get("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"),
            timeout=float(config.get("GEMINI_TIMEOUT", 30)),
        )

    audit = AuditService(store)
    identity = IdentityService(
        store,
        session,
        admin_email=config.get("ADMIN_EMAIL", "admin@davpro.com"),
        admin_password=config.get("ADMIN_PASSWORD", "admin123"),
        bcrypt_rounds=int(config.get("BCRYPT_ROUNDS", 12)),
        allow_demo_fallback=bool(config.get("ALLOW_DEMO_LOGIN", True)),
    )
    businesses = BusinessService(store, text_generator)
    provisioning = ProvisioningService(
        identity,
        businesses,
        store,
        invite_codes=config.get("INVITE_CODES", ()),
    )

    return Services(
        store=store,
        session=session,
        text_generator=text_generator,
        audit=audit,
        identity=identity,
        businesses=businesses,
        provisioning=provisioning,
        admin=AdminService(store, audit),
        settings=SettingsService(store, audit),
        checkout=CheckoutService(store, businesses, text_generator),
    )
