# Overview: Service-layer operations for monetization settings; the platform's bank details singleton.

from __future__ import annotations

import logging

from ..domain import AuditAction, empty_bank_details, is_admin, normalize_bank_details
from ..repository import RecordStore
from .audit_service import AuditService

logger = logging.getLogger(__name__)

BANK_DETAILS_KEY = "bankDetails"


class SettingsService:
    """
    Platform bank details shown on the owners' billing view.

    ``isVisible`` gates whether non-admin viewers see them at all. Saving is
    an unconditional overwrite.
    """

    def __init__(self, store: RecordStore, audit: AuditService):
        self.store = store
        self.audit = audit

    def get(self) -> dict:
        stored = self.store.system_settings.get(BANK_DETAILS_KEY)
        if stored is None:
            return empty_bank_details()
        stored.pop("version", None)
        return stored

    def save(self, details: dict, actor: dict | None = None) -> dict:
        record = normalize_bank_details(details)
        self.store.system_settings.put(BANK_DETAILS_KEY, record)
        if actor is not None:
            self.audit.record(
                AuditAction.SYSTEM_UPDATE,
                actor.get("name") or "Admin",
                "SYSTEM",
                f"Admin updated monetization settings. Public: {str(record['isVisible']).lower()}",
            )
        return record

    def get_for_viewer(self, viewer: dict | None) -> dict | None:
        details = self.get()
        if is_admin(viewer) or details["isVisible"]:
            return details
        return None
