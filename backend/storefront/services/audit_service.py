# Overview: Service-layer operations for the audit log; append-only admin action trail.

"""
Audit Log

WHY: Administrative mutations (ban, unban, delete, monetization changes)
must be attributable after the fact.

IMMUTABLE: Entries are never updated or deleted. The trail is advisory,
not authoritative: it records what admins did, it does not gate anything.
"""

from __future__ import annotations

import logging

from ..domain import AuditAction, new_id
from ..errors import ValidationError
from ..repository import RecordStore
from ..time_utils import now_ms

logger = logging.getLogger(__name__)

INIT_LOG_ID = "log-init"
INIT_DETAILS = "Audit Log System Initialized"


def _init_entry(timestamp: int, entry_id: str = INIT_LOG_ID) -> dict:
    return {
        "id": entry_id,
        "action": AuditAction.SYSTEM_UPDATE.value,
        "adminName": "System",
        "targetUser": "N/A",
        "timestamp": timestamp,
        "details": INIT_DETAILS,
    }


def _outward(entry: dict) -> dict:
    entry = dict(entry)
    entry.pop("version", None)
    return entry


class AuditService:
    def __init__(self, store: RecordStore):
        self.store = store

    def record(
        self,
        action: AuditAction | str,
        admin_name: str,
        target_user: str,
        details: str | None = None,
    ) -> dict:
        """Append an entry stamped with a fresh id and the current time."""
        try:
            action = AuditAction(action)
        except ValueError:
            raise ValidationError(f"Unknown audit action: {action}")
        entry = {
            "id": new_id("log"),
            "action": action.value,
            "adminName": admin_name,
            "targetUser": target_user,
            "timestamp": now_ms(),
        }
        if details is not None:
            entry["details"] = details
        stored = self.store.audit_logs.put(entry["id"], entry)
        return _outward(stored)

    def list(self) -> list[dict]:
        """
        Entries newest first.

        Entries sharing a timestamp keep the later-recorded one first. An empty
        log yields a single synthetic initialization entry that is informational
        only and is not evidence of admin activity.
        """
        entries = self.store.audit_logs.list()
        if not entries:
            return [_init_entry(now_ms())]
        newest_first = list(reversed(entries))
        newest_first.sort(key=lambda e: e.get("timestamp") or 0, reverse=True)
        return [_outward(e) for e in newest_first]

    def ensure_initialized(self) -> bool:
        """Persist the initialization entry when the log is empty. Returns True if written."""
        if self.store.audit_logs.count():
            return False
        entry = _init_entry(now_ms(), entry_id=new_id("log"))
        self.store.audit_logs.put(entry["id"], entry)
        logger.info("Audit log initialized")
        return True
