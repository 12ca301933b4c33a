# Overview: Service-layer operations for admin user management; status changes and deletion with audit.

"""
Admin Authorization Service

WHY: Admins ban, unban and delete storefront accounts. Each change is
paired with an audit entry, and the service owns both writes so no call
site can forget the audit half.

RULES:
- Only an ADMIN actor may call the mutators (ForbiddenError)
- ADMIN targets are rejected here (ForbiddenTargetError), not left to
  callers to filter out
- Mutation first, audit second. If the audit write fails the mutation is
  compensated (prior value restored) and the error re-raised
- Deleting an unknown id is a no-op: no error, no audit entry
- Disabling or deleting an account revokes its sessions
"""

from __future__ import annotations

import logging
from typing import Callable

from ..domain import (
    AccountStatus,
    AuditAction,
    Role,
    admin_user,
    is_admin,
    parse_status,
    user_label,
)
from ..errors import ForbiddenError, ForbiddenTargetError, UserNotFoundError
from ..repository import RecordStore
from ..time_utils import now_ms
from .audit_service import AuditService
from .session_service import revoke_user_sessions

logger = logging.getLogger(__name__)


def require_admin(actor: dict | None) -> dict:
    if not is_admin(actor):
        raise ForbiddenError("Administrator access required")
    return actor


def _guard_target(record: dict) -> None:
    if record.get("role") == Role.ADMIN.value:
        raise ForbiddenTargetError()


class AdminService:
    def __init__(self, store: RecordStore, audit: AuditService):
        self.store = store
        self.audit = audit

    def list_users(self) -> list[dict]:
        """Admin rows in the collection's insertion order (not sorted)."""
        joined = now_ms()
        return [admin_user(record, joined) for record in self.store.users.list()]

    def user_stats(self) -> dict:
        users = self.store.users.list()
        active = sum(1 for u in users if (u.get("status") or AccountStatus.ACTIVE.value) == AccountStatus.ACTIVE.value)
        return {"total": len(users), "active": active, "disabled": len(users) - active}

    def set_status(self, actor: dict, user_id: str, new_status: AccountStatus | str) -> dict:
        """
        Overwrite a user's status and audit it.

        Raises:
            ForbiddenError: actor is not an admin
            ValidationError: status is not ACTIVE/DISABLED
            UserNotFoundError: no such user
            ForbiddenTargetError: target is an ADMIN account
        """
        require_admin(actor)
        status = parse_status(new_status)

        users = self.store.users
        record = users.get(user_id)
        if record is None:
            raise UserNotFoundError()
        _guard_target(record)

        previous = record.get("status") or AccountStatus.ACTIVE.value
        record["status"] = status.value
        stored = users.put(user_id, record)

        action = AuditAction.USER_BANNED if status is AccountStatus.DISABLED else AuditAction.USER_UNBANNED
        try:
            self.audit.record(
                action,
                actor.get("name") or "Admin",
                user_label(stored),
                f"Admin changed status from {previous} to {status.value}",
            )
        except Exception:
            logger.warning("Audit write failed; restoring status of %s to %s", user_id, previous)
            stored["status"] = previous
            users.put(user_id, stored)
            raise

        if status is AccountStatus.DISABLED:
            revoke_user_sessions(self.store.sessions, user_id)
        return admin_user(stored)

    def toggle_status(self, actor: dict, user_id: str) -> dict:
        record = self.store.users.get(user_id)
        if record is None:
            raise UserNotFoundError()
        current = record.get("status") or AccountStatus.ACTIVE.value
        target = AccountStatus.DISABLED if current == AccountStatus.ACTIVE.value else AccountStatus.ACTIVE
        return self.set_status(actor, user_id, target)

    def delete_user(self, actor: dict, user_id: str) -> None:
        """Hard delete. Unknown ids are a no-op."""
        require_admin(actor)

        users = self.store.users
        record = users.get(user_id)
        if record is None:
            return
        _guard_target(record)

        users.delete(user_id)
        try:
            self.audit.record(
                AuditAction.USER_DELETED,
                actor.get("name") or "Admin",
                user_label(record),
                "User account permanently deleted by admin",
            )
        except Exception:
            logger.warning("Audit write failed; restoring deleted user %s", user_id)
            record.pop("version", None)
            users.put(user_id, record)
            raise

        revoke_user_sessions(self.store.sessions, user_id)


def optimistic_status_change(
    users: list[dict],
    user_id: str,
    new_status: AccountStatus | str,
    commit: Callable[[str, AccountStatus], object],
):
    """
    Apply a status change to a locally held user list before the server confirms.

    The prior value is kept and reapplied if ``commit`` raises, then the error
    propagates. Returns whatever ``commit`` returned.
    """
    status = parse_status(new_status)
    row = next((u for u in users if u.get("id") == user_id), None)
    if row is None:
        raise UserNotFoundError()

    previous = row.get("status")
    row["status"] = status.value
    try:
        return commit(user_id, status)
    except Exception:
        row["status"] = previous
        raise
