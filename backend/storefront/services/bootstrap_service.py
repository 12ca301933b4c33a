# Overview: Service-layer operations for bootstrap; one-time demo data seeding.

"""
Bootstrap

Explicit, idempotent initialization run once when the app starts (see
SEED_ON_STARTUP) and by ``flask system init``. Reading users never seeds.

Seeds the three demo accounts only if the user collection is empty AND
the bootstrap marker is absent, so deleting every account later does not
bring the demo accounts back. Persists the audit log's initialization
entry when the log is empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..domain import AccountStatus, Role
from ..repository import RecordStore
from ..time_utils import now_ms
from .audit_service import AuditService
from .identity_service import hash_password

logger = logging.getLogger(__name__)

BOOTSTRAP_KEY = "bootstrap"
DEMO_PASSWORD = "password"

DAY_MS = 86_400_000

# (id, name, username, email, status, age in days)
DEMO_USERS = (
    ("user-2", "John Doe", "john", "john.doe@example.com", AccountStatus.ACTIVE, 30),
    ("user-3", "Alice Wonder", "alice", "alice@crypto-scam.net", AccountStatus.DISABLED, 7),
    ("user-4", "Michael Scott", "michael", "michael@dunder-mifflin.com", AccountStatus.ACTIVE, 1),
)


@dataclass
class BootstrapReport:
    users_seeded: int = 0
    audit_initialized: bool = False


def seed_demo_users(store: RecordStore, bcrypt_rounds: int = 12) -> int:
    """Returns the number of accounts created (0 when already bootstrapped)."""
    if store.system_settings.get(BOOTSTRAP_KEY) is not None:
        return 0

    created = 0
    if store.users.count() == 0:
        now = now_ms()
        password_hash = hash_password(DEMO_PASSWORD, bcrypt_rounds)
        for user_id, name, username, email, status, age_days in DEMO_USERS:
            store.users.put(user_id, {
                "id": user_id,
                "name": name,
                "username": username,
                "email": email,
                "passwordHash": password_hash,
                "role": Role.USER.value,
                "avatar": f"https://picsum.photos/seed/{username}/100/100",
                "status": status.value,
                "createdAt": now - age_days * DAY_MS,
            })
            created += 1
        logger.info("Seeded %d demo accounts", created)

    store.system_settings.put(BOOTSTRAP_KEY, {"completedAt": now_ms(), "usersSeeded": created})
    return created


def bootstrap(
    store: RecordStore,
    audit: AuditService,
    *,
    seed_demo_users_enabled: bool = True,
    bcrypt_rounds: int = 12,
) -> BootstrapReport:
    report = BootstrapReport()
    if seed_demo_users_enabled:
        report.users_seeded = seed_demo_users(store, bcrypt_rounds)
    report.audit_initialized = audit.ensure_initialized()
    return report
