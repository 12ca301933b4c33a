# Overview: Service-layer operations for identity; registration, login and session materialization.

"""
Identity Service

WHY: Every storefront action is attributable to a session user. This
service is the only place user credentials are created or checked.

LOGIN ORDER:
1. The single configured administrator credential. Checked before the
   user collection is touched; the admin is never stored.
2. Stored users matched by username OR email with a verifying password.
   A DISABLED account fails with AccountDisabledError.
3. Demo continuity: while the user collection is empty, an email-looking
   identifier logs in as a throwaway ACTIVE user (not persisted).

SECURITY NOTES:
- Passwords hashed with bcrypt (rounds from BCRYPT_ROUNDS)
- Password material never leaves this module (see domain.public_user)
- Admin credential compared with hmac.compare_digest
"""

from __future__ import annotations

import hmac

import bcrypt

from ..domain import (
    ADMIN_DISPLAY_NAME,
    ADMIN_USER_ID,
    AccountStatus,
    Role,
    default_avatar,
    new_id,
    public_user,
)
from ..errors import (
    AccountDisabledError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    ValidationError,
)
from ..repository import RecordStore
from ..time_utils import now_ms
from .session_service import SessionSlot


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password using bcrypt. Stored as a utf-8 string."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise (including
    malformed or missing hashes).
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _same_secret(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode('utf-8'), expected.encode('utf-8'))


def _is_text(*values) -> bool:
    """JSON bodies may carry numbers or objects where strings are expected."""
    return all(value is None or isinstance(value, str) for value in values)


class IdentityService:
    def __init__(
        self,
        store: RecordStore,
        session: SessionSlot,
        *,
        admin_email: str,
        admin_password: str,
        bcrypt_rounds: int = 12,
        allow_demo_fallback: bool = True,
    ):
        self.store = store
        self.session = session
        self.admin_email = admin_email
        self.admin_password = admin_password
        self.bcrypt_rounds = bcrypt_rounds
        self.allow_demo_fallback = allow_demo_fallback

    def register(self, username: str, password: str, full_name: str) -> dict:
        """
        Create an ACTIVE USER account and log it in.

        Username uniqueness is an exact, case-sensitive match on ``username``.

        Raises:
            ValidationError: blank or non-text username, password or full name
            DuplicateUsernameError: username already taken
        """
        if not _is_text(username, password, full_name):
            raise ValidationError("username, password and fullName must be strings")
        username = (username or "").strip()
        full_name = (full_name or "").strip()
        if not username or not password or not full_name:
            raise ValidationError("username, password and fullName are required")

        users = self.store.users
        if users.find(lambda u: u.get("username") == username):
            raise DuplicateUsernameError()

        record = {
            "id": new_id("user"),
            "username": username,
            "email": username,
            "passwordHash": hash_password(password, self.bcrypt_rounds),
            "name": full_name,
            "role": Role.USER.value,
            "status": AccountStatus.ACTIVE.value,
            "createdAt": now_ms(),
        }
        stored = users.put(record["id"], record)

        user = public_user(stored)
        self.session.establish(user)
        return user

    def login(self, identifier: str, password: str) -> dict:
        """
        Authenticate and establish a session.

        Raises:
            AccountDisabledError: credentials match a DISABLED account
            InvalidCredentialsError: nothing matched
        """
        if not _is_text(identifier, password):
            raise InvalidCredentialsError()
        identifier = (identifier or "").strip()
        password = password or ""

        if self._is_admin_credential(identifier, password):
            admin = {
                "id": ADMIN_USER_ID,
                "username": self.admin_email,
                "email": self.admin_email,
                "name": ADMIN_DISPLAY_NAME,
                "role": Role.ADMIN.value,
                "status": AccountStatus.ACTIVE.value,
                "avatar": "https://picsum.photos/100/100",
                "createdAt": None,
            }
            self.session.establish(admin)
            return admin

        records = self.store.users.list()
        for record in records:
            if identifier not in (record.get("username"), record.get("email")):
                continue
            if not verify_password(password, record.get("passwordHash")):
                continue
            if record.get("status") == AccountStatus.DISABLED.value:
                raise AccountDisabledError()
            user = public_user(record)
            self.session.establish(user)
            return user

        if not records and self.allow_demo_fallback and "@" in identifier:
            user_id = new_id("user")
            user = {
                "id": user_id,
                "username": identifier,
                "email": identifier,
                "name": identifier.split("@")[0],
                "role": Role.USER.value,
                "status": AccountStatus.ACTIVE.value,
                "avatar": default_avatar(identifier),
                "createdAt": now_ms(),
            }
            self.session.establish(user)
            return user

        raise InvalidCredentialsError()

    def logout(self) -> None:
        self.session.clear()

    def current_session(self) -> dict | None:
        return self.session.current()

    def _is_admin_credential(self, identifier: str, password: str) -> bool:
        if not self.admin_email or not self.admin_password:
            return False
        return _same_secret(identifier, self.admin_email) and _same_secret(password, self.admin_password)
