# Overview: Service-layer operations for session; holds the authenticated identity per client.

"""
Session Token Management

WHY: The client keeps "who is logged in" separately from the durable user
record. A session slot stores the public user projection under a bearer
token; establishing a new session replaces the previous one for that
client (last write wins, no concurrent-session tracking).

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- Absolute timeout (SESSION_LIFETIME_HOURS, default 24h)
- Revocable on logout
"""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta

from ..repository import Collection
from ..time_utils import now_ms


DEFAULT_SESSION_LIFETIME = timedelta(hours=24)


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    This is the plaintext token sent to client (never stored).
    """
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    Hash token for storage using SHA-256.

    WHY SHA-256 not bcrypt: Tokens are already high-entropy (unlike passwords).
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


class SessionSlot:
    """
    The session of one client.

    ``token`` is None until a session is established (or after clear()).
    Routes build a slot from the request's bearer token; in-process callers
    keep one slot for their lifetime.
    """

    def __init__(
        self,
        sessions: Collection,
        token: str | None = None,
        lifetime: timedelta = DEFAULT_SESSION_LIFETIME,
    ):
        self._sessions = sessions
        self._token = token
        self._lifetime_ms = int(lifetime.total_seconds() * 1000)

    @property
    def token(self) -> str | None:
        return self._token

    def establish(self, user: dict) -> str:
        """Replace this client's session with one for ``user``. Returns the new token."""
        if self._token:
            self._sessions.delete(hash_token(self._token))

        token = generate_token()
        now = now_ms()
        token_hash = hash_token(token)
        self._sessions.put(token_hash, {
            "tokenHash": token_hash,
            "user": dict(user),
            "createdAt": now,
            "expiresAt": now + self._lifetime_ms,
        })
        self._token = token
        return token

    def current(self) -> dict | None:
        """
        Public user projection of the session, or None.

        Pure read: expired sessions are reported as absent but not deleted here
        (see cleanup_expired_sessions).
        """
        if not self._token:
            return None
        record = self._sessions.get(hash_token(self._token))
        if record is None:
            return None
        if record.get("expiresAt", 0) <= now_ms():
            return None
        return record["user"]

    def clear(self) -> None:
        """Revoke the session. Safe to call repeatedly."""
        if self._token:
            self._sessions.delete(hash_token(self._token))
        self._token = None


def revoke_user_sessions(sessions: Collection, user_id: str) -> int:
    """
    Revoke all sessions held by a user.

    Returns count of sessions revoked.

    WHY: A deleted or disabled account must not keep acting through a
    session issued before the admin action.
    """
    count = 0
    for key, record in _sessions_with_keys(sessions):
        if record.get("user", {}).get("id") == user_id:
            sessions.delete(key)
            count += 1
    return count


def cleanup_expired_sessions(sessions: Collection) -> int:
    """Delete expired sessions. Returns count deleted."""
    now = now_ms()
    count = 0
    for key, record in _sessions_with_keys(sessions):
        if record.get("expiresAt", 0) <= now:
            sessions.delete(key)
            count += 1
    return count


def _sessions_with_keys(sessions: Collection):
    # Session documents are keyed by token hash, which is stored alongside them.
    return [(record["tokenHash"], record) for record in sessions.list() if record.get("tokenHash")]
