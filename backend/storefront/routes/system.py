# backend/storefront/routes/system.py
"""
System health and version endpoints.

Health checks read the record store the same way the API does, so an
unreachable database reports 503 here before any user-facing route fails.
"""

import sys
import time
from flask import Blueprint, current_app

from ..services.session_service import cleanup_expired_sessions
from ..time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    """Count documents in the collections every flow depends on."""
    start_time = time.time()
    store = current_app.extensions["record_store"]
    try:
        details = {
            "backend": current_app.config["STORE_BACKEND"],
            "users": store.users.count(),
            "businesses": store.businesses.count(),
            "audit_logs": store.audit_logs.count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2), "details": details}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Record store health check failed")
        return {"status": "unhealthy", "latency_ms": round(elapsed_ms, 2), "error": "Record store error"}


def check_session_health() -> dict:
    start_time = time.time()
    store = current_app.extensions["record_store"]
    try:
        expired = cleanup_expired_sessions(store.sessions)
        active = store.sessions.count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"active_sessions": active, "expired_removed": expired},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Session health check failed")
        return {"status": "unhealthy", "latency_ms": round(elapsed_ms, 2), "error": "Session store error"}


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: store and sessions reachable
    - 503: either check failed
    """
    start_time = time.time()
    store_health = check_store_health()
    session_health = check_session_health()

    healthy = all(c["status"] == "healthy" for c in (store_health, session_health))
    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": utcnow().isoformat() + "Z",
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        "checks": {
            "record_store": store_health,
            "sessions": session_health,
        },
    }
    return response, 200 if healthy else 503


@system_bp.get("/version")
def version():
    """Non-sensitive deployment information. No secrets, no paths."""
    env = "production" if not current_app.debug else "development"
    return {
        "api_version": current_app.config["APP_VERSION"],
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": utcnow().isoformat() + "Z",
    }
