# backend/storefront/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/storefront.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///storefront.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" keeps documents in the database, "memory" in process (demo only)
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql")

    # The single pre-provisioned administrator. Never stored in the users table.
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@davpro.com")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))
    SESSION_LIFETIME_HOURS = int(os.environ.get("SESSION_LIFETIME_HOURS", "24"))

    # Empty list accepts any non-blank invitation code
    INVITE_CODES = _env_list("INVITE_CODES", "DEMO-INVITE-2024,DAV-PRO-PUBLIC-INVITE")

    # Email-looking identifiers log in as a throwaway user while no accounts exist
    ALLOW_DEMO_LOGIN = _env_bool("ALLOW_DEMO_LOGIN", "true")

    # Run the idempotent bootstrap (demo accounts, audit init entry) at startup
    SEED_ON_STARTUP = _env_bool("SEED_ON_STARTUP", "true")

    # Text-generation collaborator. Without a key the templated fallbacks are used.
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", os.environ.get("API_KEY", ""))
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
    GEMINI_BASE_URL = os.environ.get("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_TIMEOUT = float(os.environ.get("GEMINI_TIMEOUT", "30"))

    CORS_ORIGINS = _env_list(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
    )

    APP_VERSION = os.environ.get("APP_VERSION", "1.0.0")
