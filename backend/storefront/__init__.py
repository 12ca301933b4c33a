# backend/storefront/__init__.py
from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ServiceError
from .extensions import db, migrate
from .repository import RecordStore


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    if app.config["STORE_BACKEND"] == "memory":
        app.extensions["record_store"] = RecordStore.in_memory()
    else:
        app.extensions["record_store"] = RecordStore.sql()

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.invitations import invitations_bp
    from .routes.businesses import businesses_bp
    from .routes.checkout import checkout_bp
    from .routes.settings import settings_bp
    from .routes.admin import admin_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(invitations_bp)
    app.register_blueprint(businesses_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(ServiceError)
    def handle_service_error(exc: ServiceError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description}), exc.code
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in set(app.config["CORS_ORIGINS"]):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    if app.config["SEED_ON_STARTUP"]:
        with app.app_context():
            init_storage(app)

    return app


def init_storage(app: Flask):
    """Create missing tables and run the idempotent bootstrap."""
    from .services.audit_service import AuditService
    from .services.bootstrap_service import bootstrap

    store = app.extensions["record_store"]
    if app.config["STORE_BACKEND"] != "memory":
        db.create_all()
    report = bootstrap(
        store,
        AuditService(store),
        seed_demo_users_enabled=True,
        bcrypt_rounds=app.config["BCRYPT_ROUNDS"],
    )
    if report.users_seeded:
        app.logger.info("Bootstrap seeded %d demo accounts", report.users_seeded)
    return report
