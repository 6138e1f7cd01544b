# backend/complaint_register/__init__.py
from __future__ import annotations

import os

from flask import Flask
from sqlalchemy.engine import make_url

from .config import Config
from .extensions import db


def sqlite_uri(path: str) -> str:
    return f"sqlite:///{os.path.abspath(path)}"


def _ensure_database_directory(uri: str) -> None:
    url = make_url(uri)
    if not url.drivername.startswith("sqlite"):
        return
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    directory = os.path.dirname(os.path.abspath(database))
    os.makedirs(directory, exist_ok=True)


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = sqlite_uri(app.config["COMPLAINTS_DB_PATH"])
    _ensure_database_directory(app.config["SQLALCHEMY_DATABASE_URI"])

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)

    # Import models so metadata is complete before create_all
    from . import models  # noqa: F401

    # Idempotent schema setup (CREATE TABLE / INDEX IF NOT EXISTS)
    with app.app_context():
        db.create_all()

    # Register blueprints
    from .routes.system import system_bp
    from .routes.complaints import complaints_bp
    from .routes.reports import reports_bp
    from .routes.exports import exports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(complaints_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(exports_bp)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
