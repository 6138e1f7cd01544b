# backend/complaint_register/config.py
from __future__ import annotations
import os


def default_db_path() -> str:
    # Per-user data directory, mirrors the desktop register's AppData location
    return os.path.join(os.path.expanduser("~"), ".jipl_complaint_register", "complaints.db")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite file holding the complaints table
    COMPLAINTS_DB_PATH = os.environ.get("COMPLAINTS_DB_PATH", default_db_path())

    # DATABASE_URL wins over the derived sqlite:/// URI when set
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Re-derive attempts when a complaint number collides on insert
    COMPLAINT_NUMBER_ATTEMPTS = int(os.environ.get("COMPLAINT_NUMBER_ATTEMPTS", "3"))
