# backend/fleetledger/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/fleetledger.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///fleetledger.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sessions: opaque token in an HttpOnly cookie (or Bearer header)
    SESSION_TOKEN_COOKIE = os.environ.get("SESSION_TOKEN_COOKIE", "fleetledger_session")
    SESSION_TTL = timedelta(days=int(os.environ.get("SESSION_TTL_DAYS", "30")))
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", "false")

    # Password KDF work factor. Changing it invalidates stored hashes.
    PASSWORD_KDF_ROUNDS = int(os.environ.get("PASSWORD_KDF_ROUNDS", "16"))

    # Startup bootstrap. The default admin password MUST be rotated in production.
    AUTO_CREATE_SCHEMA = _env_flag("AUTO_CREATE_SCHEMA", "true")
    BOOTSTRAP_DEFAULT_ADMIN = _env_flag("BOOTSTRAP_DEFAULT_ADMIN", "true")
    DEFAULT_ADMIN_USERNAME = "admin"
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
