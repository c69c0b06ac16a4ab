# backend/garments/config.py
from __future__ import annotations
import os


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Bearer credentials are signed with JWT_SECRET when set, else SECRET_KEY
    JWT_SECRET = os.environ.get("JWT_SECRET")
    TOKEN_TTL_DAYS = _int_env("TOKEN_TTL_DAYS", 7)
    TOKEN_COOKIE_NAME = "token"

    # "production" switches the credential cookie to Secure + SameSite=None
    APP_ENV = os.environ.get("APP_ENV", "development")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///garments.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Bounded retries for the order/stock conditional updates
    ORDER_RETRY_ATTEMPTS = _int_env("ORDER_RETRY_ATTEMPTS", 3)
    ORDER_RETRY_BACKOFF = 0.05

    HOME_PRODUCT_LIMIT = _int_env("HOME_PRODUCT_LIMIT", 6)
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = _int_env("MAX_PAGE_SIZE", 100)
