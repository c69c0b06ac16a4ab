# Overview: Bearer credential issuance and verification.

"""
Signed bearer credentials (HS256 JWT) binding a request to an account email.

The credential carries no role or status: authorization always reads the
account directory fresh, so a role change takes effect on the next request
without re-issuing tokens. Tokens travel either in the Authorization header
or in an httpOnly cookie set at login.
"""

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from ..errors import UnauthorizedError

ALGORITHM = "HS256"


def _secret() -> str:
    return current_app.config.get("JWT_SECRET") or current_app.config["SECRET_KEY"]


def issue_token(email: str, *, now: datetime | None = None) -> str:
    """Sign a credential for ``email`` valid for TOKEN_TTL_DAYS."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=current_app.config["TOKEN_TTL_DAYS"]),
    }
    return jwt.encode(payload, _secret(), algorithm=ALGORITHM)


def verify_token(token: str) -> str:
    """
    Verify a credential and return the email it is bound to.

    Raises UnauthorizedError if the token is malformed, badly signed,
    expired, or carries no email.
    """
    try:
        payload = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise UnauthorizedError("Invalid token")
    return email


def set_token_cookie(response, token: str):
    production = current_app.config["APP_ENV"] == "production"
    response.set_cookie(
        current_app.config["TOKEN_COOKIE_NAME"],
        token,
        max_age=int(timedelta(days=current_app.config["TOKEN_TTL_DAYS"]).total_seconds()),
        httponly=True,
        secure=production,
        samesite="None" if production else "Strict",
    )
    return response


def clear_token_cookie(response):
    production = current_app.config["APP_ENV"] == "production"
    response.delete_cookie(
        current_app.config["TOKEN_COOKIE_NAME"],
        httponly=True,
        secure=production,
        samesite="None" if production else "Strict",
    )
    return response
