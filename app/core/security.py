"""
Admin authentication.

A single privileged account (ADMIN_EMAIL / ADMIN_PASSWORD) unlocks the
dashboard. A successful login issues a signed HS256 session token that is
kept in an HttpOnly cookie; every /admin route depends on `require_admin`.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class AdminLoginRequired(Exception):
    """No valid admin session; the handler redirects to the login page."""

    def __init__(self, reason: str = "login required"):
        super().__init__(reason)
        self.reason = reason


def authenticate_admin(email: str, password: str) -> bool:
    settings = get_settings()
    email_ok = hmac.compare_digest(
        email.strip().lower().encode(), settings.admin_email.strip().lower().encode()
    )
    password_ok = hmac.compare_digest(password.encode(), settings.admin_password.encode())
    return email_ok and password_ok


def create_session_token(email: str, now: Optional[datetime] = None) -> str:
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "role": "admin",
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.session_ttl_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> dict:
    """
    Validate a session token and return its claims.

    Raises:
        AdminLoginRequired: expired, tampered or non-admin token
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AdminLoginRequired("session expired")
    except jwt.InvalidTokenError:
        raise AdminLoginRequired("invalid session")

    if claims.get("role") != "admin":
        raise AdminLoginRequired("not an admin session")
    return claims


def require_admin(request: Request) -> dict:
    """FastAPI dependency guarding every admin route."""
    settings = get_settings()
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise AdminLoginRequired()
    claims = decode_session_token(token)
    request.state.admin_email = claims.get("sub")
    return claims
