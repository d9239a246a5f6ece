from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request

from config import AuthSettings, get_auth_settings
from utils.errors import Forbidden, Unauthenticated

PASSWORD_HASH_ALGO = "pbkdf2_sha256"
AUTH_SCHEME = "bearer"


@dataclass(frozen=True)
class CurrentUser:
    id: int


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    iterations = iterations or get_auth_settings().password_hash_iterations
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    digest = base64.urlsafe_b64encode(dk).decode("utf-8")
    return f"{PASSWORD_HASH_ALGO}${iterations}${salt}${digest}"


def verify_password(password: str, stored_hash: str) -> bool:
    if not stored_hash or password is None:
        return False
    try:
        algo, iterations_str, salt, digest = stored_hash.split("$", 3)
    except ValueError:
        return False
    if algo != PASSWORD_HASH_ALGO:
        return False
    try:
        iterations = int(iterations_str)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    computed = base64.urlsafe_b64encode(dk).decode("utf-8")
    return hmac.compare_digest(computed, digest)


def create_access_token(user_id: int, settings: Optional[AuthSettings] = None) -> str:
    settings = settings or get_auth_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.token_ttl_minutes)
    claims = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(token: str, settings: Optional[AuthSettings] = None) -> int:
    """Return the user id carried by a valid token; raise Forbidden otherwise."""
    settings = settings or get_auth_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        raise Forbidden() from None
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise Forbidden() from None


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != AUTH_SCHEME:
        return None
    token = token.strip()
    return token or None


def get_current_user(request: Request) -> CurrentUser:
    """Resolve the caller from the Authorization header or reject the request."""
    token = extract_bearer_token(request.headers.get("authorization"))
    if not token:
        raise Unauthenticated()
    return CurrentUser(id=verify_access_token(token))
