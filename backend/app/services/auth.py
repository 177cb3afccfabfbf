"""
Password hashing and signed bearer tokens.

Token format: ``<sub>.<exp>.<signature>`` where sub is the profile UUID, exp a
unix timestamp, and signature a truncated HMAC-SHA256 over ``<sub>.<exp>``.
"""

import os
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

TOKEN_SECRET = os.getenv("TOKEN_SECRET", "timesheets-dev-secret-change-in-prod")
TOKEN_EXPIRY_HOURS = int(os.getenv("TOKEN_EXPIRY_HOURS", "24"))

_PBKDF2_ROUNDS = 100_000


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    h = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _PBKDF2_ROUNDS)
    return f"{salt}${h.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt, h = stored.split("$", 1)
    except (AttributeError, ValueError):
        return False
    expected = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _PBKDF2_ROUNDS)
    return hmac.compare_digest(expected.hex(), h)


def _sign(payload: str) -> str:
    return hmac.new(TOKEN_SECRET.encode(), payload.encode(), "sha256").hexdigest()[:32]


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    exp = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=TOKEN_EXPIRY_HOURS))
    payload = f"{subject}.{int(exp.timestamp())}"
    return f"{payload}.{_sign(payload)}"


def decode_access_token(token: str) -> Optional[dict]:
    """Return ``{"sub": ..., "exp": ...}`` or None if the token is bad or expired."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    sub, exp_s, sig = parts
    try:
        if not hmac.compare_digest(sig, _sign(f"{sub}.{exp_s}")):
            return None
    except TypeError:
        # non-ASCII signature
        return None
    try:
        exp = int(exp_s)
    except ValueError:
        return None
    if exp < int(datetime.now(timezone.utc).timestamp()):
        return None
    return {"sub": sub, "exp": exp}
