"""
JWT-style token creation and verification.

Tokens are base64-encoded JSON payloads signed with HMAC-SHA256.
Secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``).
Verification is stateless: there is no session table and no revocation list.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
import uuid
from base64 import urlsafe_b64decode, urlsafe_b64encode

from config.settings import config
from core.exceptions import Unauthenticated


def _sign(raw: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()


def create_token(
    user_id: str | uuid.UUID,
    *,
    secret: str | None = None,
    expires_in: int | None = None,
) -> str:
    """Create a signed token containing ``user_id`` and expiry."""
    payload = {
        "user_id": str(user_id),
        "exp": int(time.time()) + (expires_in if expires_in is not None else config.jwt_expiry_seconds),
    }
    raw = json.dumps(payload).encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(raw, secret or config.jwt_secret)


def verify_token(token: str, *, secret: str | None = None) -> str:
    """
    Verify token and return ``user_id`` in canonical UUID form.

    Raises ``Unauthenticated`` on malformed, tampered or expired tokens.
    """
    try:
        encoded, sig = token.split(".", 1)
        raw = urlsafe_b64decode(encoded.encode())
        if not hmac.compare_digest(sig, _sign(raw, secret or config.jwt_secret)):
            raise ValueError("bad signature")
        payload = json.loads(raw)
        if payload.get("exp", 0) < time.time():
            raise ValueError("token expired")
        return str(uuid.UUID(payload["user_id"]))
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise Unauthenticated(f"Invalid or expired token: {exc}") from exc
