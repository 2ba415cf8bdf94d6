"""
Signed session cookies.

A session token carries the username and the time it was issued, followed
by an HMAC-SHA256 signature of both. The server keeps no session state: a
token is valid if its signature matches and it is younger than the
configured maximum age.

Token layout::

    base64url("<username>:<issued unix seconds>") "." base64url(signature)
"""

import base64
import binascii
import hashlib
import hmac
import time

import structlog

logger = structlog.get_logger(__name__)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def _signature(payload: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()


def sign(value: str, secret: str, *, issued_at: int | None = None) -> str:
    """
    Create a signed token for ``value``.

    Args:
        value: Text to protect, typically the username
        secret: Server-side signing key
        issued_at: Unix timestamp to embed (defaults to now)

    Returns:
        Token safe to store in a cookie
    """
    issued = int(time.time()) if issued_at is None else issued_at
    payload = f"{value}:{issued}".encode("utf-8")
    return f"{_b64encode(payload)}.{_b64encode(_signature(payload, secret))}"


def unsign(token: str | None, secret: str, max_age: int, *, now: int | None = None) -> str | None:
    """
    Verify a token and return the value it protects.

    Args:
        token: Token as received from the client
        secret: Server-side signing key
        max_age: Maximum token age in seconds
        now: Current Unix timestamp (defaults to now)

    Returns:
        The signed value, or None if the token is missing, malformed,
        tampered with or expired
    """
    if not token or token.count(".") != 1:
        return None

    encoded_payload, encoded_signature = token.split(".")
    try:
        payload = _b64decode(encoded_payload)
        signature = _b64decode(encoded_signature)
    except (binascii.Error, ValueError):
        return None

    if not hmac.compare_digest(signature, _signature(payload, secret)):
        logger.warning("Session signature mismatch")
        return None

    try:
        value, issued_text = payload.decode("utf-8").rsplit(":", 1)
        issued = int(issued_text)
    except ValueError:
        return None

    current = int(time.time()) if now is None else now
    if current - issued > max_age or issued > current:
        logger.info("Session expired", issued_at=issued)
        return None

    return value


def check_credentials(
    username: str, password: str, expected_username: str, expected_password: str
) -> bool:
    """Compare submitted credentials against the configured account in constant time."""
    user_ok = hmac.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    return user_ok and password_ok
