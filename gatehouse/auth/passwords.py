# =============================================================================
# Password Hashing & Token Generation
# =============================================================================
#
# Two digest formats are understood:
#   - "<64 hex chars>"                              unsalted SHA-256 (legacy)
#   - "pbkdf2_sha256$<iterations>$<salt>$<hex>"     salted PBKDF2-SHA256
#
# New digests use the scheme and iteration count of the Settings passed in
# (the global settings when none are). Verification reads the scheme and the
# iteration count from the digest itself, so old digests keep verifying after
# either setting changes.
#
# The SHA-256 scheme has no salt and is fast; it stays the default only so
# existing digests keep verifying.
#
# =============================================================================

from __future__ import annotations

import hashlib
import secrets
import string

from gatehouse.config import Settings, get_settings

ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits

SCHEME_SHA256 = "sha256"
SCHEME_PBKDF2 = "pbkdf2_sha256"


def _sha256(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    hash_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=iterations,
    )
    return hash_bytes.hex()


def hash_password(
    password: str,
    scheme: str | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Hash a password.

    Args:
        password: Plaintext password
        scheme: Overrides settings.password_scheme
        settings: Source of the default scheme and PBKDF2 iteration count

    Returns:
        A hex SHA-256 digest, or "pbkdf2_sha256$<iterations>$<salt>$<hex>"
    """
    settings = settings or get_settings()
    scheme = scheme or settings.password_scheme

    if scheme == SCHEME_SHA256:
        return _sha256(password)
    if scheme == SCHEME_PBKDF2:
        iterations = settings.pbkdf2_iterations
        salt = secrets.token_hex(16)
        return f"{SCHEME_PBKDF2}${iterations}${salt}${_pbkdf2(password, salt, iterations)}"
    raise ValueError(f"Unknown password scheme: {scheme}")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its hash."""
    if not password_hash or password is None:
        return False
    try:
        if password_hash.startswith(f"{SCHEME_PBKDF2}$"):
            _, iterations, salt, stored_hash = password_hash.split("$")
            candidate = _pbkdf2(password, salt, int(iterations))
        else:
            stored_hash = password_hash
            candidate = _sha256(password)
        return secrets.compare_digest(candidate, stored_hash)
    except (ValueError, AttributeError, TypeError):
        return False


def generate_token(length: int) -> str:
    """Random string of `length` characters from [A-Za-z0-9]."""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))
