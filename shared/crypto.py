"""
Cryptographic helpers: password hashing and token hashing.

Uses argon2 for passwords (via argon2-cffi) and SHA-256 for one-time tokens.
"""

from __future__ import annotations

import hashlib
import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher()


def hash_password(plain_password: str) -> str:
    """Hash *plain_password* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    Returns:
        ``True`` if the password matches, ``False`` for any failure
        (wrong password, invalid hash, etc.).
    """
    if not password_hash:
        return False
    try:
        return _password_hasher.verify(password_hash, plain_password)
    except (VerificationError, InvalidHashError, UnicodeEncodeError):
        return False


def hash_token(token: str) -> str:
    """Return the hex-encoded SHA-256 digest of *token*.

    Used to hash OTP codes and reset tokens before storing them in the
    database so the plaintext is never persisted.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_matches(candidate: str, token_hash: str) -> bool:
    """Constant-time check that *candidate* hashes to *token_hash*."""
    try:
        candidate_hash = hash_token(candidate)
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(candidate_hash, token_hash)
