"""
Random code and token generators: pure, side-effect-free functions.

All generators use the cryptographically secure ``secrets`` module.
"""

from __future__ import annotations

import secrets
import string


def generate_otp_code(length: int = 6) -> str:
    """Generate a cryptographically secure numeric OTP.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of random decimal digits.
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def generate_reset_token(nbytes: int = 32) -> str:
    """Generate a random reset token for embedding in a link.

    Args:
        nbytes: Number of random bytes (default 32). The hex string is twice
            as long.

    Returns:
        Lowercase hex string, safe in URLs without escaping.
    """
    return secrets.token_hex(nbytes)
