"""
HOTP (HMAC-based One-Time Password) computation following RFC 4226.
"""

import hmac
import struct
from typing import Union

from core.totp import Algorithm, _ALG_MAP

_COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


def hotp_value(
    secret_bytes: Union[bytes, bytearray],
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
) -> int:
    """
    Core HOTP computation (RFC 4226 §5).

    Args:
        secret_bytes: Raw decoded secret.
        counter:      Moving factor, packed as an 8-byte big-endian integer.
                      Negative values wrap (``-1`` packs as all ones).
        digits:       Number of OTP digits.
        algorithm:    HMAC algorithm.

    Returns:
        The OTP as an integer, ``0 <= otp < 10**digits``.
    """
    msg = struct.pack(">Q", counter & _COUNTER_MASK)
    digest = hmac.new(secret_bytes, msg, _ALG_MAP[algorithm]).digest()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    code = (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )
    return code % (10**digits)


def generate_hotp(
    secret_bytes: Union[bytes, bytearray],
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """Generate an HOTP code as a zero-padded string."""
    return str(hotp_value(secret_bytes, counter, digits, algorithm)).zfill(digits)
