"""
TOTP (Time-based One-Time Password) helpers following RFC 6238.

TOTP is HOTP with a moving factor derived from the clock: the number of
whole time steps elapsed since the Unix epoch.
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from core.errors import OutOfRangeError


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


_ALG_MAP: dict[str, str] = {
    Algorithm.SHA1: "sha1",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA512: "sha512",
}

Timestamp = Union[int, float, datetime]


def parse_algorithm(value: Union[str, Algorithm]) -> Algorithm:
    """
    Resolve *value* to an :class:`Algorithm`.

    Accepts enum members and their names in any case, with or without a
    dash (``"sha-256"``).

    Raises:
        OutOfRangeError: If the algorithm is unknown.
    """
    if isinstance(value, Algorithm):
        return value
    if isinstance(value, str):
        name = value.strip().upper().replace("-", "")
        if name in Algorithm.__members__:
            return Algorithm[name]
    raise OutOfRangeError(f"Unknown algorithm {value!r}.")


def to_unix_seconds(value: Timestamp) -> int:
    """
    Convert *value* to whole seconds since the Unix epoch.

    Naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return int(value)


def _now(timestamp: Optional[Timestamp]) -> int:
    return to_unix_seconds(timestamp if timestamp is not None else time.time())


def time_counter(time_step: int, timestamp: Optional[Timestamp] = None) -> int:
    """
    Return the TOTP moving factor for *timestamp*.

    Args:
        time_step: Length of one step in seconds.
        timestamp: Override time (uses ``time.time()`` if None).

    Returns:
        ``floor(seconds_since_epoch / time_step)``.
    """
    return _now(timestamp) // time_step


def remaining_seconds(time_step: int = 30, timestamp: Optional[Timestamp] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    return time_step - (_now(timestamp) % time_step)
