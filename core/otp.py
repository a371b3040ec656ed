"""
One-time password engine combining HOTP (RFC 4226) and TOTP (RFC 6238).

A :class:`OneTimePassword` owns one shared secret and the moving factor
state.  With ``time_step == 0`` it works in HOTP mode and keeps an
explicit counter that advances by one on every generated code and every
accepted code.  Otherwise it works in TOTP mode and derives the counter
from the clock on each read.

Instances are not thread-safe; use one per verification flow.
"""

import logging
from typing import Optional, Union

from core import crypto
from core.base32 import SecretFormat
from core.errors import (
    InvalidFormatError,
    NullInputError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from core.hotp import hotp_value
from core.totp import Algorithm, Timestamp, parse_algorithm, remaining_seconds, time_counter
from storage.secret_store import SecretStore

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────────────────

MIN_DIGITS = 4
MAX_DIGITS = 9
DEFAULT_DIGITS = 6

MIN_TIME_STEP = 15
MAX_TIME_STEP = 300
DEFAULT_TIME_STEP = 30

MAX_COUNTER = 2**63 - 1

# A candidate that already holds this many digits cannot take another one.
_MAX_CODE_PREFIX = 10 ** (MAX_DIGITS - 1)


def _check_digits(digits: int) -> None:
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise OutOfRangeError(
            f"Number of digits to return must be between {MIN_DIGITS} and {MAX_DIGITS}."
        )


class OneTimePassword:
    """HOTP/TOTP generator and validator for a single shared secret."""

    def __init__(self, secret: Union[bytes, bytearray, str, SecretStore]) -> None:
        """
        Args:
            secret: Raw secret bytes, Base32 text, or a ready
                    :class:`~storage.secret_store.SecretStore`.

        Raises:
            NullInputError:     If ``secret`` is None.
            OutOfRangeError:    If the secret exceeds 1024 bytes.
            InvalidFormatError: If Base32 text is malformed.
        """
        if isinstance(secret, SecretStore):
            self._store = secret
        else:
            self._store = SecretStore(secret)
        self._digits = DEFAULT_DIGITS
        self._time_step = DEFAULT_TIME_STEP
        self._counter = 0
        self._algorithm = Algorithm.SHA1
        self._test_time: Optional[Timestamp] = None

        self._cached_digits = 0
        self._cached_counter = -1
        self._cached_algorithm: Optional[Algorithm] = None
        self._cached_code = 0

    @classmethod
    def random(cls) -> "OneTimePassword":
        """Create an engine with a fresh random 160-bit secret."""
        return cls(SecretStore.random())

    # ── Secret ───────────────────────────────────────────────────────────

    def get_secret(self) -> bytes:
        """Return a copy of the raw secret bytes."""
        return self._store.with_unprotected_secret(bytes)

    def export_secret(self, fmt: SecretFormat = SecretFormat.SPACING) -> str:
        """Return the secret as Base32 text formatted according to *fmt*."""
        return self._store.export_base32(fmt)

    # ── Setup ────────────────────────────────────────────────────────────

    @property
    def digits(self) -> int:
        """Number of digits in generated codes (4..9)."""
        return self._digits

    @digits.setter
    def digits(self, value: int) -> None:
        _check_digits(value)
        self._digits = value

    @property
    def time_step(self) -> int:
        """TOTP step in seconds, or 0 for HOTP mode."""
        return self._time_step

    @time_step.setter
    def time_step(self, value: int) -> None:
        if value == 0:
            self._time_step = 0
            self._counter = 0
            logger.debug("Switched to HOTP mode")
        else:
            if not MIN_TIME_STEP <= value <= MAX_TIME_STEP:
                raise OutOfRangeError(
                    f"Time step must be between {MIN_TIME_STEP} and {MAX_TIME_STEP} seconds."
                )
            self._time_step = value

    @property
    def is_hotp(self) -> bool:
        return self._time_step == 0

    @property
    def counter(self) -> int:
        """
        Current moving factor.

        Stored in HOTP mode; computed from the clock (or :attr:`test_time`)
        in TOTP mode.
        """
        if self.is_hotp:
            return self._counter
        return time_counter(self._time_step, self._test_time)

    @counter.setter
    def counter(self, value: int) -> None:
        if not self.is_hotp:
            raise UnsupportedOperationError(
                "Counter value can only be set in HOTP mode (time step is zero)."
            )
        if not 0 <= value <= MAX_COUNTER:
            raise OutOfRangeError("Counter value must be a non-negative 64-bit number.")
        self._counter = value

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @algorithm.setter
    def algorithm(self, value: Union[Algorithm, str]) -> None:
        self._algorithm = parse_algorithm(value)

    @property
    def test_time(self) -> Optional[Timestamp]:
        """Clock override for TOTP mode; None uses the system clock."""
        return self._test_time

    @test_time.setter
    def test_time(self, value: Optional[Timestamp]) -> None:
        self._test_time = value

    @property
    def remaining_seconds(self) -> Optional[int]:
        """Seconds left in the current TOTP window (None in HOTP mode)."""
        if self.is_hotp:
            return None
        return remaining_seconds(self._time_step, self._test_time)

    # ── Code ─────────────────────────────────────────────────────────────

    def get_code(self, digits: Optional[int] = None) -> int:
        """
        Return the code for the current counter.

        In HOTP mode every newly computed code consumes one counter value.
        Repeating the call with the same counter and digits returns the
        cached code without recomputing it.

        Args:
            digits: Override for :attr:`digits`.

        Raises:
            OutOfRangeError: If ``digits`` is outside 4..9.
        """
        if digits is None:
            digits = self._digits
        _check_digits(digits)

        counter = self.counter
        if (
            self._cached_counter == counter
            and self._cached_digits == digits
            and self._cached_algorithm == self._algorithm
        ):
            return self._cached_code

        code = self._compute(counter, digits)
        if self.is_hotp:
            self._counter = counter + 1
            logger.debug("HOTP counter advanced to %d after generation", self._counter)

        self._cached_digits = digits
        self._cached_counter = counter
        self._cached_algorithm = self._algorithm
        self._cached_code = code
        return code

    def generate_code(self, digits: Optional[int] = None) -> str:
        """Return :meth:`get_code` zero-padded to the digit width."""
        if digits is None:
            digits = self._digits
        return str(self.get_code(digits)).zfill(digits)

    def _compute(self, counter: int, digits: int) -> int:
        return self._store.with_unprotected_secret(
            lambda secret: hotp_value(secret, counter, digits, self._algorithm)
        )

    # ── Validate ─────────────────────────────────────────────────────────

    def is_code_valid(self, code: Union[int, str]) -> bool:
        """
        Check *code* against the current and the previous counter value.

        Strings may contain whitespace between digits.  A string with more
        digits than any code can have is reported invalid rather than
        raising.  In HOTP mode an accepted code advances the counter so
        the same code cannot be used twice.

        Raises:
            NullInputError:     If ``code`` is None.
            InvalidFormatError: If a string contains anything other than
                                digits and whitespace.
        """
        if code is None:
            raise NullInputError("Code cannot be None.")
        if isinstance(code, str):
            number = self._parse_code(code)
            if number is None:
                return False
            code = number
        return self._validate(code)

    verify_code = is_code_valid

    @staticmethod
    def _parse_code(text: str) -> Optional[int]:
        number = 0
        for ch in text:
            if ch.isspace():
                continue
            if ch not in "0123456789":
                raise InvalidFormatError("Code must contain only numbers and whitespace.")
            if number >= _MAX_CODE_PREFIX:
                return None
            number = number * 10 + (ord(ch) - ord("0"))
        return number

    def _validate(self, code: int) -> bool:
        counter = self.counter
        # Both codes are always computed so timing does not reveal which matched.
        curr_code = self._compute(counter, self._digits)
        prev_code = self._compute(counter - 1, self._digits)

        candidate = f"{code:010d}"
        is_curr_valid = crypto.constant_time_compare(candidate, f"{curr_code:010d}")
        is_prev_valid = (
            crypto.constant_time_compare(candidate, f"{prev_code:010d}") and counter > 0
        )
        is_valid = is_curr_valid or is_prev_valid

        if is_valid and self.is_hotp:
            self._counter = counter + 1
            logger.debug("HOTP counter advanced to %d after validation", self._counter)
        return is_valid

    def __repr__(self) -> str:
        mode = "HOTP" if self.is_hotp else f"TOTP/{self._time_step}s"
        return f"<OneTimePassword {mode} digits={self._digits} algorithm={self._algorithm.value}>"
