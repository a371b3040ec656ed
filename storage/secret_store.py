"""
In-memory store for a single shared OTP secret.

The secret lives in a fixed 1024-byte buffer that is kept encrypted with
the process key (see :mod:`core.crypto`) whenever it is not in use.  The
only way to read it is the :meth:`SecretStore.unprotected` scope, which
hands out a throw-away copy and guarantees that the buffer is protected
again and the copy zeroed on every exit path.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar, Union

from core import base32, crypto
from core.base32 import SecretFormat
from core.errors import InvalidFormatError, NullInputError, OutOfRangeError

logger = logging.getLogger(__name__)

SECRET_CAPACITY = 1024  # 8192 bits

T = TypeVar("T")


class SecretStore:
    """Fixed-capacity, protected-at-rest secret buffer."""

    def __init__(self, secret: Union[bytes, bytearray, str]) -> None:
        """
        Args:
            secret: Raw secret bytes or Base32 text.

        Raises:
            NullInputError:     If ``secret`` is None.
            OutOfRangeError:    If the secret exceeds 1024 bytes.
            InvalidFormatError: If Base32 text is malformed.
        """
        self._buffer = bytearray(SECRET_CAPACITY)

        if secret is None:
            raise NullInputError("Secret cannot be None.")
        elif isinstance(secret, str):
            try:
                self._length = base32.decode_into(secret, self._buffer)
            except OutOfRangeError:
                crypto.wipe(self._buffer)
                raise OutOfRangeError(
                    "Secret cannot be longer than 8192 bits (1024 bytes)."
                ) from None
            except InvalidFormatError as exc:
                crypto.wipe(self._buffer)
                raise InvalidFormatError(f"Secret is not valid Base32: {exc}") from None
        else:
            if len(secret) > SECRET_CAPACITY:
                raise OutOfRangeError(
                    "Secret cannot be longer than 8192 bits (1024 bytes)."
                )
            self._buffer[: len(secret)] = secret
            self._length = len(secret)

        self._seal = crypto.protect(self._buffer)
        logger.debug("Secret of %d bytes stored", self._length)

    @classmethod
    def random(cls, size: int = crypto.DEFAULT_SECRET_SIZE) -> "SecretStore":
        """Create a store holding a fresh random secret (160-bit by default)."""
        secret = crypto.random_secret(size)
        try:
            return cls(secret)
        finally:
            crypto.wipe(secret)

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def length(self) -> int:
        """Number of meaningful bytes in the buffer."""
        return self._length

    @contextmanager
    def unprotected(self) -> Iterator[bytearray]:
        """
        Yield a copy of exactly :attr:`length` secret bytes.

        The buffer is re-protected and the copy wiped when the block exits,
        whether normally or through an exception.
        """
        crypto.unprotect(self._buffer, self._seal)
        try:
            copy = self._buffer[: self._length]
        finally:
            self._seal = crypto.protect(self._buffer)
        try:
            yield copy
        finally:
            crypto.wipe(copy)

    def with_unprotected_secret(self, fn: Callable[[bytearray], T]) -> T:
        """Call ``fn(secret)`` inside an :meth:`unprotected` scope."""
        with self.unprotected() as secret:
            return fn(secret)

    def export_base32(self, fmt: SecretFormat = SecretFormat.SPACING) -> str:
        """Return the secret re-encoded as Base32 text."""
        return self.with_unprotected_secret(
            lambda secret: base32.encode(secret, fmt=fmt)
        )

    def __repr__(self) -> str:
        return f"<SecretStore length={self._length}>"
