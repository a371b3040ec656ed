"""
Exception types raised by the OTP engine.

A wrong code is not an error: validation returns ``False``.  These
exceptions signal misuse at the point of the offending call.
"""


class OTPError(Exception):
    """Base class for all engine errors."""


class NullInputError(OTPError, TypeError):
    """A required secret or code argument was ``None``."""


class OutOfRangeError(OTPError, ValueError):
    """A value lies outside its accepted range or capacity."""


class InvalidFormatError(OTPError, ValueError):
    """Malformed Base32 text or a code containing non-digit characters."""


class UnsupportedOperationError(OTPError, RuntimeError):
    """The operation is not available in the current mode."""
