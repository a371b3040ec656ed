"""
Settings for the OTP HTTP service.

Values come from the process environment, optionally seeded from a
``.env`` file.  The engine never reads these itself; the routes build a
fresh engine from them for every request.

Variables
---------
OTP_SECRET_KEY  Base32 shared secret (required)
OTP_DIGITS      code length, 4..9 (default 6)
OTP_TIME_STEP   seconds per step, 0 for HOTP or 15..300 (default 30)
OTP_ALGORITHM   SHA1 / SHA256 / SHA512 (default SHA1)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.errors import OTPError
from core.otp import DEFAULT_DIGITS, DEFAULT_TIME_STEP, OneTimePassword
from core.totp import Algorithm, parse_algorithm


@dataclass(frozen=True)
class Settings:
    """OTP service configuration."""

    secret_key: str
    digits: int = DEFAULT_DIGITS
    time_step: int = DEFAULT_TIME_STEP
    algorithm: Algorithm = Algorithm.SHA1

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from *environ* (``os.environ`` after loading ``.env``
        when None).

        Raises:
            ValueError: If a variable is missing or invalid.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        secret_key = environ.get("OTP_SECRET_KEY", "").strip()
        if not secret_key:
            raise ValueError("OTP_SECRET_KEY is not set.")

        try:
            digits = int(environ.get("OTP_DIGITS", DEFAULT_DIGITS))
            time_step = int(environ.get("OTP_TIME_STEP", DEFAULT_TIME_STEP))
            algorithm = parse_algorithm(environ.get("OTP_ALGORITHM", Algorithm.SHA1.value))
        except ValueError as exc:
            raise ValueError(f"Invalid OTP setting: {exc}") from exc

        settings = cls(
            secret_key=secret_key,
            digits=digits,
            time_step=time_step,
            algorithm=algorithm,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Fail fast on a secret or option the engine would reject."""
        try:
            self.build_engine()
        except OTPError as exc:
            raise ValueError(f"Invalid OTP setting: {exc}") from exc

    def build_engine(self) -> OneTimePassword:
        """Return a new engine configured from these settings."""
        otp = OneTimePassword(self.secret_key)
        otp.digits = self.digits
        otp.time_step = self.time_step
        otp.algorithm = self.algorithm
        return otp
