"""TOTP Engine: RFC 6238 secrets, provisioning URIs and windowed verification via pyotp.

Invariants:
    - Secrets are 32 base32 characters (160 bits) from a CSPRNG
    - Verification window is counted in time steps, not seconds
    - Codes are 6 digits over 30-second steps (authenticator app defaults)
"""

from datetime import datetime

import pyotp

SECRET_LENGTH = 32  # base32 chars, 5 bits each


class PyOtpEngine:
    """TotpEngine implementation backed by pyotp."""

    def __init__(self, digits: int = 6, interval: int = 30):
        self.digits = digits
        self.interval = interval

    def _totp(self, secret: str) -> pyotp.TOTP:
        return pyotp.TOTP(secret, digits=self.digits, interval=self.interval)

    def generate_secret(self) -> str:
        return pyotp.random_base32(length=SECRET_LENGTH)

    def provisioning_uri(self, secret: str, label: str, issuer: str) -> str:
        return self._totp(secret).provisioning_uri(
            name=label, issuer_name=issuer,
        )

    def verify(
        self,
        secret: str,
        code: str,
        window_steps: int,
        for_time: datetime | int | None = None,
    ) -> bool:
        code = code.strip()
        if not code.isdigit() or len(code) != self.digits:
            return False
        return self._totp(secret).verify(
            code, for_time=for_time, valid_window=window_steps,
        )

    def code_at(self, secret: str, for_time: datetime | int) -> str:
        """Code for the step containing for_time."""
        return self._totp(secret).at(for_time)
