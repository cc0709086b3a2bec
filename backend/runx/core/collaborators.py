"""Boundary Protocols: contracts between services and external collaborators.

Invariants:
    - Services depend on these Protocols, never on pyotp/qrcode/stripe directly
    - Implementations live in infrastructure/ and are injected via Depends

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - TOTP and QR contracts are sync (constant-time arithmetic, no IO);
      the payment gateway is async because it does network IO
"""

from datetime import datetime
from typing import Protocol


class TotpEngine(Protocol):
    """RFC 6238 time-based one-time password engine."""

    def generate_secret(self) -> str:
        """Return a fresh base32 secret (160 bits of entropy)."""
        ...

    def provisioning_uri(self, secret: str, label: str, issuer: str) -> str:
        """Return an otpauth:// URI binding secret, label and issuer."""
        ...

    def verify(
        self,
        secret: str,
        code: str,
        window_steps: int,
        for_time: datetime | int | None = None,
    ) -> bool:
        """True if code matches any time step within +/- window_steps."""
        ...


class ProvisioningEncoder(Protocol):
    """Renders a provisioning URI as an embeddable image payload."""

    def render(self, uri: str) -> str:
        ...


class PaymentGateway(Protocol):
    """Creates payment intents on an external processor."""

    async def create_intent(
        self, amount: int, currency: str, metadata: dict[str, str],
    ) -> str:
        """Return the intent's opaque client secret."""
        ...
