"""Second-Factor Lifecycle Manager: TOTP enrollment and verification per account.

Invariants:
    - DISABLED (no secret) -> ENROLLED (secret stored); no transition back
    - begin_enrollment never replaces an existing secret; repeated calls re-render it
    - First-time secret write is conditional (WHERE twofa_secret IS NULL); the
      loser of a concurrent enrollment adopts the stored winner
    - verify_code accepts the current time step and +/- valid_window steps
    - No replay protection: an accepted code stays valid within its window

Design Decisions:
    - TOTP engine and QR encoder injected as Protocols (core/collaborators.py)
    - Enrollment serialized per account in-process (enrollment_locks) on top of
      the conditional write
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from runx.core.collaborators import ProvisioningEncoder, TotpEngine
from runx.core.domain_types import AccountId, TwoFactorState
from runx.core.errors import (
    ErrorContext, NotEnrolledError, ResourceNotFoundError,
    VerificationFailedError,
)
from runx.infrastructure.keyed_locks import KeyedLocks, enrollment_locks
from runx.models.account import Account

logger = logging.getLogger(__name__)

ACCOUNT_NOT_FOUND_MESSAGE = "Cliente no encontrado"


@dataclass(frozen=True)
class ProvisioningArtifact:
    """Enrollment payload: the base32 secret and its scannable rendering."""
    secret: str
    qr: str
    uri: str


class SecondFactorManager:
    """Owns the enroll -> verify lifecycle of an account's TOTP secret."""

    def __init__(
        self,
        db: AsyncSession,
        totp: TotpEngine,
        encoder: ProvisioningEncoder,
        issuer: str = "RunX",
        valid_window: int = 1,
        locks: KeyedLocks = enrollment_locks,
    ):
        self.db = db
        self.totp = totp
        self.encoder = encoder
        self.issuer = issuer
        self.valid_window = valid_window
        self.locks = locks

    async def get_state(self, account_id: AccountId) -> TwoFactorState:
        account = await self._get_account(account_id)
        if account is None:
            raise ResourceNotFoundError(
                ACCOUNT_NOT_FOUND_MESSAGE, ErrorContext(account_id=account_id),
            )
        if account.twofa_secret:
            return TwoFactorState.ENROLLED
        return TwoFactorState.DISABLED

    async def get_status(self, account_id: AccountId) -> bool:
        """True when the account has a stored secret."""
        return await self.get_state(account_id) is TwoFactorState.ENROLLED

    async def begin_enrollment(self, account_id: AccountId) -> ProvisioningArtifact:
        """Return the provisioning artifact, generating and storing a secret on first call."""
        async with self.locks.hold(account_id):
            account = await self._get_account(account_id)
            if account is None:
                raise ResourceNotFoundError(
                    ACCOUNT_NOT_FOUND_MESSAGE, ErrorContext(account_id=account_id),
                )
            secret = account.twofa_secret
            if not secret:
                secret = await self._store_new_secret(account_id)

        uri = self.totp.provisioning_uri(
            secret, label=f"{self.issuer} ({account.email})", issuer=self.issuer,
        )
        # PNG encoding is CPU-bound
        qr = await asyncio.to_thread(self.encoder.render, uri)
        return ProvisioningArtifact(secret=secret, qr=qr, uri=uri)

    async def verify_code(
        self,
        account_id: AccountId,
        code: str,
        for_time: datetime | int | None = None,
    ) -> None:
        """Raise NotEnrolledError or VerificationFailedError unless code is accepted."""
        account = await self._get_account(account_id)
        if account is None or not account.twofa_secret:
            raise NotEnrolledError(ErrorContext(account_id=account_id))

        if not self.totp.verify(
            account.twofa_secret, code, self.valid_window, for_time=for_time,
        ):
            logger.warning(
                "TOTP verification failed", extra={"account_id": account_id},
            )
            raise VerificationFailedError(ErrorContext(account_id=account_id))
        logger.info("TOTP code verified", extra={"account_id": account_id})

    # --- Store access -----------------------------------------------

    async def _get_account(self, account_id: AccountId) -> Account | None:
        result = await self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def _store_new_secret(self, account_id: AccountId) -> str:
        candidate = self.totp.generate_secret()
        result = await self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .where(Account.twofa_secret.is_(None))
            .values(twofa_secret=candidate)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        if result.rowcount == 1:
            logger.info("2FA secret issued", extra={"account_id": account_id})
            return candidate

        # Another writer enrolled first: adopt the stored secret
        stored = await self.db.scalar(
            select(Account.twofa_secret)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True),
        )
        logger.warning(
            "Concurrent 2FA enrollment detected, reusing stored secret",
            extra={"account_id": account_id},
        )
        return stored
