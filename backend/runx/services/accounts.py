"""Account Service: registration and credential checks.

Invariants:
    - Passwords are stored as bcrypt hashes with an explicit cost factor
    - Duplicate email -> ConflictError, never a generic store error
    - Unknown email and wrong password are indistinguishable (InvalidCredentialsError)

Design Decisions:
    - bcrypt runs in a worker thread: hashing is the only CPU-bound step in a request
"""

import asyncio
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from runx.core.errors import ConflictError, InvalidCredentialsError
from runx.models.account import Account
from runx.schemas.account import BCRYPT_MAX_BYTES

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    candidate = password.encode("utf-8")
    if len(candidate) > BCRYPT_MAX_BYTES:
        # No stored hash can come from a longer input
        return False
    return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))


class AccountService:
    """Registration and login against the clientes table."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 10):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, name: str, email: str, password: str) -> Account:
        password_hash = await asyncio.to_thread(
            hash_password, password, self.bcrypt_rounds,
        )
        account = Account(name=name, email=email, password_hash=password_hash)
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Registration rejected, email already in use: {email}")
            raise ConflictError("Email ya registrado")
        await self.db.refresh(account)
        logger.info("Account registered", extra={"account_id": account.id})
        return account

    async def authenticate(self, email: str, password: str) -> Account:
        result = await self.db.execute(
            select(Account).where(Account.email == email),
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise InvalidCredentialsError()
        if not await asyncio.to_thread(
            check_password, password, account.password_hash,
        ):
            raise InvalidCredentialsError()
        return account
