"""Service Dependencies: FastAPI providers that wire services to the store and settings.

Invariants:
    - Every service receives its AsyncSession from get_db (one session per request)
    - Collaborators (TOTP engine, QR encoder, payment gateway) come from providers
      that tests replace through app.dependency_overrides
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from runx.config import Settings, get_settings
from runx.core.collaborators import PaymentGateway, ProvisioningEncoder, TotpEngine
from runx.infrastructure.database import get_db
from runx.infrastructure.qr_encoder import QrDataUrlEncoder
from runx.infrastructure.stripe_gateway import StripePaymentGateway
from runx.infrastructure.totp_engine import PyOtpEngine
from runx.services.accounts import AccountService
from runx.services.order_placement import OrderPlacementCoordinator
from runx.services.two_factor import SecondFactorManager


def get_totp_engine() -> TotpEngine:
    return PyOtpEngine()


def get_provisioning_encoder() -> ProvisioningEncoder:
    return QrDataUrlEncoder()


def get_payment_gateway(
    settings: Settings = Depends(get_settings),
) -> PaymentGateway:
    return StripePaymentGateway(
        settings.stripe_secret_key, settings.stripe_timeout_seconds,
    )


def get_account_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(db, bcrypt_rounds=settings.bcrypt_rounds)


def get_order_coordinator(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> OrderPlacementCoordinator:
    return OrderPlacementCoordinator(
        db,
        mode=settings.order_placement_mode,
        stage_timeout_seconds=settings.database_timeout_seconds,
    )


def get_second_factor_manager(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    totp: TotpEngine = Depends(get_totp_engine),
    encoder: ProvisioningEncoder = Depends(get_provisioning_encoder),
) -> SecondFactorManager:
    return SecondFactorManager(
        db, totp, encoder,
        issuer=settings.twofa_issuer,
        valid_window=settings.totp_valid_window,
    )
