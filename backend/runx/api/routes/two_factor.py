"""Two-Factor Routes: status, setup (enrollment) and code verification."""

from fastapi import APIRouter, Depends

from runx.api.dependencies import get_second_factor_manager
from runx.core.domain_types import AccountId
from runx.schemas.two_factor import (
    TwoFactorAccount, TwoFactorSetup, TwoFactorStatus, TwoFactorVerify,
)
from runx.services.two_factor import SecondFactorManager

router = APIRouter(prefix="/api/2fa", tags=["2fa"])


@router.post("/status", response_model=TwoFactorStatus)
async def twofa_status(
    body: TwoFactorAccount,
    manager: SecondFactorManager = Depends(get_second_factor_manager),
):
    enabled = await manager.get_status(AccountId(body.clienteId))
    return TwoFactorStatus(twofa_enabled=enabled)


@router.post("/setup", response_model=TwoFactorSetup)
async def twofa_setup(
    body: TwoFactorAccount,
    manager: SecondFactorManager = Depends(get_second_factor_manager),
):
    artifact = await manager.begin_enrollment(AccountId(body.clienteId))
    return TwoFactorSetup(qr=artifact.qr, secret=artifact.secret)


@router.post("/verificar")
async def twofa_verify(
    body: TwoFactorVerify,
    manager: SecondFactorManager = Depends(get_second_factor_manager),
):
    await manager.verify_code(AccountId(body.clienteId), body.code)
    return {"message": "Código 2FA verificado"}
