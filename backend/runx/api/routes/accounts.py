"""Account Routes: registration and login.

Invariants:
    - Password hashes never leave the server
    - Login reports twofa_enabled so the client knows whether to prompt for a code
"""

import logging

from fastapi import APIRouter, Depends, status

from runx.api.dependencies import get_account_service
from runx.schemas.account import (
    AccountPublic, LoginRequest, LoginResponse, RegisterRequest,
)
from runx.services.accounts import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/clientes", tags=["clientes"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    account = await accounts.register(body.nombre, body.email, body.password)
    return {"message": "Cliente registrado", "id": account.id}


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    account = await accounts.authenticate(body.email, body.password)
    return LoginResponse(
        message="Login exitoso",
        cliente=AccountPublic(
            id=account.id,
            nombre=account.name,
            email=account.email,
            twofa_enabled=account.twofa_enabled,
        ),
    )
