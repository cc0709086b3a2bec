"""Payment Routes: Stripe PaymentIntent creation.

Invariants:
    - monto is rounded half up to an integer amount before reaching the gateway
    - Gateway failures surface as 500 with the gateway's message (PaymentGatewayError)
"""

import math

from fastapi import APIRouter, Depends

from runx.api.dependencies import get_payment_gateway
from runx.core.collaborators import PaymentGateway
from runx.schemas.payment import PaymentIntentCreate, PaymentIntentCreated

router = APIRouter(prefix="/api", tags=["pagos"])


def round_half_up(value: float) -> int:
    """2.5 -> 3, unlike round(), which rounds halves to even."""
    return math.floor(value + 0.5)


@router.post("/crear-intento-pago", response_model=PaymentIntentCreated)
async def create_payment_intent(
    body: PaymentIntentCreate,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    client_secret = await gateway.create_intent(
        amount=round_half_up(body.monto),
        currency=body.moneda.lower(),
        metadata={"clienteId": str(body.clienteId or "")},
    )
    return PaymentIntentCreated(clientSecret=client_secret)
