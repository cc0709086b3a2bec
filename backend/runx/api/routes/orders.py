"""Order Routes: order placement.

Invariants:
    - Route never writes to the store itself; the coordinator owns every stage
    - 201 on success, 400 on incomplete data, 500 with a stage message on stage failure
"""

from fastapi import APIRouter, Depends, status

from runx.api.dependencies import get_order_coordinator
from runx.schemas.order import OrderCreate, OrderCreated
from runx.services.order_placement import OrderPlacementCoordinator

router = APIRouter(prefix="/api/ordenes", tags=["ordenes"])


@router.post(
    "", response_model=OrderCreated, status_code=status.HTTP_201_CREATED,
)
async def place_order(
    body: OrderCreate,
    coordinator: OrderPlacementCoordinator = Depends(get_order_coordinator),
):
    order_id = await coordinator.place_order(
        body.account_id(), body.total, body.line_items(),
    )
    return OrderCreated(message="Orden creada", ordenId=order_id)
