"""Order Schemas: placement body and response.

Invariants:
    - clienteId, total and productos are optional at the schema level so the
      placement coordinator owns the "Datos incompletos" precondition
    - Each submitted line is fully typed (producto_id, cantidad > 0, precio >= 0)
"""

from pydantic import BaseModel, Field, field_validator

from runx.core.domain_types import AccountId, ProductId
from runx.core.order_rules import LineItem


class OrderLineIn(BaseModel):
    producto_id: int
    cantidad: int = Field(gt=0)
    precio: float = Field(ge=0)

    def to_line_item(self) -> LineItem:
        return LineItem(
            product_id=ProductId(self.producto_id),
            quantity=self.cantidad,
            unit_price=self.precio,
        )


class OrderCreate(BaseModel):
    clienteId: int | None = None
    total: float | None = None
    productos: list[OrderLineIn] | None = None

    @field_validator("productos", mode="before")
    @classmethod
    def non_list_as_missing(cls, v):
        # Anything but an array counts as no lines ("Datos incompletos")
        return v if isinstance(v, list) else None

    def account_id(self) -> AccountId | None:
        return AccountId(self.clienteId) if self.clienteId else None

    def line_items(self) -> list[LineItem] | None:
        if self.productos is None:
            return None
        return [line.to_line_item() for line in self.productos]


class OrderCreated(BaseModel):
    message: str
    ordenId: int
