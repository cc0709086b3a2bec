"""Cart Schemas: cart line bodies and the product-joined listing row."""

from pydantic import BaseModel, Field


class CartAdd(BaseModel):
    productoId: int
    cantidad: int | None = Field(None, ge=1)


class CartUpdate(BaseModel):
    # Lower bound checked in the route to answer with the storefront message
    cantidad: int


class CartLineResponse(BaseModel):
    """Cart line joined with its product."""
    id: int
    producto_id: int
    nombre: str
    precio: float
    imagen: str
    cantidad: int
    tallas: str
