"""Cart Routes: per-account cart line CRUD.

Invariants:
    - Update and delete are scoped by (line id, cliente_id); a line of another
      account is never touched
    - cantidad must be >= 1 on update ("Cantidad >0")
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from runx.core.errors import ValidationError
from runx.infrastructure.database import get_db
from runx.models.cart_line import CartLine
from runx.models.product import Product
from runx.schemas.cart import CartAdd, CartLineResponse, CartUpdate

router = APIRouter(prefix="/api/carrito", tags=["carrito"])


@router.get("/{account_id}", response_model=list[CartLineResponse])
async def list_cart(account_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(CartLine, Product)
        .join(Product, CartLine.product_id == Product.id)
        .where(CartLine.account_id == account_id)
        .order_by(CartLine.id),
    )
    return [
        CartLineResponse(
            id=line.id,
            producto_id=product.id,
            nombre=product.name,
            precio=product.price,
            imagen=product.image,
            cantidad=line.quantity,
            tallas=product.sizes,
        )
        for line, product in result.all()
    ]


@router.post("/{account_id}", status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    account_id: int, body: CartAdd, db: AsyncSession = Depends(get_db),
):
    line = CartLine(
        account_id=account_id,
        product_id=body.productoId,
        quantity=body.cantidad or 1,
    )
    db.add(line)
    await db.commit()
    await db.refresh(line)
    return {"message": "Agregado", "id": line.id}


@router.put("/{account_id}/{line_id}")
async def update_cart_line(
    account_id: int,
    line_id: int,
    body: CartUpdate,
    db: AsyncSession = Depends(get_db),
):
    if body.cantidad < 1:
        raise ValidationError("Cantidad >0")
    await db.execute(
        update(CartLine)
        .where(CartLine.id == line_id, CartLine.account_id == account_id)
        .values({CartLine.quantity: body.cantidad}),
    )
    await db.commit()
    return {"message": "Cantidad actualizada"}


@router.delete("/{account_id}/{line_id}")
async def remove_cart_line(
    account_id: int, line_id: int, db: AsyncSession = Depends(get_db),
):
    await db.execute(
        delete(CartLine)
        .where(CartLine.id == line_id, CartLine.account_id == account_id),
    )
    await db.commit()
    return {"message": "Producto eliminado"}
