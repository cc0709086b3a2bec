"""Product Routes: catalog CRUD.

Invariants:
    - Missing product -> 404 "Producto no encontrado" on read, update and delete
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from runx.core.errors import ResourceNotFoundError
from runx.infrastructure.database import get_db
from runx.models.product import Product
from runx.schemas.product import ProductResponse, ProductWrite

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/productos", tags=["productos"])


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        nombre=product.name,
        precio=product.price,
        descripcion=product.description,
        tallas=product.sizes,
        imagen=product.image,
    )


async def get_product_or_404(product_id: int, db: AsyncSession) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise ResourceNotFoundError("Producto no encontrado")
    return product


@router.get("", response_model=list[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Product).order_by(Product.id))
    return [_to_response(p) for p in result.scalars().all()]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return _to_response(await get_product_or_404(product_id, db))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductWrite, db: AsyncSession = Depends(get_db)):
    product = Product(
        name=body.nombre,
        price=body.precio,
        description=body.descripcion,
        sizes=body.tallas,
        image=body.imagen,
    )
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product {product.id} created")
    return {"message": "Producto agregado", "id": product.id}


@router.put("/{product_id}")
async def update_product(
    product_id: int, body: ProductWrite, db: AsyncSession = Depends(get_db),
):
    product = await get_product_or_404(product_id, db)
    product.name = body.nombre
    product.price = body.precio
    product.description = body.descripcion
    product.sizes = body.tallas
    product.image = body.imagen
    await db.commit()
    return {"message": "Producto actualizado"}


@router.delete("/{product_id}")
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await get_product_or_404(product_id, db)
    await db.delete(product)
    await db.commit()
    logger.info(f"Product {product_id} deleted")
    return {"message": "Producto eliminado"}
