"""Product Schemas: catalog CRUD bodies and responses."""

from pydantic import BaseModel, Field


class ProductWrite(BaseModel):
    """Create/update body. Every field is required, as in creation."""
    nombre: str = Field(min_length=1, max_length=150)
    precio: float = Field(ge=0)
    descripcion: str = Field(min_length=1)
    tallas: str = Field(min_length=1, max_length=100)
    imagen: str = Field(min_length=1, max_length=500)


class ProductResponse(BaseModel):
    id: int
    nombre: str
    precio: float
    descripcion: str
    tallas: str
    imagen: str
