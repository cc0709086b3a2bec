"""Product ORM: catalog entry (table `productos`)."""

from sqlalchemy import Integer, String, Text, Float
from sqlalchemy.orm import Mapped, mapped_column

from runx.db.base import Base


class Product(Base):
    __tablename__ = "productos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column("nombre", String(150), nullable=False)
    price: Mapped[float] = mapped_column("precio", Float, nullable=False)
    description: Mapped[str] = mapped_column(
        "descripcion", Text, nullable=False,
    )
    sizes: Mapped[str] = mapped_column("tallas", String(100), nullable=False)
    image: Mapped[str] = mapped_column("imagen", String(500), nullable=False)
