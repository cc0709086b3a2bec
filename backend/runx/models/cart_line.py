"""Cart Line ORM: (account, product, quantity) tuple (table `carrito`).

Invariants:
    - quantity > 0 (enforced at the API boundary)
    - Deleted once folded into a placed order, or directly by the shopper
"""

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from runx.db.base import Base


class CartLine(Base):
    __tablename__ = "carrito"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(
        "cliente_id", Integer, ForeignKey("clientes.id"),
        nullable=False, index=True,
    )
    product_id: Mapped[int] = mapped_column(
        "producto_id", Integer, ForeignKey("productos.id"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(
        "cantidad", Integer, nullable=False, default=1,
    )

    account: Mapped["Account"] = relationship(
        "Account", back_populates="cart_lines",
    )
    product: Mapped["Product"] = relationship("Product", lazy="joined")
