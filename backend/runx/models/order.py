"""Order ORM: order header and its line items (tables `orders`, `order_items`).

Invariants:
    - Created exactly once per successful placement, never mutated or deleted
    - OrderItem.unit_price is a snapshot taken at purchase time, decoupled
      from Product.price
    - Items are immutable once written

Design Decisions:
    - No ORM cascade from Order to OrderItem: items are bulk-inserted by the
      placement coordinator as their own stage
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from runx.db.base import Base


class Order(Base):
    """Order header."""
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(
        "cliente_id", Integer, ForeignKey("clientes.id"),
        nullable=False, index=True,
    )
    total: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    account: Mapped["Account"] = relationship(
        "Account", back_populates="orders",
    )
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", lazy="selectin",
    )


class OrderItem(Base):
    """One purchased line with its price snapshot."""
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id"), nullable=False, index=True,
    )
    product_id: Mapped[int] = mapped_column(
        "producto_id", Integer, ForeignKey("productos.id"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column("cantidad", Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column("precio", Float, nullable=False)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
