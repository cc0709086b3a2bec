"""Account ORM: a storefront customer (table `clientes`).

Invariants:
    - email is unique
    - password holds a bcrypt hash, never the clear credential
    - twofa_secret is None until enrollment, then set once and never cleared
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from runx.db.base import Base


class Account(Base):
    """Customer account with optional TOTP second factor."""
    __tablename__ = "clientes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column("nombre", String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        "password", String(255), nullable=False,
    )
    twofa_secret: Mapped[str | None] = mapped_column(
        String(64), nullable=True,
    )

    cart_lines: Mapped[list["CartLine"]] = relationship(
        "CartLine", back_populates="account",
    )
    orders: Mapped[list["Order"]] = relationship(
        "Order", back_populates="account",
    )

    @property
    def twofa_enabled(self) -> bool:
        return bool(self.twofa_secret)
