"""ORM Models: SQLAlchemy declarative models for all store entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table and column names follow the storefront's relational schema
      (clientes, productos, carrito, orders, order_items)

Design Decisions:
    - One file per entity; Order and OrderItem share a file as one aggregate
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from runx.models.account import Account  # noqa: F401
from runx.models.product import Product  # noqa: F401
from runx.models.cart_line import CartLine  # noqa: F401
from runx.models.order import Order, OrderItem  # noqa: F401
