"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, ProductId, OrderId wrap integer primary keys
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and env vars without custom encoders
"""

from enum import Enum
from typing import NewType


# --- Identity Types -------------------------------------------------

AccountId = NewType("AccountId", int)
ProductId = NewType("ProductId", int)
OrderId = NewType("OrderId", int)


# --- Enums ----------------------------------------------------------

class PlacementMode(str, Enum):
    """How the three order-placement stages share a transaction."""
    ATOMIC = "atomic"
    LEGACY = "legacy"


class OrderStage(str, Enum):
    """Named write stages of order placement, in execution order."""
    HEADER = "header"
    ITEMS = "items"
    CART_CLEAR = "cart_clear"
    COMMIT = "commit"


class TwoFactorState(str, Enum):
    """Second-factor lifecycle. There is no transition back to DISABLED."""
    DISABLED = "disabled"
    ENROLLED = "enrolled"
