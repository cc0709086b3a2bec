"""Order Rules: pure precondition checks for order placement.

Invariants:
    - check_order_request runs before any write; failure means zero writes
    - total must be present and nonzero, line items a non-empty sequence
    - Pure functions: no IO, no DB, no async
"""

from dataclasses import dataclass
from typing import Sequence

from runx.core.domain_types import AccountId, ProductId
from runx.core.errors import ErrorContext, ValidationError

INCOMPLETE_ORDER_MESSAGE = "Datos incompletos"
TOTAL_TOLERANCE = 0.005


@dataclass(frozen=True)
class LineItem:
    """One order line with its unit price snapshot."""
    product_id: ProductId
    quantity: int
    unit_price: float

    @property
    def extension(self) -> float:
        return self.quantity * self.unit_price


def check_order_request(
    account_id: AccountId | None,
    total: float | None,
    line_items: Sequence[LineItem] | None,
) -> None:
    """Raise ValidationError unless the request may proceed to the store."""
    if not account_id or not total or not line_items:
        raise ValidationError(
            INCOMPLETE_ORDER_MESSAGE, ErrorContext(account_id=account_id),
        )


def line_items_total(line_items: Sequence[LineItem]) -> float:
    return round(sum(item.extension for item in line_items), 2)


def total_matches_lines(total: float, line_items: Sequence[LineItem]) -> bool:
    """True when the client-supplied total equals the sum of line extensions."""
    return abs(total - line_items_total(line_items)) < TOTAL_TOLERANCE


def ordered_product_ids(line_items: Sequence[LineItem]) -> list[ProductId]:
    """Distinct product ids in first-seen order."""
    return list(dict.fromkeys(item.product_id for item in line_items))
