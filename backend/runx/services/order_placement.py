"""Order Placement Coordinator: records an order header, its items, and clears the cart.

Invariants:
    - Preconditions checked before any write (check_order_request); failure = zero writes
    - Stages run in order HEADER -> ITEMS -> CART_CLEAR, short-circuiting on first failure
    - Each stage failure surfaces as its own StageFailure subclass
    - A store error or a stage timeout maps to the failing stage's error
    - Placements for one account are serialized in-process (order_locks)
    - An unknown account fails the HEADER stage in both modes, before any write

Design Decisions:
    - ATOMIC mode: one transaction, account row locked first, only the ordered
      products removed from the cart, rollback on any failure
    - LEGACY mode: each stage commits on its own and nothing is compensated,
      so a failure at ITEMS leaves a header without items; the cart is cleared
      unconditionally for the account
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from runx.core.domain_types import (
    AccountId, OrderId, OrderStage, PlacementMode, ProductId,
)
from runx.core.errors import (
    ErrorContext, STAGE_ERRORS,
)
from runx.core.order_rules import (
    LineItem, check_order_request, line_items_total,
    ordered_product_ids, total_matches_lines,
)
from runx.infrastructure.keyed_locks import KeyedLocks, order_locks
from runx.models.account import Account
from runx.models.cart_line import CartLine
from runx.models.order import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderPlacementCoordinator:
    """Turns a cart-derived line-item list into a persisted order."""

    def __init__(
        self,
        db: AsyncSession,
        mode: PlacementMode = PlacementMode.ATOMIC,
        stage_timeout_seconds: float = 5.0,
        locks: KeyedLocks = order_locks,
    ):
        self.db = db
        self.mode = mode
        self.stage_timeout_seconds = stage_timeout_seconds
        self.locks = locks

    async def place_order(
        self,
        account_id: AccountId | None,
        total: float | None,
        line_items: Sequence[LineItem] | None,
    ) -> OrderId:
        """Persist the order and return its id. Raises ValidationError or a StageFailure."""
        check_order_request(account_id, total, line_items)
        if not total_matches_lines(total, line_items):
            logger.warning(
                f"Order total {total} differs from line total "
                f"{line_items_total(line_items)}",
                extra={"account_id": account_id},
            )

        async with self.locks.hold(account_id):
            if self.mode is PlacementMode.LEGACY:
                order_id = await self._place_legacy(account_id, total, line_items)
            else:
                order_id = await self._place_atomic(account_id, total, line_items)

        logger.info(
            f"Order placed with {len(line_items)} item(s)",
            extra={
                "account_id": account_id,
                "order_id": order_id,
                "mode": self.mode.value,
            },
        )
        return order_id

    # --- Placement modes --------------------------------------------

    async def _place_atomic(
        self, account_id: AccountId, total: float, line_items: Sequence[LineItem],
    ) -> OrderId:
        try:
            async with self._stage(OrderStage.HEADER, account_id):
                await self._require_account(account_id, for_update=True)
                order_id = await self._insert_header(account_id, total)
            async with self._stage(OrderStage.ITEMS, account_id, order_id):
                await self._insert_items(order_id, line_items)
            async with self._stage(OrderStage.CART_CLEAR, account_id, order_id):
                await self._clear_cart(
                    account_id, ordered_product_ids(line_items),
                )
            async with self._stage(OrderStage.COMMIT, account_id, order_id):
                await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return order_id

    async def _place_legacy(
        self, account_id: AccountId, total: float, line_items: Sequence[LineItem],
    ) -> OrderId:
        try:
            async with self._stage(OrderStage.HEADER, account_id):
                await self._require_account(account_id)
                order_id = await self._insert_header(account_id, total)
                await self.db.commit()
            async with self._stage(OrderStage.ITEMS, account_id, order_id):
                await self._insert_items(order_id, line_items)
                await self.db.commit()
            async with self._stage(OrderStage.CART_CLEAR, account_id, order_id):
                await self._clear_cart(account_id)
                await self.db.commit()
        except Exception:
            # Discards only the failed stage; earlier stages are already committed
            await self.db.rollback()
            raise
        return order_id

    # --- Stages -----------------------------------------------------

    @asynccontextmanager
    async def _stage(
        self,
        stage: OrderStage,
        account_id: AccountId,
        order_id: OrderId | None = None,
    ) -> AsyncIterator[None]:
        """Bound a stage by the timeout and map store failures to its StageFailure."""
        try:
            async with asyncio.timeout(self.stage_timeout_seconds):
                yield
        except (SQLAlchemyError, TimeoutError) as e:
            logger.error(
                f"Order stage {stage.value} failed: {e!r}",
                extra={
                    "account_id": account_id,
                    "order_id": order_id,
                    "stage": stage.value,
                    "mode": self.mode.value,
                },
            )
            raise STAGE_ERRORS[stage](
                ErrorContext(account_id=account_id, order_id=order_id),
            ) from e

    async def _require_account(
        self, account_id: AccountId, for_update: bool = False,
    ) -> None:
        """Header stage guard: an unknown account fails like a rejected header insert."""
        stmt = select(Account.id).where(Account.id == account_id)
        if for_update:
            stmt = stmt.with_for_update()
        if await self.db.scalar(stmt) is None:
            logger.warning(
                "Order header rejected, account does not exist",
                extra={"account_id": account_id, "stage": OrderStage.HEADER.value},
            )
            raise STAGE_ERRORS[OrderStage.HEADER](
                ErrorContext(account_id=account_id),
            )

    async def _insert_header(self, account_id: AccountId, total: float) -> OrderId:
        order = Order(account_id=account_id, total=total)
        self.db.add(order)
        await self.db.flush()
        return OrderId(order.id)

    async def _insert_items(
        self, order_id: OrderId, line_items: Sequence[LineItem],
    ) -> None:
        await self.db.execute(
            insert(OrderItem),
            [
                {
                    "order_id": order_id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                }
                for item in line_items
            ],
        )

    async def _clear_cart(
        self,
        account_id: AccountId,
        product_ids: Sequence[ProductId] | None = None,
    ) -> None:
        """Delete the account's cart lines, only those for product_ids when given."""
        stmt = delete(CartLine).where(CartLine.account_id == account_id)
        if product_ids is not None:
            stmt = stmt.where(CartLine.product_id.in_(product_ids))
        await self.db.execute(stmt)
