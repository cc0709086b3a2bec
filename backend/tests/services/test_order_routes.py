"""Order Routes: POST /api/ordenes end to end against an in-memory store.

Tests cover:
    - Success persists one order, its items with price snapshots, and clears the cart
    - Incomplete data -> 400 "Datos incompletos" with zero writes
    - Stage failures -> 500 with the stage message, in atomic and legacy modes
    - Atomic mode removes only ordered products; legacy clears the whole cart
"""

import pytest
from sqlalchemy import func, select

from runx.models.cart_line import CartLine
from runx.models.order import Order, OrderItem

ACCOUNT_ID = 42

SCENARIO_BODY = {
    "clienteId": ACCOUNT_ID,
    "total": 41.97,
    "productos": [
        {"producto_id": 7, "cantidad": 2, "precio": 13.99},
        {"producto_id": 9, "cantidad": 1, "precio": 13.99},
    ],
}


async def _count(db, model, *criteria) -> int:
    query = select(func.count()).select_from(model)
    for criterion in criteria:
        query = query.where(criterion)
    return await db.scalar(query)


# --- Success ---------------------------------------------------------

async def test_place_order_returns_created_with_order_id(client, cart):
    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Orden creada"
    assert isinstance(body["ordenId"], int)


async def test_place_order_persists_header_items_and_empties_cart(client, cart, store_session):
    res = await client.post("/api/ordenes", json=SCENARIO_BODY)
    order_id = res.json()["ordenId"]

    assert await _count(store_session, Order) == 1
    assert await _count(store_session, OrderItem, OrderItem.order_id == order_id) == 2
    assert await _count(store_session, CartLine, CartLine.account_id == ACCOUNT_ID) == 0


async def test_cart_lookup_after_order_is_empty(client, cart):
    await client.post("/api/ordenes", json=SCENARIO_BODY)

    res = await client.get(f"/api/carrito/{ACCOUNT_ID}")
    assert res.status_code == 200
    assert res.json() == []


async def test_order_items_snapshot_submitted_unit_price(client, cart, store_session):
    res = await client.post("/api/ordenes", json=SCENARIO_BODY)
    order_id = res.json()["ordenId"]

    result = await store_session.execute(
        select(OrderItem.product_id, OrderItem.quantity, OrderItem.unit_price)
        .where(OrderItem.order_id == order_id)
        .order_by(OrderItem.product_id),
    )
    assert result.all() == [(7, 2, 13.99), (9, 1, 13.99)]


async def test_order_header_records_account_and_total(client, cart, store_session):
    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    order = await store_session.get(Order, res.json()["ordenId"])
    assert order.account_id == ACCOUNT_ID
    assert order.total == 41.97
    assert order.created_at is not None


async def test_mismatched_total_is_accepted(client, cart, store_session):
    """Client total is trusted; the mismatch is only logged."""
    body = {**SCENARIO_BODY, "total": 1.00}
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 201
    assert await _count(store_session, Order) == 1


# --- Validation ------------------------------------------------------

async def test_empty_productos_rejected_without_writes(client, cart, store_session):
    res = await client.post(
        "/api/ordenes", json={**SCENARIO_BODY, "productos": []},
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Datos incompletos"
    assert await _count(store_session, Order) == 0
    assert await _count(store_session, CartLine) == 2


@pytest.mark.parametrize("productos", ["x", 5, {"producto_id": 7}])
async def test_non_list_productos_reported_as_incomplete(client, cart, productos):
    res = await client.post(
        "/api/ordenes", json={**SCENARIO_BODY, "productos": productos},
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Datos incompletos"


async def test_missing_total_rejected(client, cart):
    body = {k: v for k, v in SCENARIO_BODY.items() if k != "total"}
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 400
    assert res.json()["message"] == "Datos incompletos"


async def test_zero_total_rejected(client, cart):
    res = await client.post("/api/ordenes", json={**SCENARIO_BODY, "total": 0})
    assert res.status_code == 400


async def test_missing_cliente_id_rejected(client, cart):
    body = {k: v for k, v in SCENARIO_BODY.items() if k != "clienteId"}
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_line_with_zero_quantity_rejected(client, cart, store_session):
    body = {
        **SCENARIO_BODY,
        "productos": [{"producto_id": 7, "cantidad": 0, "precio": 13.99}],
    }
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 400
    assert await _count(store_session, Order) == 0


@pytest.mark.parametrize("mode", ["atomic", "legacy"])
async def test_unknown_account_fails_header_stage(
    client, products, store_session, override_settings, mode,
):
    override_settings(order_placement_mode=mode)
    res = await client.post(
        "/api/ordenes", json={**SCENARIO_BODY, "clienteId": 999},
    )

    assert res.status_code == 500
    assert res.json()["message"] == "Error crear orden"
    assert res.json()["error"]["context"]["stage"] == "header"
    assert await _count(store_session, Order) == 0


# --- Stage failures: atomic (default) -------------------------------

async def test_items_failure_atomic_leaves_no_order(client, cart, store_session, store_fault):
    store_fault("INSERT INTO order_items")

    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 500
    assert res.json()["message"] == "Error guardar detalles orden"
    assert res.json()["error"]["context"]["stage"] == "items"
    assert await _count(store_session, Order) == 0
    assert await _count(store_session, OrderItem) == 0
    assert await _count(store_session, CartLine) == 2


async def test_header_failure_reports_header_stage(client, cart, store_session, store_fault):
    store_fault("INSERT INTO orders")

    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 500
    assert res.json()["message"] == "Error crear orden"
    assert res.json()["error"]["code"] == "ORDER_HEADER_FAILED"
    assert await _count(store_session, CartLine) == 2


async def test_cart_clear_failure_atomic_rolls_back_order(client, cart, store_session, store_fault):
    store_fault("DELETE FROM carrito")

    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 500
    assert res.json()["message"] == "Error limpiar carrito"
    assert await _count(store_session, Order) == 0
    assert await _count(store_session, OrderItem) == 0


async def test_atomic_mode_keeps_unordered_cart_lines(client, cart, store_session):
    body = {
        **SCENARIO_BODY,
        "total": 27.98,
        "productos": [{"producto_id": 7, "cantidad": 2, "precio": 13.99}],
    }
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 201
    remaining = await store_session.scalars(
        select(CartLine.product_id).where(CartLine.account_id == ACCOUNT_ID),
    )
    assert remaining.all() == [9]


# --- Stage failures: legacy -----------------------------------------

async def test_items_failure_legacy_leaves_header_without_items(
    client, cart, store_session, store_fault, override_settings,
):
    override_settings(order_placement_mode="legacy")
    store_fault("INSERT INTO order_items")

    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 500
    assert res.json()["message"] == "Error guardar detalles orden"
    assert await _count(store_session, Order) == 1
    assert await _count(store_session, OrderItem) == 0
    assert await _count(store_session, CartLine) == 2


async def test_cart_clear_failure_legacy_keeps_order_and_stale_cart(
    client, cart, store_session, store_fault, override_settings,
):
    override_settings(order_placement_mode="legacy")
    store_fault("DELETE FROM carrito")

    res = await client.post("/api/ordenes", json=SCENARIO_BODY)

    assert res.status_code == 500
    assert res.json()["message"] == "Error limpiar carrito"
    assert await _count(store_session, Order) == 1
    assert await _count(store_session, OrderItem) == 2
    assert await _count(store_session, CartLine) == 2


async def test_legacy_mode_clears_whole_cart(client, cart, store_session, override_settings):
    override_settings(order_placement_mode="legacy")
    body = {
        **SCENARIO_BODY,
        "total": 27.98,
        "productos": [{"producto_id": 7, "cantidad": 2, "precio": 13.99}],
    }
    res = await client.post("/api/ordenes", json=body)

    assert res.status_code == 201
    assert await _count(store_session, CartLine, CartLine.account_id == ACCOUNT_ID) == 0
