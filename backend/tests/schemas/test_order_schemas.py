"""Order Schemas: optional top-level fields, typed lines, LineItem conversion.

Invariants:
    - Missing top-level fields parse (coordinator rejects them with "Datos incompletos")
    - Line fields are typed: cantidad > 0, precio >= 0
"""

import pytest
from pydantic import ValidationError

from runx.core.order_rules import LineItem
from runx.schemas.order import OrderCreate, OrderLineIn


def test_empty_body_parses():
    body = OrderCreate()
    assert body.account_id() is None
    assert body.line_items() is None


def test_line_items_conversion():
    body = OrderCreate(
        clienteId=42, total=41.97,
        productos=[{"producto_id": 7, "cantidad": 2, "precio": 13.99}],
    )
    assert body.account_id() == 42
    assert body.line_items() == [LineItem(7, 2, 13.99)]


def test_zero_account_id_treated_as_missing():
    assert OrderCreate(clienteId=0).account_id() is None


@pytest.mark.parametrize("line", [
    {"producto_id": 7, "cantidad": 0, "precio": 1.0},
    {"producto_id": 7, "cantidad": 1, "precio": -1.0},
    {"cantidad": 1, "precio": 1.0},
])
def test_invalid_line_rejected(line):
    with pytest.raises(ValidationError):
        OrderLineIn(**line)


@pytest.mark.parametrize("productos", ["x", 5, {"producto_id": 7}])
def test_non_list_productos_parsed_as_missing(productos):
    body = OrderCreate(clienteId=42, total=1.0, productos=productos)
    assert body.line_items() is None
