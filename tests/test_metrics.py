"""Tests for derived inventory metrics."""
from decimal import Decimal

import pytest

from stock_dashboard.config import Settings
from stock_dashboard.schemas.product import Product, StockLevel
from stock_dashboard.services.metrics import (
    classify,
    classify_all,
    sold_stock_estimate,
    stock_level,
    to_two_places,
    total_stock_value,
)


def test_total_stock_value_empty():
    """Test an empty inventory is worth 0.00."""
    assert total_stock_value([]) == "0.00"


def test_total_stock_value_two_decimals():
    """Test value is quantity times price summed, formatted to two decimals."""
    products = [
        Product(quantity=3, price=2.5),
        Product(quantity=1, price=10),
    ]

    assert total_stock_value(products) == "17.50"


def test_total_stock_value_rounds_half_up():
    products = [Product(quantity=1, price=Decimal("0.005"))]

    assert total_stock_value(products) == "0.01"


def test_total_stock_value_ignores_zero_quantity():
    products = [Product(quantity=0, price=99), Product(quantity=2, price=Decimal("1.25"))]

    assert total_stock_value(products) == "2.50"


@pytest.mark.parametrize("quantity", range(0, 30))
def test_classify_rules_hold_for_all_quantities(quantity):
    """Test stock level, estimate and sold flag agree with the quantity rules."""
    row = classify(Product(name="Widget", quantity=quantity, price=1))

    assert (row.stock_level == StockLevel.LOW) == (quantity < 5)
    expected_estimate = max(0, 20 - quantity) if quantity < 20 else 0
    assert row.sold_stock_estimate == expected_estimate
    assert row.is_sold == (row.sold_stock_estimate > 0)


def test_classify_zero_quantity():
    row = classify(Product(quantity=0))

    assert row.stock_level == StockLevel.LOW
    assert row.sold_stock_estimate == 20
    assert row.is_sold is True


def test_classify_low_stock_boundary():
    """Test quantity 5 is Available (the low-stock boundary is strict)."""
    assert classify(Product(quantity=4)).stock_level == StockLevel.LOW
    assert classify(Product(quantity=5)).stock_level == StockLevel.AVAILABLE


def test_classify_restock_boundary():
    """Test quantity 20 counts as nothing sold."""
    row = classify(Product(quantity=20))

    assert row.sold_stock_estimate == 0
    assert row.is_sold is False
    assert classify(Product(quantity=19)).sold_stock_estimate == 1


def test_classify_keeps_product_fields():
    product = Product(id="sku-1", name="Kettle", quantity=7, price=Decimal("12.00"), image_url="k.png")

    row = classify(product)

    assert row.id == "sku-1"
    assert row.name == "Kettle"
    assert row.price == Decimal("12.00")
    assert row.image_url == "k.png"


def test_classify_all_preserves_order():
    products = [Product(name=n, quantity=q) for n, q in [("b", 30), ("a", 1), ("b", 10)]]

    rows = classify_all(products)

    assert [r.name for r in rows] == ["b", "a", "b"]
    assert [r.stock_level for r in rows] == [StockLevel.AVAILABLE, StockLevel.LOW, StockLevel.AVAILABLE]


def test_thresholds_can_be_overridden():
    assert stock_level(7, threshold=10) == StockLevel.LOW
    assert sold_stock_estimate(40, restock_level=50) == 10


def test_total_stock_value_large_amounts():
    """Test totals beyond the default decimal precision still format."""
    products = [Product(quantity=100, price=Decimal("1e26")), Product(quantity=1, price=Decimal("0.005"))]

    assert total_stock_value(products) == "10000000000000000000000000000.01"


def test_to_two_places_large_amount():
    assert f"{to_two_places(Decimal('123456789012345678901234567890.125')):f}" == "123456789012345678901234567890.13"


def test_classify_uses_given_settings():
    """Test thresholds come from the settings passed in, not the global ones."""
    settings = Settings(LOW_STOCK_THRESHOLD=10, RESTOCK_LEVEL=30)

    row = classify(Product(quantity=7), settings)

    assert row.stock_level == StockLevel.LOW
    assert row.sold_stock_estimate == 23
    assert [r.stock_level for r in classify_all([Product(quantity=7)], settings)] == [StockLevel.LOW]
