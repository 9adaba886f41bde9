"""Tests for assembling dashboard view state."""
from decimal import Decimal

import pytest

from stock_dashboard.config import Settings
from stock_dashboard.schemas.dashboard import FocusState, PointerOffset
from stock_dashboard.schemas.product import Product
from stock_dashboard.schemas.transaction import Transaction, TransactionAction
from stock_dashboard.services.dashboard_service import (
    NO_PRODUCTS_MESSAGE,
    NO_TRANSACTIONS_MESSAGE,
    PRODUCT_COLUMNS,
    TRANSACTION_COLUMNS,
    DashboardService,
)
from stock_dashboard.services.metrics import classify_all
from stock_dashboard.services.snapshot_loader import InventorySnapshot


@pytest.fixture
def service():
    return DashboardService()


@pytest.fixture
def products():
    return (
        Product(id=1, name="Rice", quantity=3, price=Decimal("2.5"), image_url="rice.png"),
        Product(id=2, name="Beans", quantity=25, price=Decimal("10"), image_url="beans.png"),
    )


def test_summary_text(service, products):
    summary = service.build_summary(products)

    assert summary.total_stock_value == "257.50"
    assert summary.text == "Total Stock Value: M257.50"


def test_summary_empty(service):
    assert service.build_summary([]).text == "Total Stock Value: M0.00"


def test_product_table_rows(service, products):
    table = service.build_product_table(classify_all(products))

    assert table.columns == PRODUCT_COLUMNS
    assert table.is_empty is False
    assert [row.cells for row in table.rows] == [
        ["Rice", "3", "M2.50", "Low Stock", "17", "Yes"],
        ["Beans", "25", "M10.00", "Available", "0", "No"],
    ]


def test_product_table_empty_state(service):
    """Test no products gives one message row spanning every column."""
    table = service.build_product_table([])

    assert table.is_empty is True
    assert len(table.rows) == 1
    assert table.rows[0].cells == [NO_PRODUCTS_MESSAGE]
    assert table.rows[0].colspan == len(PRODUCT_COLUMNS) == 6


def test_transaction_table_rows(service):
    transactions = [
        Transaction(product_name="Rice", quantity_changed=4, action=TransactionAction.ADD, date="01/05/2024, 10:00"),
        Transaction(product_name="Gone Product", quantity_changed=2, action="deduct", date="02/05/2024, 11:30"),
    ]

    table = service.build_transaction_table(transactions)

    assert table.columns == TRANSACTION_COLUMNS
    assert [row.cells for row in table.rows] == [
        ["Rice", "4", "Added", "01/05/2024, 10:00"],
        ["Gone Product", "2", "Deducted", "02/05/2024, 11:30"],
    ]


def test_transaction_table_empty_state(service):
    table = service.build_transaction_table([])

    assert table.rows[0].cells == [NO_TRANSACTIONS_MESSAGE]
    assert table.rows[0].colspan == 4


def test_focus_card_offset_by_inset(service, products):
    focus = FocusState(focused_index=0, focused_product=products[0], pointer_offset=PointerOffset(x=100, y=50))

    card = service.build_focus_card(focus)

    assert card.name == "Rice"
    assert card.image_url == "rice.png"
    assert (card.left, card.top) == (110, 60)


def test_no_focus_card_when_idle(service):
    assert service.build_focus_card(FocusState()) is None


def test_assemble(service, products):
    snapshot = InventorySnapshot(products=products, transactions=(), version=3)

    view = service.assemble(snapshot, FocusState())

    assert view.version == 3
    assert view.summary.total_stock_value == "257.50"
    assert [row.sold_stock_estimate for row in view.products] == [17, 0]
    assert view.chart.labels == ["Rice", "Beans"]
    assert view.chart.datasets[0].data == [3, 25]
    assert view.transaction_table.is_empty is True
    assert view.focus_card is None


def test_currency_prefix_from_settings(products):
    service = DashboardService(Settings(CURRENCY_PREFIX="$"))

    assert service.build_summary(products).text == "Total Stock Value: $257.50"
    assert service.format_money(Decimal("3")) == "$3.00"


def test_large_price_renders(service):
    product = Product(id=1, name="Gold", quantity=100, price=Decimal("1e26"))

    view = service.assemble(InventorySnapshot(products=(product,)), FocusState())

    assert view.summary.text == "Total Stock Value: M10000000000000000000000000000.00"
    assert view.product_table.rows[0].cells[2] == "M100000000000000000000000000.00"


def test_assemble_uses_service_thresholds(products):
    service = DashboardService(Settings(LOW_STOCK_THRESHOLD=10))

    view = service.assemble(InventorySnapshot(products=products), FocusState())

    assert view.products[0].stock_level.value == "Low"
    assert view.product_table.rows[0].cells[3] == "Low Stock"
