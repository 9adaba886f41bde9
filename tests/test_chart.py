"""Tests for the chart projection."""
from stock_dashboard.schemas.product import Product
from stock_dashboard.services.chart import DATASET_LABEL, chart_payload, project


def test_project_preserves_order_and_length():
    products = [Product(name=f"P{i}", quantity=i * 3) for i in range(6)]

    series = project(products)

    assert len(series.labels) == len(products) == len(series.values)
    assert series.labels == ["P0", "P1", "P2", "P3", "P4", "P5"]
    assert series.values == [0, 3, 6, 9, 12, 15]


def test_project_keeps_duplicate_names():
    """Test products sharing a name stay separate bars."""
    products = [Product(name="Tea", quantity=2), Product(name="Tea", quantity=8)]

    series = project(products)

    assert series.labels == ["Tea", "Tea"]
    assert series.values == [2, 8]


def test_project_empty():
    series = project([])

    assert series.labels == []
    assert series.values == []


def test_chart_payload_fixed_encoding():
    series = project([Product(name="Tea", quantity=2)])

    payload = chart_payload(series)

    assert payload.labels == ["Tea"]
    assert len(payload.datasets) == 1
    dataset = payload.datasets[0]
    assert dataset.label == DATASET_LABEL == "Product Quantities"
    assert dataset.data == [2]
    assert dataset.border_width == 1
    assert payload.options.begin_at_zero is True
    assert payload.options.tooltip_enabled is False
