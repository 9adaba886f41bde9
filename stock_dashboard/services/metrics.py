"""
Derived inventory metrics.

All functions are pure: they only read the products passed in and
recompute from scratch on every call.
"""
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable

from stock_dashboard.config import Settings, get_settings
from stock_dashboard.schemas.product import DerivedProductRow, Product, StockLevel

TWO_PLACES = Decimal("0.01")


def to_two_places(amount: Decimal) -> Decimal:
    """
    Round an amount half-up to two decimals, whatever its magnitude.

    The context precision grows with the amount so that large values
    never exceed it while quantizing.
    """
    amount = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(28, amount.adjusted() + 3)
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def total_stock_value(products: Iterable[Product]) -> str:
    """
    Sum of quantity * price over all products, as a two-decimal string.

    Args:
        products: Products to value

    Returns:
        Total formatted with exactly two decimals (e.g., "17.50")
    """
    # Exact sum: the products are computed without context rounding
    with localcontext() as ctx:
        ctx.prec = 1000
        total = sum((Decimal(p.quantity) * p.price for p in products), Decimal("0"))
    return f"{to_two_places(total):f}"


def stock_level(quantity: int, threshold: int = None) -> StockLevel:
    threshold = get_settings().LOW_STOCK_THRESHOLD if threshold is None else threshold
    return StockLevel.LOW if quantity < threshold else StockLevel.AVAILABLE


def sold_stock_estimate(quantity: int, restock_level: int = None) -> int:
    """Units sold since a full restock, assuming stock started at ``restock_level``."""
    restock_level = get_settings().RESTOCK_LEVEL if restock_level is None else restock_level
    if quantity < restock_level:
        return max(0, restock_level - quantity)
    return 0


def classify(product: Product, settings: Settings = None) -> DerivedProductRow:
    """Attach stock level, sold-stock estimate and sold flag to a product."""
    settings = settings or get_settings()
    estimate = sold_stock_estimate(product.quantity, settings.RESTOCK_LEVEL)
    return DerivedProductRow(
        **product.model_dump(),
        stock_level=stock_level(product.quantity, settings.LOW_STOCK_THRESHOLD),
        sold_stock_estimate=estimate,
        is_sold=estimate > 0,
    )


def classify_all(products: Iterable[Product], settings: Settings = None) -> list[DerivedProductRow]:
    settings = settings or get_settings()
    return [classify(p, settings) for p in products]
