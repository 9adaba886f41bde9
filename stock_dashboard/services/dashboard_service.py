from decimal import Decimal
from typing import Optional, Sequence

from stock_dashboard.config import Settings, get_settings
from stock_dashboard.schemas.dashboard import (
    DashboardView,
    FocusCard,
    FocusState,
    SummaryView,
    TableRow,
    TableView,
)
from stock_dashboard.schemas.product import DerivedProductRow, Product, StockLevel
from stock_dashboard.schemas.transaction import Transaction, TransactionAction
from stock_dashboard.services import chart, metrics
from stock_dashboard.services.snapshot_loader import InventorySnapshot

PRODUCT_COLUMNS = ["Product Name", "Quantity", "Price", "Stock Level", "Sold Stock", "Sold Products"]
TRANSACTION_COLUMNS = ["Stock Name", "Quantity Changed", "Action", "Date & Time"]

NO_PRODUCTS_MESSAGE = "No Products Available"
NO_TRANSACTIONS_MESSAGE = "No Transactions Available"

STOCK_LEVEL_LABELS = {
    StockLevel.LOW: "Low Stock",
    StockLevel.AVAILABLE: "Available",
}
ACTION_LABELS = {
    TransactionAction.ADD: "Added",
    TransactionAction.DEDUCT: "Deducted",
}


class DashboardService:
    """
    Composes snapshot data, derived metrics, the chart series and the
    focus state into display-ready structures.

    Nothing is cached: every call recomputes from the snapshot it is given.
    """

    def __init__(self, settings: Settings = None):
        self.settings = settings or get_settings()

    def format_money(self, amount: Decimal) -> str:
        """Two-decimal amount with the configured currency prefix, e.g. 'M2.50'."""
        return f"{self.settings.CURRENCY_PREFIX}{metrics.to_two_places(amount):f}"

    def build_summary(self, products: Sequence[Product]) -> SummaryView:
        total = metrics.total_stock_value(products)
        return SummaryView(
            total_stock_value=total,
            text=f"Total Stock Value: {self.settings.CURRENCY_PREFIX}{total}",
        )

    def build_product_table(self, rows: Sequence[DerivedProductRow]) -> TableView:
        """
        Table rows for the product inventory.

        An empty inventory yields a single row whose one cell spans all
        columns and carries the "No Products Available" message.
        """
        if not rows:
            return self._empty_table(PRODUCT_COLUMNS, NO_PRODUCTS_MESSAGE)

        return TableView(
            columns=PRODUCT_COLUMNS,
            rows=[
                TableRow(cells=[
                    row.name,
                    str(row.quantity),
                    self.format_money(row.price),
                    STOCK_LEVEL_LABELS[row.stock_level],
                    str(row.sold_stock_estimate),
                    "Yes" if row.is_sold else "No",
                ])
                for row in rows
            ],
        )

    def build_transaction_table(self, transactions: Sequence[Transaction]) -> TableView:
        if not transactions:
            return self._empty_table(TRANSACTION_COLUMNS, NO_TRANSACTIONS_MESSAGE)

        return TableView(
            columns=TRANSACTION_COLUMNS,
            rows=[
                TableRow(cells=[
                    t.product_name,
                    str(t.quantity_changed),
                    ACTION_LABELS[t.action],
                    t.date,
                ])
                for t in transactions
            ],
        )

    def build_focus_card(self, focus: FocusState) -> Optional[FocusCard]:
        """Card for the focused product, offset from the pointer by the configured inset."""
        product = focus.focused_product
        if product is None:
            return None

        inset = self.settings.FOCUS_CARD_INSET
        return FocusCard(
            name=product.name,
            image_url=product.image_url or self.settings.PLACEHOLDER_IMAGE_URL,
            top=focus.pointer_offset.y + inset,
            left=focus.pointer_offset.x + inset,
        )

    def assemble(self, snapshot: InventorySnapshot, focus: FocusState) -> DashboardView:
        rows = metrics.classify_all(snapshot.products, self.settings)
        return DashboardView(
            version=snapshot.version,
            summary=self.build_summary(snapshot.products),
            products=rows,
            product_table=self.build_product_table(rows),
            transactions=list(snapshot.transactions),
            transaction_table=self.build_transaction_table(snapshot.transactions),
            chart=chart.chart_payload(chart.project(snapshot.products)),
            focus_card=self.build_focus_card(focus),
        )

    @staticmethod
    def _empty_table(columns: list[str], message: str) -> TableView:
        return TableView(
            columns=columns,
            rows=[TableRow(cells=[message], colspan=len(columns))],
            is_empty=True,
        )
