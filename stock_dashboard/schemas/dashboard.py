from typing import Optional

from pydantic import BaseModel, Field

from stock_dashboard.schemas.product import DerivedProductRow, Product
from stock_dashboard.schemas.transaction import Transaction


class ChartSeries(BaseModel):
    """Positionally aligned labels and values; index i is product i."""
    labels: list[str]
    values: list[int]


class ChartDataset(BaseModel):
    label: str
    data: list[int]
    background_color: str
    border_color: str
    border_width: int


class ChartOptions(BaseModel):
    responsive: bool = True
    begin_at_zero: bool = True
    tooltip_enabled: bool = False


class ChartPayload(BaseModel):
    """Everything the chart surface needs to draw the quantity overview."""
    labels: list[str]
    datasets: list[ChartDataset]
    options: ChartOptions


class PlotArea(BaseModel):
    """Top-left corner of the chart's plotting area."""
    left: float = 0
    top: float = 0


class HoverEvent(BaseModel):
    """Pointer-hover report from the chart surface."""
    element_index: Optional[int] = Field(None, description="Hovered bar index, or null when over no bar")
    pointer_x: float
    pointer_y: float
    plot_area: PlotArea = Field(default_factory=PlotArea)


class PointerOffset(BaseModel):
    x: float = 0
    y: float = 0


class FocusState(BaseModel):
    """Currently focused product, if any, and the pointer offset inside the plot area."""
    focused_index: Optional[int] = None
    focused_product: Optional[Product] = None
    pointer_offset: PointerOffset = Field(default_factory=PointerOffset)

    @property
    def is_focused(self) -> bool:
        return self.focused_product is not None


class FocusCard(BaseModel):
    """Floating card shown next to the pointer for the focused product."""
    name: str
    image_url: str
    top: float
    left: float


class FocusResponse(BaseModel):
    focused: bool
    state: FocusState
    card: Optional[FocusCard] = None


class SummaryView(BaseModel):
    total_stock_value: str
    text: str


class TableRow(BaseModel):
    cells: list[str]
    colspan: int = 1


class TableView(BaseModel):
    columns: list[str]
    rows: list[TableRow]
    is_empty: bool = False


class DashboardView(BaseModel):
    """Render-ready state for the whole dashboard."""
    version: int
    summary: SummaryView
    products: list[DerivedProductRow]
    product_table: TableView
    transactions: list[Transaction]
    transaction_table: TableView
    chart: ChartPayload
    focus_card: Optional[FocusCard] = None


class ReloadResponse(BaseModel):
    version: int
    product_count: int
    transaction_count: int
