from fastapi import APIRouter, Depends

from stock_dashboard.schemas.dashboard import (
    ChartPayload,
    DashboardView,
    FocusResponse,
    HoverEvent,
    ReloadResponse,
    SummaryView,
    TableView,
)
from stock_dashboard.schemas.product import DerivedProductRow
from stock_dashboard.schemas.transaction import Transaction
from stock_dashboard.services import chart, metrics
from stock_dashboard.state import DashboardState, get_dashboard

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/",
    response_model=DashboardView,
    summary="Full dashboard view",
    description="Summary, product and transaction tables, chart payload and focus card in one response."
)
def get_dashboard_view(dashboard: DashboardState = Depends(get_dashboard)):
    """
    Get the complete render-ready dashboard.

    Derived metrics are recomputed from the current snapshot on every call.
    """
    return dashboard.view()


@router.get(
    "/summary",
    response_model=SummaryView,
    summary="Total stock value"
)
def get_summary(dashboard: DashboardState = Depends(get_dashboard)):
    return dashboard.service.build_summary(dashboard.snapshot.products)


@router.get(
    "/products",
    response_model=list[DerivedProductRow],
    summary="Products with derived metrics",
    description="Each product with stock level, sold-stock estimate and sold flag, in store order."
)
def list_products(dashboard: DashboardState = Depends(get_dashboard)):
    return metrics.classify_all(dashboard.snapshot.products, dashboard.settings)


@router.get(
    "/products/table",
    response_model=TableView,
    summary="Product inventory table"
)
def get_product_table(dashboard: DashboardState = Depends(get_dashboard)):
    rows = metrics.classify_all(dashboard.snapshot.products, dashboard.settings)
    return dashboard.service.build_product_table(rows)


@router.get(
    "/transactions",
    response_model=list[Transaction],
    summary="Transaction history"
)
def list_transactions(dashboard: DashboardState = Depends(get_dashboard)):
    return list(dashboard.snapshot.transactions)


@router.get(
    "/transactions/table",
    response_model=TableView,
    summary="Transaction history table"
)
def get_transaction_table(dashboard: DashboardState = Depends(get_dashboard)):
    return dashboard.service.build_transaction_table(dashboard.snapshot.transactions)


@router.get(
    "/chart",
    response_model=ChartPayload,
    summary="Product quantity chart",
    description="Labels and quantities in product order, with the fixed bar chart encoding."
)
def get_chart(dashboard: DashboardState = Depends(get_dashboard)):
    return chart.chart_payload(chart.project(dashboard.snapshot.products))


@router.post(
    "/hover",
    response_model=FocusResponse,
    summary="Report a chart hover event",
    description="""
    Update the focused product from a pointer-hover event.

    - **element_index**: index of the hovered bar, or null when the pointer is over no bar
    - **pointer_x / pointer_y**: pointer position in chart coordinates
    - **plot_area**: top-left corner of the plotting area

    An index outside the current product list resets focus instead of failing.
    """
)
def report_hover(
    event: HoverEvent,
    dashboard: DashboardState = Depends(get_dashboard)
):
    return dashboard.hover(event)


@router.get(
    "/focus",
    response_model=FocusResponse,
    summary="Current focus state"
)
def get_focus(dashboard: DashboardState = Depends(get_dashboard)):
    return dashboard.focus()


@router.post(
    "/reload",
    response_model=ReloadResponse,
    summary="Reload products and transactions",
    description="Re-read both collections from the record store. The store itself is never written."
)
def reload_snapshot(dashboard: DashboardState = Depends(get_dashboard)):
    snapshot = dashboard.reload()
    return ReloadResponse(
        version=snapshot.version,
        product_count=len(snapshot.products),
        transaction_count=len(snapshot.transactions),
    )
