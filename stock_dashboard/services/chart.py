from typing import Sequence

from stock_dashboard.schemas.dashboard import ChartDataset, ChartOptions, ChartPayload, ChartSeries
from stock_dashboard.schemas.product import Product

DATASET_LABEL = "Product Quantities"
BACKGROUND_COLOR = "rgba(75, 192, 192, 0.2)"
BORDER_COLOR = "rgba(75, 192, 192, 1)"
BORDER_WIDTH = 1


def project(products: Sequence[Product]) -> ChartSeries:
    """
    Map products to a label/value series in input order.

    Label i and value i always describe products[i]; the focus tracker
    relies on this to resolve hovered bars. Duplicate names are kept.
    """
    return ChartSeries(
        labels=[p.name for p in products],
        values=[p.quantity for p in products],
    )


def chart_payload(series: ChartSeries) -> ChartPayload:
    """Wrap a series in the fixed single-dataset bar chart encoding."""
    return ChartPayload(
        labels=list(series.labels),
        datasets=[
            ChartDataset(
                label=DATASET_LABEL,
                data=list(series.values),
                background_color=BACKGROUND_COLOR,
                border_color=BORDER_COLOR,
                border_width=BORDER_WIDTH,
            )
        ],
        # Built-in tooltip is off; hover is handled by the focus tracker
        options=ChartOptions(responsive=True, begin_at_zero=True, tooltip_enabled=False),
    )
