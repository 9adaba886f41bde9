import logging
from typing import Callable, Optional, Sequence

from stock_dashboard.schemas.dashboard import FocusState, HoverEvent, PointerOffset
from stock_dashboard.schemas.product import Product

logger = logging.getLogger(__name__)


class FocusTracker:
    """
    Tracks which product the pointer is over on the quantity chart.

    Two states: Idle (nothing focused) and Focused (an index into the
    current products plus the pointer offset inside the plot area). Every
    hover event re-evaluates the whole state, so moving within one bar
    still updates the offset.

    The focused product is stored as an index and resolved against the
    live snapshot on every read. If a reload shrinks the snapshot below
    the stored index the tracker falls back to Idle.
    """

    def __init__(self, products: Callable[[], Sequence[Product]]):
        self._products = products
        self._index: Optional[int] = None
        self._offset = PointerOffset()

    @property
    def is_focused(self) -> bool:
        return self.state().is_focused

    def handle_hover(self, event: HoverEvent) -> FocusState:
        """
        Apply a hover event from the chart surface.

        Args:
            event: Hovered element index (or None) and pointer geometry

        Returns:
            The resulting focus state
        """
        if event.element_index is None:
            return self.reset()

        products = self._products()
        if not 0 <= event.element_index < len(products):
            logger.debug(
                f"Hover index {event.element_index} out of range for {len(products)} products, going idle"
            )
            return self.reset()

        self._index = event.element_index
        self._offset = PointerOffset(
            x=event.pointer_x - event.plot_area.left,
            y=event.pointer_y - event.plot_area.top,
        )
        return FocusState(
            focused_index=self._index,
            focused_product=products[self._index],
            pointer_offset=self._offset,
        )

    def revalidate(self) -> bool:
        """
        Check the focused index against the live snapshot.

        Resets to Idle when a reload left the index out of range.

        Returns:
            True if a product is still focused
        """
        if self._index is None:
            return False
        if self._index >= len(self._products()):
            logger.debug(f"Focused index {self._index} is stale after reload, going idle")
            self.reset()
            return False
        return True

    def state(self) -> FocusState:
        """Return the current state, revalidating the focused index first."""
        if not self.revalidate():
            return FocusState()

        products = self._products()
        return FocusState(
            focused_index=self._index,
            focused_product=products[self._index],
            pointer_offset=self._offset,
        )

    def reset(self) -> FocusState:
        self._index = None
        self._offset = PointerOffset()
        return FocusState()
