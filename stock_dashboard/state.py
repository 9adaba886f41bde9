import logging

from fastapi import Request

from stock_dashboard.config import Settings, get_settings
from stock_dashboard.dispatcher import EventDispatcher
from stock_dashboard.schemas.dashboard import DashboardView, FocusResponse, FocusState, HoverEvent
from stock_dashboard.services.dashboard_service import DashboardService
from stock_dashboard.services.focus_tracker import FocusTracker
from stock_dashboard.services.snapshot_loader import InventorySnapshot, SnapshotLoader
from stock_dashboard.utils.store import RecordStore

logger = logging.getLogger(__name__)


class DashboardState:
    """
    Owns the live dashboard for one application instance.

    The loader writes the snapshot and the tracker writes the focus
    state; this class only routes inbound events through the dispatcher
    and hands read-only views to the dashboard service.
    """

    def __init__(self, store: RecordStore, settings: Settings = None):
        self.settings = settings or get_settings()
        self.store = store
        self.dispatcher = EventDispatcher()
        self.loader = SnapshotLoader(store, dispatcher=self.dispatcher, settings=self.settings)
        self.tracker = FocusTracker(lambda: self.loader.snapshot.products)
        self.service = DashboardService(self.settings)

    @property
    def snapshot(self) -> InventorySnapshot:
        return self.loader.snapshot

    def start(self) -> None:
        """Initial load and subscription to store changes."""
        self.dispatcher.dispatch(self.loader.load)
        self.loader.subscribe(self._on_external_change)

    def close(self) -> None:
        """Deregister from the store and stop accepting events."""
        self.loader.close()
        self.dispatcher.close()
        logger.info("Dashboard state closed")

    def reload(self) -> InventorySnapshot:
        """Full re-read; also retries a store subscription that failed at startup."""
        snapshot = self.dispatcher.dispatch(self.loader.load) or self.snapshot
        if not self.loader.subscribed and not self.dispatcher.closed:
            self.loader.subscribe(self._on_external_change)
        return snapshot

    def hover(self, event: HoverEvent) -> FocusResponse:
        state = self.dispatcher.dispatch(self.tracker.handle_hover, event) or FocusState()
        return self._focus_response(state)

    def focus(self) -> FocusResponse:
        state = self.dispatcher.dispatch(self.tracker.state) or FocusState()
        return self._focus_response(state)

    def view(self) -> DashboardView:
        return self.dispatcher.dispatch(self._assemble) or self.service.assemble(self.snapshot, FocusState())

    def _assemble(self) -> DashboardView:
        return self.service.assemble(self.snapshot, self.tracker.state())

    def _focus_response(self, state: FocusState) -> FocusResponse:
        return FocusResponse(
            focused=state.is_focused,
            state=state,
            card=self.service.build_focus_card(state),
        )

    def _on_external_change(self, snapshot: InventorySnapshot) -> None:
        self.tracker.revalidate()
        logger.info(f"Store change applied, snapshot v{snapshot.version}")


def get_dashboard(request: Request) -> DashboardState:
    """Dependency returning the application's dashboard state."""
    return request.app.state.dashboard
