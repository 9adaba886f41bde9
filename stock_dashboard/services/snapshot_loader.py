import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from stock_dashboard.config import Settings, get_settings
from stock_dashboard.dispatcher import EventDispatcher
from stock_dashboard.schemas.product import Product
from stock_dashboard.schemas.transaction import Transaction
from stock_dashboard.utils.store import RecordStore, Subscription

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
SnapshotCallback = Callable[["InventorySnapshot"], None]


@dataclass(frozen=True)
class InventorySnapshot:
    """Products and transactions as of one load, in store order."""
    products: tuple[Product, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    version: int = 0


class SnapshotLoader:
    """
    Reads the product and transaction collections from the record store.

    The loader is the only writer of the current snapshot. Every load
    replaces the snapshot wholesale; nothing is merged. Reads never fail:
    a missing or corrupt collection becomes an empty one, and records that
    do not validate are dropped.

    On an external change notification only the products collection is
    re-read. Transactions are read by ``load()`` alone.
    """

    def __init__(
        self,
        store: RecordStore,
        dispatcher: EventDispatcher = None,
        settings: Settings = None,
    ):
        self.store = store
        self.dispatcher = dispatcher or EventDispatcher()
        self.settings = settings or get_settings()
        self._snapshot = InventorySnapshot()
        self._subscription: Optional[Subscription] = None
        self._on_external_change: Optional[SnapshotCallback] = None

    @property
    def snapshot(self) -> InventorySnapshot:
        return self._snapshot

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def load(self) -> InventorySnapshot:
        """
        Read both collections and publish a fresh snapshot.

        Returns:
            The new snapshot
        """
        products = self._read_products()
        transactions = self._read_collection(self.settings.TRANSACTIONS_KEY, Transaction)
        self._snapshot = InventorySnapshot(
            products=products,
            transactions=transactions,
            version=self._snapshot.version + 1,
        )
        logger.info(
            f"Loaded snapshot v{self._snapshot.version}: "
            f"{len(products)} products, {len(transactions)} transactions"
        )
        return self._snapshot

    def reload_products(self) -> InventorySnapshot:
        """Re-read products only and publish a snapshot keeping the current transactions."""
        products = self._read_products()
        self._snapshot = replace(
            self._snapshot,
            products=products,
            version=self._snapshot.version + 1,
        )
        logger.info(f"Reloaded products for snapshot v{self._snapshot.version}: {len(products)} products")
        return self._snapshot

    def subscribe(self, on_external_change: SnapshotCallback = None) -> Subscription:
        """
        Reload products whenever the store reports a change.

        Args:
            on_external_change: Called with the new snapshot after each reload

        Returns:
            Subscription handle; ``close()`` on the loader also closes it
        """
        if self.subscribed:
            logger.warning("Loader already subscribed, replacing previous subscription")
        if self._subscription is not None:
            self._subscription.close()
        self._on_external_change = on_external_change
        self._subscription = self.store.subscribe(self._handle_change)
        return self._subscription

    def close(self) -> None:
        """Deregister from store change notifications."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        self._on_external_change = None

    def _handle_change(self) -> None:
        if not self.subscribed:
            return
        self.dispatcher.dispatch(self._refresh_and_publish)

    def _refresh_and_publish(self) -> None:
        snapshot = self.reload_products()
        if self._on_external_change is not None:
            self._on_external_change(snapshot)

    def _read_products(self) -> tuple[Product, ...]:
        products = self._read_collection(self.settings.PRODUCTS_KEY, Product)
        return tuple(self._with_image(p) for p in products)

    def _with_image(self, product: Product) -> Product:
        if product.image_url:
            return product
        return product.model_copy(update={"image_url": self.settings.PLACEHOLDER_IMAGE_URL})

    def _read_collection(self, key: str, model: Type[RecordT]) -> tuple[RecordT, ...]:
        raw = self.store.get(key)
        if raw is None:
            logger.warning(f"Collection '{key}' is missing or unreadable, using empty collection")
            return ()
        if not isinstance(raw, list):
            logger.warning(f"Collection '{key}' is not a list ({type(raw).__name__}), using empty collection")
            return ()

        records = []
        for position, item in enumerate(raw):
            if not isinstance(item, dict):
                logger.warning(f"Skipping {key}[{position}]: expected an object, got {type(item).__name__}")
                continue
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid record {key}[{position}]: {e.error_count()} error(s)")
        return tuple(records)
