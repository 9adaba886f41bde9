import json
import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, Callable, Optional

import redis

from stock_dashboard.config import Settings, get_settings

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]


class Subscription:
    """Handle returned by ``RecordStore.subscribe``; ``close()`` deregisters it."""

    def __init__(self, on_close: Callable[[], None]):
        self._on_close = on_close
        self._closed = False

    @classmethod
    def inactive(cls) -> "Subscription":
        """A handle for a subscription that could not be established."""
        subscription = cls(lambda: None)
        subscription._closed = True
        return subscription

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._on_close()


class RecordStore(ABC):
    """
    Key-value store holding the raw product and transaction collections.

    Implementations must:
    - Return the decoded collection from ``get`` or None when it is absent
      or cannot be decoded
    - Notify subscribers after every write
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        pass

    @abstractmethod
    def subscribe(self, callback: ChangeCallback) -> Subscription:
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass


class RedisRecordStore(RecordStore):
    """
    Redis-backed record store.

    Collections are stored as JSON strings under namespaced keys. Every
    write publishes the written key on a change channel, and subscribers
    are driven from a redis-py pub/sub worker thread.
    """

    def __init__(
        self,
        client: redis.Redis = None,
        prefix: str = None,
        channel: str = None,
    ):
        settings = get_settings()
        self.client = client or redis.from_url(settings.REDIS_URL, decode_responses=True)
        self.prefix = prefix or settings.STORE_KEY_PREFIX
        self.channel = channel or settings.STORE_CHANGE_CHANNEL

    def _make_key(self, key: str) -> str:
        """Create a namespaced store key."""
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get a decoded collection from Redis.

        Args:
            key: Collection name (e.g., 'products')

        Returns:
            Decoded value or None if absent, corrupt or unreachable
        """
        store_key = self._make_key(key)
        try:
            value = self.client.get(store_key)
        except redis.RedisError as e:
            logger.warning(f"Could not read '{store_key}' from Redis: {e}")
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Stored value under '{store_key}' is not valid JSON")
            return None

    def set(self, key: str, value: Any) -> bool:
        """
        Write a collection and publish a change notification.

        Args:
            key: Collection name
            value: Value to store (will be JSON serialized)

        Returns:
            True if successful, False otherwise
        """
        store_key = self._make_key(key)
        try:
            serialized = json.dumps(value, default=str)
            self.client.set(store_key, serialized)
            self.client.publish(self.channel, key)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Could not write '{store_key}' to Redis: {e}")
            return False

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        """
        Invoke ``callback`` for every message on the change channel.

        The callback runs on the pub/sub worker thread; callers are
        responsible for serializing it with the rest of their state.
        """
        pubsub = self.client.pubsub(ignore_subscribe_messages=True)

        def handler(message: dict) -> None:
            logger.debug(f"Store change on {self.channel}: {message.get('data')}")
            callback()

        try:
            pubsub.subscribe(**{self.channel: handler})
            worker = pubsub.run_in_thread(sleep_time=0.1, daemon=True)
        except redis.RedisError as e:
            logger.warning(f"Could not subscribe to '{self.channel}': {e}")
            pubsub.close()
            return Subscription.inactive()

        def close() -> None:
            worker.stop()
            pubsub.close()

        return Subscription(close)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False


class InMemoryRecordStore(RecordStore):
    """
    In-process record store.

    Values are kept as JSON strings so reads go through the same decode
    path as Redis. Subscribers are called synchronously after each write.
    """

    def __init__(self):
        self._lock = RLock()
        self._data: dict[str, str] = {}
        self._listeners: list[ChangeCallback] = []

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._data.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Stored value under '{key}' is not valid JSON")
            return None

    def set(self, key: str, value: Any) -> bool:
        try:
            serialized = json.dumps(value, default=str)
        except TypeError:
            return False
        self.set_raw(key, serialized)
        return True

    def set_raw(self, key: str, raw: str) -> None:
        """Store an already-serialized payload as-is and notify subscribers."""
        with self._lock:
            self._data[key] = raw
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        with self._lock:
            self._listeners.append(callback)

        def close() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return Subscription(close)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def ping(self) -> bool:
        return True


def build_store(settings: Settings = None) -> RecordStore:
    """Create the record store selected by ``STORE_BACKEND``."""
    settings = settings or get_settings()
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "redis":
        return RedisRecordStore(
            client=redis.from_url(settings.REDIS_URL, decode_responses=True),
            prefix=settings.STORE_KEY_PREFIX,
            channel=settings.STORE_CHANGE_CHANNEL,
        )
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
