import pytest
from fastapi.testclient import TestClient

from stock_dashboard.main import app
from stock_dashboard.utils.store import InMemoryRecordStore


def make_product(index: int, quantity: int = 10, price: float = 1.0, **extra) -> dict:
    """Raw product record shaped the way the record store holds it."""
    record = {
        "id": index,
        "name": f"Product {index}",
        "quantity": quantity,
        "price": price,
        "imageUrl": f"https://img.example.com/{index}.png",
    }
    record.update(extra)
    return record


def make_transaction(name: str, quantity: int = 1, action: str = "add", date: str = "2024-05-01 10:00") -> dict:
    return {
        "productName": name,
        "quantityChanged": quantity,
        "action": action,
        "date": date,
    }


@pytest.fixture(scope="function")
def store():
    """Fresh in-memory record store for each test."""
    return InMemoryRecordStore()


@pytest.fixture(scope="function")
def five_products():
    return [make_product(i, quantity=q) for i, q in enumerate([0, 4, 5, 19, 20])]


@pytest.fixture(scope="function")
def start_client(store):
    """
    Seed the store, then start the application against it.

    Writes made after startup reach the dashboard through the store's
    change notifications, just like writes from another agent.
    """
    clients = []

    def _start(products=None, transactions=None) -> TestClient:
        if products is not None:
            store.set("products", products)
        if transactions is not None:
            store.set("transactions", transactions)
        app.state.store = store
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _start

    for test_client in clients:
        test_client.__exit__(None, None, None)
    if hasattr(app.state, "store"):
        del app.state.store


@pytest.fixture(scope="function")
def client(start_client):
    """Test client over an empty store."""
    return start_client()
