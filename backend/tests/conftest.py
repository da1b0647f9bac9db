import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from main import app
from schemas import LineItem, SummaryCharge, SummaryKind
from store import ReceiptStore, get_store
from utils.assignments import AssignmentTable


@pytest.fixture
def items():
    """Two coffees at 2.50 and one sandwich at 5.00 (subtotal 10.00)."""
    return [
        LineItem(quantity=2, label="Coffee", unit_price=Decimal("2.50")),
        LineItem(quantity=1, label="Sandwich", unit_price=Decimal("5.00")),
    ]


@pytest.fixture
def summary():
    return [
        SummaryCharge(kind=SummaryKind.TAX, amount=Decimal("0.75")),
        SummaryCharge(kind=SummaryKind.TIP, amount=Decimal("1.00")),
    ]


@pytest.fixture
def table(items):
    return AssignmentTable(items)


@pytest.fixture(scope="function")
def store():
    """A fresh, empty round registry for each test."""
    return ReceiptStore()


@pytest.fixture(scope="function")
def client(store):
    """Create a FastAPI TestClient with the round registry overridden."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def receipt_payload():
    return {
        "rows": [
            {"qty": "2", "name": "Coffee", "price": "2.50"},
            {"qty": "1", "name": "Sandwich", "price": "$5.00"},
            {"qty": "1", "name": "Tax", "price": "0.75"},
            {"qty": "1", "name": "Tip", "price": "1.00"},
            {"qty": "1", "name": "Total", "price": "11.75"},
        ],
        "contributors": "Alice, Bob",
    }


@pytest.fixture
def round_id(client, receipt_payload):
    response = client.post("/receipts", json=receipt_payload)
    assert response.status_code == 201
    return response.json()["id"]
