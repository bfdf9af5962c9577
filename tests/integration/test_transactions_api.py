"""Integration tests for /api/transactions"""

import pytest
from datetime import date
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


@pytest.fixture
def wallet(wallet_factory):
    return wallet_factory()


@pytest.fixture
def groceries(category_factory):
    return category_factory(name="Groceries")


def payload(wallet, category, **overrides) -> dict:
    body = {
        "wallet_id": wallet.id,
        "type": "outcome",
        "amount": 42.5,
        "description": "Weekly shop",
        "category_id": category.id if category else None,
        "date": "2024-03-01",
    }
    body.update(overrides)
    return body


def test_create_transaction(client: TestClient, wallet, groceries):
    response = client.post("/api/transactions", json=payload(wallet, groceries))

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["wallet_id"] == wallet.id
    assert data["amount"] == 42.5
    assert data["date"] == "2024-03-01"
    assert data["category_name"] == "Groceries"
    assert data["is_recurring"] is False
    assert data["recurrence_type"] is None


def test_create_recurring_transaction(client: TestClient, wallet, groceries):
    response = client.post(
        "/api/transactions",
        json=payload(wallet, groceries, is_recurring=True, recurrence_type="weekly", recurrence_end_date="2024-06-30"),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["is_recurring"] is True
    assert data["recurrence_type"] == "weekly"
    assert data["recurrence_end_date"] == "2024-06-30"


def test_recurrence_fields_cleared_on_one_off(client: TestClient, wallet, groceries):
    response = client.post(
        "/api/transactions",
        json=payload(wallet, groceries, recurrence_type="monthly", recurrence_end_date="2024-06-30"),
    )

    data = response.json()
    assert data["recurrence_type"] is None
    assert data["recurrence_end_date"] is None


def test_recurring_requires_frequency(client: TestClient, wallet, groceries):
    response = client.post("/api/transactions", json=payload(wallet, groceries, is_recurring=True))

    assert response.status_code == 400
    assert "recurrence_type" in response.json()["detail"]


def test_unknown_frequency_rejected(client: TestClient, wallet, groceries):
    response = client.post(
        "/api/transactions",
        json=payload(wallet, groceries, is_recurring=True, recurrence_type="hourly"),
    )
    assert response.status_code == 400


def test_category_required(client: TestClient, wallet):
    response = client.post("/api/transactions", json=payload(wallet, None))

    assert response.status_code == 400
    assert response.json()["detail"] == "category_id is required"


def test_inactive_category_rejected(client: TestClient, wallet, category_factory):
    retired = category_factory(name="Retired", is_active=False)

    response = client.post("/api/transactions", json=payload(wallet, retired))

    assert response.status_code == 400


def test_foreign_user_category_rejected(client: TestClient, wallet, category_factory):
    private = category_factory(name="Hobby", user_id=3, is_system=False)

    response = client.post("/api/transactions", json=payload(wallet, private))

    assert response.status_code == 400


def test_own_user_category_accepted(client: TestClient, wallet, category_factory):
    mine = category_factory(name="Hobby", user_id=1, is_system=False)

    response = client.post("/api/transactions", json=payload(wallet, mine))

    assert response.status_code == 201


@pytest.mark.parametrize("amount", [0, -5, 12.345])
def test_invalid_amount_rejected(client: TestClient, wallet, groceries, amount):
    response = client.post("/api/transactions", json=payload(wallet, groceries, amount=amount))
    assert response.status_code == 400


def test_reader_cannot_create(client: TestClient, wallet, groceries, share_factory):
    share_factory(wallet, user_id=2, permission="read")

    response = client.post("/api/transactions", json=payload(wallet, groceries), headers={"X-User-ID": "2"})

    assert response.status_code == 403


def test_writer_can_create(client: TestClient, wallet, groceries, share_factory):
    share_factory(wallet, user_id=2, permission="write")

    response = client.post("/api/transactions", json=payload(wallet, groceries), headers={"X-User-ID": "2"})

    assert response.status_code == 201


def test_list_transactions_newest_first(client: TestClient, wallet, transaction_factory):
    transaction_factory(wallet, "income", "10.00", date(2024, 1, 5))
    transaction_factory(wallet, "outcome", "20.00", date(2024, 3, 5))
    transaction_factory(wallet, "outcome", "30.00", date(2024, 2, 5))

    response = client.get("/api/transactions", params={"walletId": wallet.id})

    assert response.status_code == 200
    assert [t["date"] for t in response.json()] == ["2024-03-05", "2024-02-05", "2024-01-05"]


def test_list_transactions_window_needs_both_bounds(client: TestClient, wallet, transaction_factory):
    transaction_factory(wallet, "income", "10.00", date(2024, 1, 5))
    transaction_factory(wallet, "outcome", "20.00", date(2024, 3, 5))

    bounded = client.get(
        "/api/transactions",
        params={"walletId": wallet.id, "startDate": "2024-03-01", "endDate": "2024-03-31"},
    )
    half_open = client.get("/api/transactions", params={"walletId": wallet.id, "startDate": "2024-03-01"})

    assert [t["amount"] for t in bounded.json()] == [20.0]
    assert len(half_open.json()) == 2


def test_list_transactions_requires_wallet(client: TestClient):
    assert client.get("/api/transactions").status_code == 400


def test_get_transaction(client: TestClient, wallet, groceries, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1), category=groceries)

    response = client.get(f"/api/transactions/{txn.id}")

    assert response.status_code == 200
    assert response.json()["category_name"] == "Groceries"


def test_get_missing_transaction(client: TestClient):
    assert client.get("/api/transactions/999").status_code == 404


def test_stranger_cannot_read_transaction(client: TestClient, wallet, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1))

    response = client.get(f"/api/transactions/{txn.id}", headers={"X-User-ID": "3"})

    assert response.status_code == 403


def test_update_changes_only_sent_fields(client: TestClient, wallet, groceries, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1), description="Bread", category=groceries)

    response = client.patch(f"/api/transactions/{txn.id}", json={"amount": 15.25})

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 15.25
    assert data["description"] == "Bread"
    assert data["date"] == "2024-03-01"


def test_update_stopping_recurrence_clears_fields(client: TestClient, wallet, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "800.00", date(2024, 1, 1), "monthly", recurrence_end_date=date(2024, 12, 31))

    response = client.patch(f"/api/transactions/{txn.id}", json={"is_recurring": False})

    data = response.json()
    assert data["is_recurring"] is False
    assert data["recurrence_type"] is None
    assert data["recurrence_end_date"] is None


def test_update_ending_recurrence_limits_predictions(client: TestClient, wallet, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "800.00", date(2024, 1, 1), "monthly")
    client.patch(f"/api/transactions/{txn.id}", json={"recurrence_end_date": "2024-02-15"})

    response = client.get(
        "/api/predictions",
        params={"walletId": wallet.id, "startDate": "2024-01-01", "endDate": "2024-06-30"},
    )

    assert [p["date"] for p in response.json()] == ["2024-02-01"]


def test_update_making_recurring_requires_frequency(client: TestClient, wallet, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1))

    response = client.patch(f"/api/transactions/{txn.id}", json={"is_recurring": True})

    assert response.status_code == 400


@pytest.mark.parametrize("field", ["type", "amount", "date", "category_id"])
def test_update_rejects_clearing_required_field(client: TestClient, wallet, groceries, transaction_factory, field):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1), category=groceries)

    response = client.patch(f"/api/transactions/{txn.id}", json={field: None})

    assert response.status_code == 400


def test_delete_transaction(client: TestClient, wallet, transaction_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1))
    txn_id = txn.id

    response = client.delete(f"/api/transactions/{txn_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Transaction deleted", "id": txn_id}
    assert client.get(f"/api/transactions/{txn_id}").status_code == 404


def test_reader_cannot_delete(client: TestClient, wallet, transaction_factory, share_factory):
    txn = transaction_factory(wallet, "outcome", "12.00", date(2024, 3, 1))
    share_factory(wallet, user_id=2, permission="read")

    response = client.delete(f"/api/transactions/{txn.id}", headers={"X-User-ID": "2"})

    assert response.status_code == 403
