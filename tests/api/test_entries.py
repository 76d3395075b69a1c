"""
Tests for the entry API endpoints.

Tests cover:
- Creating income and expense entries
- Balance protection on create and update
- Listing, summary, fetch, update and delete
- Validation errors and ownership isolation between users
"""

import pytest


# --- Helpers ---

def create_entry(client, headers, kind, amount, description="Salary"):
    return client.post("/api/entries", headers=headers, json={
        "kind": kind,
        "amount": amount,
        "description": description,
    })


# --- Create Tests ---

class TestCreateEntry:

    def test_create_income_returns_201(self, client, auth_headers):
        response = create_entry(client, auth_headers, "entrada", 1000)

        assert response.status_code == 201
        data = response.json()
        assert data["entry"]["kind"] == "entrada"
        assert data["entry"]["amount"] == 1000.0
        assert data["entry"]["description"] == "Salary"
        assert data["current_balance"] == 1000.0

    def test_kind_is_case_insensitive(self, client, auth_headers):
        response = create_entry(client, auth_headers, " Entrada ", 10)

        assert response.status_code == 201
        assert response.json()["entry"]["kind"] == "entrada"

    def test_description_is_trimmed(self, client, auth_headers):
        response = create_entry(client, auth_headers, "entrada", 10, "  Salary  ")
        assert response.json()["entry"]["description"] == "Salary"

    def test_expense_over_balance_returns_400(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 100)

        response = create_entry(client, auth_headers, "saida", 150, "Rent")

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INSUFFICIENT_BALANCE"
        assert detail["attempted_amount"] == "150.00"
        assert detail["current_balance"] == "100.00"
        assert detail["shortfall"] == "50.00"
        assert "Missing: 50.00" in detail["message"]

    def test_rejected_expense_is_not_stored(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 100)
        create_entry(client, auth_headers, "saida", 150, "Rent")

        summary = client.get("/api/entries", headers=auth_headers).json()["summary"]
        assert summary["entry_count"] == 1
        assert summary["balance"] == 100.0

    @pytest.mark.parametrize("body", [
        {"kind": "transfer", "amount": 10, "description": "Salary"},
        {"kind": "entrada", "amount": 0, "description": "Salary"},
        {"kind": "entrada", "amount": -5, "description": "Salary"},
        {"kind": "entrada", "amount": 10.001, "description": "Salary"},
        {"kind": "entrada", "amount": 10, "description": " ab "},
        {"kind": "entrada", "amount": 10, "description": "x" * 256},
        {"kind": "entrada", "amount": 10},
    ])
    def test_invalid_body_returns_422(self, client, auth_headers, body):
        response = client.post("/api/entries", headers=auth_headers, json=body)
        assert response.status_code == 422


# --- Read Tests ---

class TestReadEntries:

    def test_list_entries_with_summary(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 1000)
        create_entry(client, auth_headers, "saida", 250.5, "Groceries")

        response = client.get("/api/entries", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [e["description"] for e in data["entries"]] == ["Salary", "Groceries"]
        assert data["summary"] == {
            "total_income": 1000.0,
            "total_expense": 250.5,
            "balance": 749.5,
            "entry_count": 2,
        }

    def test_get_entry(self, client, auth_headers):
        created = create_entry(client, auth_headers, "entrada", 42.5).json()["entry"]

        response = client.get(f"/api/entries/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["entry"] == created

    def test_get_missing_entry_returns_404(self, client, auth_headers):
        response = client.get("/api/entries/999", headers=auth_headers)
        assert response.status_code == 404

    def test_non_positive_id_returns_422(self, client, auth_headers):
        response = client.get("/api/entries/0", headers=auth_headers)
        assert response.status_code == 422

    def test_summary_has_recent_entries_newest_first(self, client, auth_headers):
        ids = [
            create_entry(client, auth_headers, "entrada", 10, f"Income {i}")
            .json()["entry"]["id"]
            for i in range(6)
        ]

        response = client.get("/api/entries/summary", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["balance"] == 60.0
        assert data["total_income"] == 60.0
        assert data["total_expense"] == 0.0
        assert data["entry_count"] == 6
        assert [e["id"] for e in data["recent_entries"]] == list(reversed(ids))[:5]


# --- Update Tests ---

class TestUpdateEntry:

    def test_update_amount(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 1000)
        rent = create_entry(client, auth_headers, "saida", 400, "Rent").json()["entry"]

        response = client.put(
            f"/api/entries/{rent['id']}", headers=auth_headers, json={"amount": 200}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["entry"]["amount"] == 200.0
        assert data["entry"]["description"] == "Rent"
        assert data["current_balance"] == 800.0

    def test_update_over_balance_returns_400(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 200)
        food = create_entry(client, auth_headers, "saida", 50, "Food").json()["entry"]

        response = client.put(
            f"/api/entries/{food['id']}", headers=auth_headers, json={"amount": 300}
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "INSUFFICIENT_BALANCE"
        assert detail["current_balance"] == "200.00"
        assert detail["shortfall"] == "100.00"

        unchanged = client.get(f"/api/entries/{food['id']}", headers=auth_headers)
        assert unchanged.json()["entry"]["amount"] == 50.0

    def test_income_to_expense_uncovered_returns_400(self, client, auth_headers):
        salary = create_entry(client, auth_headers, "entrada", 50).json()["entry"]

        response = client.put(
            f"/api/entries/{salary['id']}", headers=auth_headers,
            json={"kind": "saida"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INSUFFICIENT_BALANCE"

    def test_empty_update_returns_422(self, client, auth_headers):
        entry = create_entry(client, auth_headers, "entrada", 10).json()["entry"]

        response = client.put(
            f"/api/entries/{entry['id']}", headers=auth_headers, json={}
        )
        assert response.status_code == 422

    def test_update_missing_entry_returns_404(self, client, auth_headers):
        response = client.put(
            "/api/entries/999", headers=auth_headers, json={"amount": 5}
        )
        assert response.status_code == 404


# --- Delete Tests ---

class TestDeleteEntry:

    def test_delete_entry(self, client, auth_headers):
        create_entry(client, auth_headers, "entrada", 1000)
        rent = create_entry(client, auth_headers, "saida", 400, "Rent").json()["entry"]

        response = client.delete(f"/api/entries/{rent['id']}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["deleted_entry"]["id"] == rent["id"]
        assert data["current_balance"] == 1000.0

        missing = client.get(f"/api/entries/{rent['id']}", headers=auth_headers)
        assert missing.status_code == 404

    def test_delete_can_leave_negative_balance(self, client, auth_headers):
        salary = create_entry(client, auth_headers, "entrada", 100).json()["entry"]
        create_entry(client, auth_headers, "saida", 80, "Food")

        response = client.delete(f"/api/entries/{salary['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["current_balance"] == -80.0


# --- Ownership Tests ---

class TestOwnership:

    def test_users_cannot_see_each_others_entries(self, client, register_and_login):
        alice = register_and_login("alice")
        bob = register_and_login("bobby")
        entry = create_entry(client, alice, "entrada", 100).json()["entry"]

        assert client.get(f"/api/entries/{entry['id']}", headers=bob).status_code == 404
        assert client.put(
            f"/api/entries/{entry['id']}", headers=bob, json={"amount": 1}
        ).status_code == 404
        assert client.delete(f"/api/entries/{entry['id']}", headers=bob).status_code == 404
        assert client.get("/api/entries", headers=bob).json()["entries"] == []

        still_there = client.get(f"/api/entries/{entry['id']}", headers=alice)
        assert still_there.json()["entry"]["amount"] == 100.0

    def test_balances_are_per_user(self, client, register_and_login):
        alice = register_and_login("alice")
        bob = register_and_login("bobby")
        create_entry(client, alice, "entrada", 100)

        response = create_entry(client, bob, "saida", 10, "Coffee")

        assert response.status_code == 400
        assert response.json()["detail"]["current_balance"] == "0.00"


# --- Amount Bound Tests ---

class TestAmountBounds:

    @pytest.mark.parametrize("amount", [1e26, 12345678901234567.89, 10000000000])
    def test_create_over_column_limit_returns_422(self, client, auth_headers, amount):
        response = create_entry(client, auth_headers, "entrada", amount, "Lottery")

        assert response.status_code == 422
        listing = client.get("/api/entries", headers=auth_headers).json()
        assert listing["entries"] == []

    def test_update_over_column_limit_returns_422(self, client, auth_headers):
        entry = create_entry(client, auth_headers, "entrada", 10).json()["entry"]

        response = client.put(
            f"/api/entries/{entry['id']}", headers=auth_headers, json={"amount": 1e26}
        )

        assert response.status_code == 422

    def test_column_maximum_round_trips(self, client, auth_headers):
        created = create_entry(
            client, auth_headers, "entrada", 9999999999.99, "Jackpot"
        ).json()

        fetched = client.get(
            f"/api/entries/{created['entry']['id']}", headers=auth_headers
        ).json()["entry"]

        assert created["entry"]["amount"] == 9999999999.99
        assert fetched["amount"] == created["entry"]["amount"]
        assert created["current_balance"] == 9999999999.99
