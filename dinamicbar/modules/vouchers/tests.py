"""
Tests para comprobantes de ingreso y egreso
"""

from decimal import Decimal
from uuid import uuid4

import pytest


@pytest.fixture
def vouchers(client):
    income = client.post("/api/vouchers", json={
        "type": "INCOME", "amount": "50000", "description": "Alquiler del salón",
        "date": "2024-03-01T20:00:00"
    }).json()
    expense = client.post("/api/vouchers", json={
        "type": "EXPENSE", "amount": "120000", "description": "Pago de luz", "category": "Servicios",
        "date": "2024-03-05T10:00:00"
    }).json()
    return income, expense


class TestVouchers:

    def test_create_voucher(self, client):
        response = client.post("/api/vouchers", json={"type": "EXPENSE", "amount": "30000", "description": "Gas"})
        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "EXPENSE"
        assert Decimal(data["amount"]) == Decimal("30000")
        assert data["date"] is not None

    def test_amount_must_be_positive(self, client):
        response = client.post("/api/vouchers", json={"type": "INCOME", "amount": "0", "description": "X"})
        assert response.status_code == 422

    def test_list_newest_first_and_filter(self, client, vouchers):
        income, expense = vouchers

        data = client.get("/api/vouchers").json()
        assert [v["id"] for v in data["vouchers"]] == [expense["id"], income["id"]]

        data = client.get("/api/vouchers", params={"type": "income"}).json()
        assert [v["id"] for v in data["vouchers"]] == [income["id"]]

        data = client.get("/api/vouchers", params={"type": "EXPENSE"}).json()
        assert [v["id"] for v in data["vouchers"]] == [expense["id"]]

        assert client.get("/api/vouchers", params={"type": "otro"}).status_code == 422

    def test_update_voucher(self, client, vouchers):
        _, expense = vouchers
        response = client.put(f"/api/vouchers/{expense['id']}", json={"amount": "125000"})
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("125000")
        assert response.json()["category"] == "Servicios"

    def test_delete_voucher(self, client, vouchers):
        income, _ = vouchers
        assert client.delete(f"/api/vouchers/{income['id']}").status_code == 200
        response = client.get(f"/api/vouchers/{income['id']}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Comprobante no encontrado"

    def test_voucher_not_found(self, client):
        assert client.put(f"/api/vouchers/{uuid4()}", json={"amount": "1"}).status_code == 404
