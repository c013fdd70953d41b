"""
Tests para el módulo de Caja

- Apertura única y cierre con arqueo
- Ingresos y gastos manuales
- Resumen calculado desde las transacciones
- Historial de sesiones
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from dinamicbar.modules.cash_register.models import CashRegister


class TestOpenClose:

    def test_no_open_register(self, client):
        response = client.get("/api/cash-register")
        assert response.status_code == 200
        assert response.json() == {"cash_register": None}

    def test_open_register(self, client):
        response = client.post("/api/cash-register", json={"opening_amount": "50000", "opened_by": "cajero"})
        assert response.status_code == 201
        data = response.json()
        assert data["is_open"] is True
        assert Decimal(data["opening_amount"]) == Decimal("50000")
        assert [t["type"] for t in data["transactions"]] == ["OPENING"]

        current = client.get("/api/cash-register").json()["cash_register"]
        assert current["id"] == data["id"]

    def test_only_one_open_register(self, client, open_register):
        response = client.post("/api/cash-register", json={"opening_amount": "0"})
        assert response.status_code == 409
        assert response.json()["detail"] == "Ya existe una caja abierta"

    def test_database_rejects_second_open_register(self, db_session, open_register):
        db_session.add(CashRegister(is_open=True, opening_amount=Decimal("0")))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        # Las cajas cerradas no cuentan
        db_session.add(CashRegister(is_open=False, opening_amount=Decimal("0")))
        db_session.commit()

    def test_negative_opening_amount(self, client):
        response = client.post("/api/cash-register", json={"opening_amount": "-1"})
        assert response.status_code == 422

    def test_close_register_with_difference(self, client, open_register):
        client.post("/api/cash-register/transactions", json={"type": "INCOME", "amount": "20000", "description": "Propinas"})
        client.post("/api/cash-register/transactions", json={"type": "EXPENSE", "amount": "5000", "description": "Hielo"})

        response = client.put("/api/cash-register", json={"closing_amount": "110000", "closed_by": "cajero"})
        assert response.status_code == 200
        data = response.json()
        assert data["cash_register"]["is_open"] is False

        summary = data["summary"]
        assert summary["total_transactions"] == 2
        assert Decimal(summary["total_income"]) == Decimal("20000")
        assert Decimal(summary["total_expenses"]) == Decimal("5000")
        assert Decimal(summary["expected_cash"]) == Decimal("115000")
        assert Decimal(summary["difference"]) == Decimal("-5000")

        assert client.get("/api/cash-register").json()["cash_register"] is None

    def test_close_without_open_register(self, client):
        response = client.put("/api/cash-register", json={"closing_amount": "0"})
        assert response.status_code == 409


class TestTransactions:

    def test_transactions_require_open_register(self, client):
        response = client.get("/api/cash-register/transactions")
        assert response.status_code == 404

        response = client.post(
            "/api/cash-register/transactions",
            json={"type": "INCOME", "amount": "1000", "description": "Sin caja"}
        )
        assert response.status_code == 409

    def test_manual_transaction_types_only(self, client, open_register):
        response = client.post(
            "/api/cash-register/transactions",
            json={"type": "SALE", "amount": "1000", "description": "No permitido"}
        )
        assert response.status_code == 422

        response = client.post(
            "/api/cash-register/transactions",
            json={"type": "EXPENSE", "amount": "0", "description": "Cero"}
        )
        assert response.status_code == 422

    def test_list_transactions_newest_first(self, client, open_register):
        client.post("/api/cash-register/transactions", json={"type": "EXPENSE", "amount": "3000", "description": "Limones"})

        response = client.get("/api/cash-register/transactions")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {t["type"] for t in data["transactions"]} == {"OPENING", "EXPENSE"}


class TestSummaryAndHistory:

    def test_summary_of_register(self, client, open_register):
        response = client.get(f"/api/cash-register/{open_register.id}/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["is_open"] is True
        assert data["total_transactions"] == 0
        assert Decimal(data["expected_cash"]) == Decimal("100000")
        assert Decimal(data["difference"]) == Decimal("0")

    def test_summary_not_found(self, client):
        response = client.get(f"/api/cash-register/{uuid4()}/summary")
        assert response.status_code == 404

    def test_history_newest_first(self, client):
        for amount in ("1000", "2000", "3000"):
            client.post("/api/cash-register", json={"opening_amount": amount})
            client.put("/api/cash-register", json={"closing_amount": amount})

        response = client.get("/api/cash-register/history", params={"limit": 2})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [Decimal(r["opening_amount"]) for r in data["cash_registers"]] == [Decimal("3000"), Decimal("2000")]
