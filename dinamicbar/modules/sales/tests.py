"""
Tests para el módulo de Ventas

- Cobro completo: caja abierta, efectivo suficiente, stock suficiente
- Transacción única: cualquier error deja todo sin cambios
- Anulación con contraseña de administrador
- Consultas y reporte por rango de fechas
"""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from dinamicbar.conftest import ADMIN_PASSWORD
from dinamicbar.modules.cash_register.models import CashTransaction, TransactionType
from dinamicbar.modules.sales.models import Sale


@pytest.fixture
def tab(client, beer, soda):
    tab = client.post("/api/tabs", json={"name": "Cuenta 1"}).json()
    client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
    return client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(soda.id), "quantity": 2}).json()


def pay(client, tab, method="CARD", cash_received=None):
    payload = {"tab_id": tab["id"], "payment_method": method}
    if cash_received is not None:
        payload["cash_received"] = cash_received
    return client.post("/api/sales", json=payload)


def cancel(client, sale_id, headers=None, reason="Error de digitación"):
    return client.request("DELETE", f"/api/sales/{sale_id}", json={"reason": reason}, headers=headers or {})


class TestProcessSale:

    def test_card_sale(self, client, db_session, tab, beer, soda, open_register):
        response = pay(client, tab)
        assert response.status_code == 201
        sale = response.json()
        assert sale["status"] == "COMPLETED"
        assert sale["payment_method"] == "CARD"
        assert Decimal(sale["total"]) == Decimal("12000")
        assert sale["cash_received"] is None
        assert sale["change"] is None
        assert sale["cash_register_id"] == str(open_register.id)
        assert {i["product_name"]: i["quantity"] for i in sale["items"]} == {"Cerveza Águila": 2, "Gaseosa": 2}

        db_session.refresh(beer)
        db_session.refresh(soda)
        assert (beer.stock, soda.stock) == (22, 8)

        transaction = db_session.query(CashTransaction).filter(CashTransaction.type == TransactionType.SALE).one()
        assert transaction.amount == Decimal("12000.00")
        assert str(transaction.sale_id) == sale["id"]

    def test_cash_sale_returns_change(self, client, tab, open_register):
        response = pay(client, tab, "CASH", "20000")
        assert response.status_code == 201
        assert Decimal(response.json()["change"]) == Decimal("8000")

    def test_insufficient_cash(self, client, db_session, tab, beer, open_register):
        response = pay(client, tab, "CASH", "1000")
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Efectivo insuficiente")

        response = pay(client, tab, "CASH")
        assert response.status_code == 400

        db_session.refresh(beer)
        assert beer.stock == 24
        assert db_session.query(Sale).count() == 0

    def test_requires_open_register(self, client, tab):
        response = pay(client, tab)
        assert response.status_code == 409
        assert response.json()["detail"] == "No hay una caja abierta. Abra la caja antes de registrar pagos."

    def test_insufficient_stock_changes_nothing(self, client, db_session, tab, beer, soda, open_register):
        client.patch(f"/api/inventory/products/{soda.id}", json={"action": "set", "quantity": 1})

        response = pay(client, tab)
        assert response.status_code == 409

        db_session.refresh(beer)
        assert beer.stock == 24
        assert client.get(f"/api/tabs/{tab['id']}").json()["is_active"] is True
        assert db_session.query(Sale).count() == 0

    def test_empty_tab(self, client, open_register):
        tab = client.post("/api/tabs", json={"name": "Vacía"}).json()
        response = pay(client, tab)
        assert response.status_code == 400
        assert response.json()["detail"] == "La cuenta no tiene productos"

    def test_closed_tab_cannot_be_paid_twice(self, client, tab, open_register):
        assert pay(client, tab).status_code == 201
        assert pay(client, tab).status_code == 409

    def test_unknown_tab(self, client, open_register):
        response = pay(client, {"id": str(uuid4())})
        assert response.status_code == 404


class TestCancelSale:

    def test_cancel_restores_stock_and_tab(self, client, db_session, tab, beer, open_register, admin_headers):
        sale = pay(client, tab, "CASH", "12000").json()

        response = cancel(client, sale["id"], admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "CANCELLED"
        assert data["cancel_reason"] == "Error de digitación"

        db_session.refresh(beer)
        assert beer.stock == 24

        restored = client.get(f"/api/tabs/{tab['id']}").json()
        assert restored["is_active"] is True
        assert Decimal(restored["total"]) == Decimal("12000")

        summary = client.get(f"/api/cash-register/{open_register.id}/summary").json()
        assert Decimal(summary["total_sales"]) == Decimal("0")
        assert Decimal(summary["total_refunds"]) == Decimal("12000")
        assert Decimal(summary["expected_cash"]) == Decimal("100000")

    def test_cancel_requires_admin_password(self, client, tab, open_register, admin_user, cashier_headers):
        sale = pay(client, tab).json()

        assert cancel(client, sale["id"], cashier_headers).status_code == 401

        headers = {**cashier_headers, "X-Admin-Password": ADMIN_PASSWORD}
        assert cancel(client, sale["id"], headers).status_code == 200

    def test_cancel_twice(self, client, tab, open_register, admin_headers):
        sale = pay(client, tab).json()
        assert cancel(client, sale["id"], admin_headers).status_code == 200
        assert cancel(client, sale["id"], admin_headers).status_code == 409

    def test_cancel_after_register_closed(self, client, tab, open_register, admin_headers):
        sale = pay(client, tab).json()
        client.put("/api/cash-register", json={"closing_amount": "100000"})

        response = cancel(client, sale["id"], admin_headers)
        assert response.status_code == 409

    def test_cancel_requires_reason(self, client, tab, open_register, admin_headers):
        sale = pay(client, tab).json()
        response = client.request("DELETE", f"/api/sales/{sale['id']}", json={}, headers=admin_headers)
        assert response.status_code == 422

    def test_cancel_unknown_sale(self, client, admin_headers):
        assert cancel(client, uuid4(), admin_headers).status_code == 404

    def test_cancel_returns_items_to_reopened_table_tab(self, client, beer, soda, open_register, admin_headers):
        table = client.post("/api/tables", json={"name": "Mesa 1"}).json()
        first = client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(beer.id), "quantity": 2}).json()
        sale = pay(client, first).json()

        # La mesa vuelve a abrir una cuenta nueva antes de la anulación
        second = client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(soda.id), "quantity": 1}).json()
        assert second["id"] != first["id"]

        assert cancel(client, sale["id"], admin_headers).status_code == 200

        current = client.get(f"/api/tabs/{second['id']}").json()
        quantities = {item["product"]["name"]: item["quantity"] for item in current["items"]}
        assert quantities == {"Cerveza Águila": 2, "Gaseosa": 1}
        assert Decimal(current["total"]) == Decimal("9500")

        assert client.get(f"/api/tabs/{first['id']}").json()["is_active"] is False


class TestSalesQueries:

    def test_list_and_get_sales(self, client, tab, open_register):
        sale = pay(client, tab).json()

        response = client.get("/api/sales")
        assert response.status_code == 200
        assert [s["id"] for s in response.json()["sales"]] == [sale["id"]]

        assert client.get("/api/sales", params={"today": True}).json()["total"] == 1
        assert client.get("/api/sales", params={"end_date": "2000-01-01"}).json()["total"] == 0

        response = client.get(f"/api/sales/{sale['id']}")
        assert response.status_code == 200
        assert len(response.json()["items"]) == 2

    def test_get_sale_not_found(self, client):
        response = client.get(f"/api/sales/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Venta no encontrada"

    def test_sales_report(self, client, tab, beer, open_register, admin_headers):
        pay(client, tab, "CASH", "12000")

        other = client.post("/api/tabs", json={"name": "Cuenta 2"}).json()
        client.post(f"/api/tabs/{other['id']}/items", json={"product_id": str(beer.id), "quantity": 3})
        cancelled = pay(client, other, "TRANSFER").json()
        cancel(client, cancelled["id"], admin_headers)

        today = date.today()
        response = client.get("/api/sales/reports", params={
            "start_date": (today - timedelta(days=1)).isoformat(),
            "end_date": (today + timedelta(days=1)).isoformat()
        })
        assert response.status_code == 200
        report = response.json()
        assert report["total_sales"] == 1
        assert Decimal(report["total_revenue"]) == Decimal("12000")
        assert report["sales_by_payment_method"] == {"cash": 1, "card": 0, "transfer": 0}
        assert len(report["sales_by_hour"]) == 24
        assert sum(h["count"] for h in report["sales_by_hour"]) == 1
        assert {p["product_name"] for p in report["top_products"]} == {"Cerveza Águila", "Gaseosa"}

    def test_report_invalid_range(self, client):
        response = client.get("/api/sales/reports", params={"start_date": "2024-02-01", "end_date": "2024-01-01"})
        assert response.status_code == 400

    def test_report_requires_dates(self, client):
        assert client.get("/api/sales/reports").status_code == 422
