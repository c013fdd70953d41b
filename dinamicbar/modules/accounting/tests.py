"""
Tests para el resumen contable (ingresos contra egresos)
"""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest


@pytest.fixture
def activity(client, beer, supplier, open_register):
    """Una venta, una compra, comprobantes y movimientos de caja de hoy"""
    tab = client.post("/api/tabs", json={"name": "Cuenta"}).json()
    client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 4})
    client.post("/api/sales", json={"tab_id": tab["id"], "payment_method": "CARD"})

    client.post("/api/purchases", json={
        "supplier_id": str(supplier.id),
        "items": [{"product_id": str(beer.id), "quantity": 10, "purchase_price": "2000", "sale_price": "3500"}]
    })

    client.post("/api/vouchers", json={"type": "INCOME", "amount": "5000", "description": "Evento"})
    client.post("/api/vouchers", json={"type": "EXPENSE", "amount": "8000", "description": "Aseo"})
    client.post("/api/cash-register/transactions", json={"type": "INCOME", "amount": "1000", "description": "Propina"})
    client.post("/api/cash-register/transactions", json={"type": "EXPENSE", "amount": "3000", "description": "Hielo"})


def today_params(**extra):
    today = date.today().isoformat()
    return {"start_date": today, "end_date": today, **extra}


class TestAccountingSummary:

    def test_summary(self, client, activity):
        response = client.get("/api/accounting/summary", params=today_params())
        assert response.status_code == 200
        data = response.json()

        assert data["sales_count"] == 1
        assert Decimal(data["sales_income"]) == Decimal("14000")
        assert Decimal(data["voucher_income"]) == Decimal("5000")
        assert Decimal(data["cash_income"]) == Decimal("1000")
        assert Decimal(data["total_income"]) == Decimal("20000")

        assert data["purchases_count"] == 1
        assert Decimal(data["purchases_expenses"]) == Decimal("20000")
        assert Decimal(data["voucher_expenses"]) == Decimal("8000")
        assert Decimal(data["cash_expenses"]) == Decimal("3000")
        assert Decimal(data["total_expenses"]) == Decimal("31000")

        assert Decimal(data["net_result"]) == Decimal("-11000")

    def test_empty_period(self, client, activity):
        response = client.get("/api/accounting/summary", params={"start_date": "2000-01-01", "end_date": "2000-01-31"})
        data = response.json()
        assert data["sales_count"] == 0
        assert Decimal(data["net_result"]) == Decimal("0")

    def test_invalid_range(self, client):
        response = client.get("/api/accounting/summary", params={"start_date": "2024-05-02", "end_date": "2024-05-01"})
        assert response.status_code == 400

    def test_csv_export(self, client, activity):
        response = client.get("/api/accounting/summary", params=today_params(export="csv"))
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(response.text), delimiter=";"))
        assert rows[0] == ["Concepto", "Valor"]
        values = dict(rows[1:])
        assert values["Fecha Inicio"] == date.today().isoformat()
        assert Decimal(values["Resultado Neto"]) == Decimal("-11000")
