"""
Tests para el módulo de Compras

- Cálculo de totales con IVA por línea
- Creación de productos nuevos dentro de la compra
- Incremento de stock y actualización de precios
- Reversión de stock al eliminar (nunca por debajo de 0)
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from dinamicbar.modules.products.models import Product
from dinamicbar.modules.purchases.service import calculate_line_totals


def purchase_payload(supplier, items, **extra):
    return {"supplier_id": str(supplier.id), "items": items, **extra}


class TestLineTotals:

    def test_line_without_iva(self):
        totals = calculate_line_totals(10, Decimal("2000.00"), Decimal("0"))
        assert totals == {"subtotal": Decimal("20000.00"), "iva": Decimal("0.00"), "total": Decimal("20000.00")}

    def test_line_with_iva(self):
        totals = calculate_line_totals(3, Decimal("1000.00"), Decimal("19"))
        assert totals["subtotal"] == Decimal("3000.00")
        assert totals["iva"] == Decimal("570.00")
        assert totals["total"] == Decimal("3570.00")


class TestCreatePurchase:

    def test_purchase_existing_product_updates_stock_and_prices(self, client, db_session, supplier, beer):
        items = [{
            "product_id": str(beer.id),
            "quantity": 12,
            "purchase_price": "2200",
            "sale_price": "3800",
            "iva": "19"
        }]
        response = client.post("/api/purchases", json=purchase_payload(supplier, items, payment_method="TRANSFER"))
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["subtotal"]) == Decimal("26400")
        assert Decimal(data["total_iva"]) == Decimal("5016")
        assert Decimal(data["grand_total"]) == Decimal("31416")
        assert data["payment_method"] == "TRANSFER"
        assert data["supplier"]["name"] == "Distribuidora Central"
        assert data["items"][0]["product_name"] == "Cerveza Águila"

        db_session.refresh(beer)
        assert beer.stock == 36
        assert beer.purchase_price == Decimal("2200.00")
        assert beer.sale_price == Decimal("3800.00")

    def test_purchase_creates_new_product(self, client, db_session, supplier, category):
        items = [{
            "new_product": {"name": "Club Colombia", "category_id": str(category.id), "type": "ALCOHOLIC"},
            "quantity": 24,
            "purchase_price": "2500",
            "sale_price": "4500"
        }]
        response = client.post("/api/purchases", json=purchase_payload(supplier, items))
        assert response.status_code == 201

        product = db_session.query(Product).filter(Product.name == "Club Colombia").first()
        assert product is not None
        assert product.stock == 24
        assert response.json()["items"][0]["product_id"] == str(product.id)

    def test_item_requires_exactly_one_product_reference(self, client, supplier, beer, category):
        items = [{"quantity": 1, "purchase_price": "1", "sale_price": "2"}]
        response = client.post("/api/purchases", json=purchase_payload(supplier, items))
        assert response.status_code == 422

        items = [{
            "product_id": str(beer.id),
            "new_product": {"name": "Otra", "category_id": str(category.id)},
            "quantity": 1, "purchase_price": "1", "sale_price": "2"
        }]
        response = client.post("/api/purchases", json=purchase_payload(supplier, items))
        assert response.status_code == 422

    def test_purchase_requires_items(self, client, supplier):
        response = client.post("/api/purchases", json=purchase_payload(supplier, []))
        assert response.status_code == 422

    def test_unknown_product_rolls_back_everything(self, client, db_session, supplier, beer, category):
        items = [
            {
                "new_product": {"name": "Temporal", "category_id": str(category.id)},
                "quantity": 5, "purchase_price": "1000", "sale_price": "2000"
            },
            {"product_id": str(uuid4()), "quantity": 1, "purchase_price": "1", "sale_price": "2"},
        ]
        response = client.post("/api/purchases", json=purchase_payload(supplier, items))
        assert response.status_code == 404

        assert db_session.query(Product).filter(Product.name == "Temporal").first() is None
        db_session.refresh(beer)
        assert beer.stock == 24

    def test_unknown_supplier(self, client, beer):
        payload = {
            "supplier_id": str(uuid4()),
            "items": [{"product_id": str(beer.id), "quantity": 1, "purchase_price": "1", "sale_price": "2"}]
        }
        response = client.post("/api/purchases", json=payload)
        assert response.status_code == 404


class TestPurchaseQueries:

    @pytest.fixture
    def purchase(self, client, supplier, beer):
        items = [{"product_id": str(beer.id), "quantity": 6, "purchase_price": "2000", "sale_price": "3500"}]
        return client.post("/api/purchases", json=purchase_payload(supplier, items)).json()

    def test_list_with_filters(self, client, purchase):
        response = client.get("/api/purchases")
        assert response.json()["total"] == 1

        response = client.get("/api/purchases", params={"supplier": "distribuidora"})
        assert response.json()["total"] == 1

        response = client.get("/api/purchases", params={"supplier": "otro"})
        assert response.json()["total"] == 0

        today = date.today().isoformat()
        response = client.get("/api/purchases", params={"start_date": today, "end_date": today})
        assert response.json()["total"] == 1

        response = client.get("/api/purchases", params={"end_date": "2000-01-01"})
        assert response.json()["total"] == 0

    def test_update_header(self, client, purchase):
        response = client.put(f"/api/purchases/{purchase['id']}", json={"payment_method": "CARD"})
        assert response.status_code == 200
        assert response.json()["payment_method"] == "CARD"

    def test_get_purchase_not_found(self, client):
        response = client.get(f"/api/purchases/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Compra no encontrada"

    def test_supplier_with_purchases_cannot_be_deleted(self, client, supplier, purchase):
        response = client.delete(f"/api/suppliers/{supplier.id}")
        assert response.status_code == 409


class TestDeletePurchase:

    def test_delete_reverts_stock(self, client, db_session, supplier, beer):
        items = [{"product_id": str(beer.id), "quantity": 6, "purchase_price": "2000", "sale_price": "3500"}]
        purchase = client.post("/api/purchases", json=purchase_payload(supplier, items)).json()
        db_session.refresh(beer)
        assert beer.stock == 30

        response = client.delete(f"/api/purchases/{purchase['id']}")
        assert response.status_code == 200

        db_session.refresh(beer)
        assert beer.stock == 24
        assert client.get(f"/api/purchases/{purchase['id']}").status_code == 404

    def test_delete_clamps_stock_at_zero(self, client, db_session, supplier, beer):
        items = [{"product_id": str(beer.id), "quantity": 6, "purchase_price": "2000", "sale_price": "3500"}]
        purchase = client.post("/api/purchases", json=purchase_payload(supplier, items)).json()
        client.patch(f"/api/inventory/products/{beer.id}", json={"action": "set", "quantity": 2})

        response = client.delete(f"/api/purchases/{purchase['id']}")
        assert response.status_code == 200

        db_session.refresh(beer)
        assert beer.stock == 0
