"""
Tests para el módulo de Productos

Cubre CRUD, filtros, alertas de stock bajo y ajustes rápidos de inventario.
"""

from decimal import Decimal
from uuid import uuid4

from dinamicbar.conftest import ADMIN_PASSWORD
from dinamicbar.modules.products.models import Product


class TestProductCrud:

    def test_create_product(self, client, category):
        payload = {
            "name": "Ron Medellín",
            "category_id": str(category.id),
            "stock": 6,
            "purchase_price": "45000",
            "sale_price": "80000.499",
            "type": "ALCOHOLIC"
        }
        response = client.post("/api/inventory/products", json=payload)
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Ron Medellín"
        assert Decimal(data["sale_price"]) == Decimal("80000.50")
        assert data["category"]["name"] == "Cervezas"
        assert data["is_low_stock"] is False

    def test_create_product_unknown_category(self, client):
        payload = {"name": "X", "category_id": str(uuid4()), "purchase_price": "1", "sale_price": "2"}
        response = client.post("/api/inventory/products", json=payload)
        assert response.status_code == 404

    def test_create_product_invalid_prices(self, client, category):
        payload = {"name": "X", "category_id": str(category.id), "purchase_price": "0", "sale_price": "-5"}
        response = client.post("/api/inventory/products", json=payload)
        assert response.status_code == 422

    def test_list_and_filter_products(self, client, beer, soda, db_session):
        response = client.get("/api/inventory/products")
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = client.get("/api/inventory/products", params={"search": "cerveza"})
        assert [p["name"] for p in response.json()["products"]] == ["Cerveza Águila"]

        response = client.get("/api/inventory/products", params={"search": "Gase"})
        assert [p["name"] for p in response.json()["products"]] == ["Gaseosa"]

        response = client.get("/api/inventory/products", params={"category_id": str(uuid4())})
        assert response.json()["total"] == 0

    def test_get_product_not_found(self, client):
        response = client.get(f"/api/inventory/products/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Producto no encontrado"

    def test_update_product(self, client, beer):
        response = client.put(f"/api/inventory/products/{beer.id}", json={"sale_price": "4000", "min_stock": 30})
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["sale_price"]) == Decimal("4000")
        assert data["min_stock"] == 30
        assert data["is_low_stock"] is True

    def test_update_product_null_values(self, client, soda):
        response = client.put(
            f"/api/inventory/products/{soda.id}",
            json={"name": None, "sale_price": None, "category_id": None, "min_stock": None}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Gaseosa"
        assert Decimal(data["sale_price"]) == Decimal("2500")
        assert data["min_stock"] is None


class TestLowStock:

    def test_low_stock_uses_product_minimum_or_default(self, client, db_session, beer, soda, category):
        # Sin mínimo propio se usa LOW_STOCK_THRESHOLD (5)
        db_session.add(Product(
            name="Agua", category_id=category.id, stock=5,
            purchase_price=Decimal("800"), sale_price=Decimal("2000")
        ))
        db_session.commit()

        soda_response = client.patch(f"/api/inventory/products/{soda.id}", json={"action": "set", "quantity": 3})
        assert soda_response.json()["is_low_stock"] is True

        response = client.get("/api/inventory/products/low-stock")
        assert response.status_code == 200
        names = [p["name"] for p in response.json()["products"]]
        assert sorted(names) == ["Agua", "Gaseosa"]


class TestProductPatch:

    def test_increase_and_decrease_stock(self, client, beer):
        response = client.patch(f"/api/inventory/products/{beer.id}", json={"action": "increase", "quantity": 6})
        assert response.json()["stock"] == 30

        response = client.patch(f"/api/inventory/products/{beer.id}", json={"action": "decrease", "quantity": 100})
        assert response.status_code == 200
        assert response.json()["stock"] == 0

    def test_set_requires_quantity(self, client, beer):
        response = client.patch(f"/api/inventory/products/{beer.id}", json={"action": "set"})
        assert response.status_code == 422

    def test_unknown_action(self, client, beer):
        response = client.patch(f"/api/inventory/products/{beer.id}", json={"action": "explode", "quantity": 1})
        assert response.status_code == 422

    def test_update_and_remove_image(self, client, beer):
        response = client.patch(
            f"/api/inventory/products/{beer.id}",
            json={"action": "updateImage", "image": "/uploads/aguila.png"}
        )
        assert response.json()["image"] == "/uploads/aguila.png"

        response = client.patch(f"/api/inventory/products/{beer.id}", json={"action": "removeImage"})
        assert response.json()["image"] is None


class TestProductDelete:

    def test_delete_requires_admin_password(self, client, beer, admin_user, waiter_headers):
        response = client.delete(f"/api/inventory/products/{beer.id}", headers=waiter_headers)
        assert response.status_code == 401

        response = client.delete(
            f"/api/inventory/products/{beer.id}",
            headers={**waiter_headers, "X-Admin-Password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200

        response = client.get(f"/api/inventory/products/{beer.id}")
        assert response.status_code == 404

    def test_delete_recalculates_open_tab_totals(self, client, beer, soda, admin_headers):
        tab = client.post("/api/tabs", json={"name": "Barra"}).json()
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(soda.id), "quantity": 1})

        response = client.delete(f"/api/inventory/products/{beer.id}", headers=admin_headers)
        assert response.status_code == 200

        data = client.get(f"/api/tabs/{tab['id']}").json()
        assert [(item["product"]["name"], item["quantity"]) for item in data["items"]] == [("Gaseosa", 1)]
        assert Decimal(data["subtotal"]) == Decimal("2500")
        assert Decimal(data["total"]) == Decimal("2500")

    def test_delete_keeps_sale_and_purchase_history(self, client, beer, supplier, open_register, admin_headers):
        purchase = client.post("/api/purchases", json={
            "supplier_id": str(supplier.id),
            "items": [{"product_id": str(beer.id), "quantity": 6, "purchase_price": "2000", "sale_price": "3500"}]
        }).json()
        tab = client.post("/api/tabs", json={"name": "Barra"}).json()
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
        sale = client.post("/api/sales", json={"tab_id": tab["id"], "payment_method": "CARD"}).json()

        response = client.delete(f"/api/inventory/products/{beer.id}", headers=admin_headers)
        assert response.status_code == 200

        sale_item = client.get(f"/api/sales/{sale['id']}").json()["items"][0]
        assert sale_item["product_id"] is None
        assert sale_item["product_name"] == "Cerveza Águila"
        assert Decimal(sale_item["total_price"]) == Decimal("7000")

        purchase_item = client.get(f"/api/purchases/{purchase['id']}").json()["items"][0]
        assert purchase_item["product_id"] is None
        assert purchase_item["product_name"] == "Cerveza Águila"
