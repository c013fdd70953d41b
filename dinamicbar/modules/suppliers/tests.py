"""
Tests para el módulo de Proveedores
"""

from uuid import uuid4


class TestSuppliers:

    def test_create_supplier(self, client):
        payload = {"name": "Bavaria", "phone": "6015550000", "email": "pedidos@bavaria.co", "address": "Bogotá"}
        response = client.post("/api/suppliers", json=payload)
        assert response.status_code == 201
        assert response.json()["email"] == "pedidos@bavaria.co"

    def test_create_supplier_invalid_email(self, client):
        response = client.post("/api/suppliers", json={"name": "Bavaria", "email": "no-es-correo"})
        assert response.status_code == 422

    def test_search_suppliers(self, client, supplier):
        client.post("/api/suppliers", json={"name": "Licorera del Valle", "phone": "3159998877"})

        response = client.get("/api/suppliers")
        data = response.json()
        assert data["total"] == 2
        assert [s["name"] for s in data["suppliers"]] == ["Distribuidora Central", "Licorera del Valle"]

        response = client.get("/api/suppliers", params={"search": "central.com"})
        assert [s["name"] for s in response.json()["suppliers"]] == ["Distribuidora Central"]

        response = client.get("/api/suppliers", params={"search": "315999"})
        assert [s["name"] for s in response.json()["suppliers"]] == ["Licorera del Valle"]

    def test_update_supplier(self, client, supplier):
        response = client.put(f"/api/suppliers/{supplier.id}", json={"address": "Cra 10 # 20-30"})
        assert response.status_code == 200
        assert response.json()["address"] == "Cra 10 # 20-30"
        assert response.json()["name"] == "Distribuidora Central"

    def test_update_supplier_null_values(self, client, supplier):
        response = client.put(f"/api/suppliers/{supplier.id}", json={"name": None, "email": None})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Distribuidora Central"
        assert data["email"] is None

    def test_get_supplier_not_found(self, client):
        response = client.get(f"/api/suppliers/{uuid4()}")
        assert response.status_code == 404

    def test_delete_supplier(self, client, supplier):
        response = client.delete(f"/api/suppliers/{supplier.id}")
        assert response.status_code == 200

        response = client.get(f"/api/suppliers/{supplier.id}")
        assert response.status_code == 404
