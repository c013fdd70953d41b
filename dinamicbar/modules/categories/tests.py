"""
Tests para el módulo de Categorías

- CRUD completo
- Nombres únicos
- Eliminación protegida por contraseña de administrador
- No se elimina una categoría con productos
"""

from uuid import uuid4

from dinamicbar.conftest import ADMIN_PASSWORD


class TestCategoryCrud:

    def test_create_category(self, client):
        response = client.post("/api/inventory/categories", json={"name": "Licores", "icon": "Wine", "shortcut": "2"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Licores"
        assert data["icon"] == "Wine"
        assert data["shortcut"] == "2"

    def test_create_duplicate_category(self, client, category):
        response = client.post("/api/inventory/categories", json={"name": "Cervezas"})
        assert response.status_code == 409

    def test_list_categories_ordered_by_name(self, client, category):
        client.post("/api/inventory/categories", json={"name": "Aguardiente"})
        client.post("/api/inventory/categories", json={"name": "Snacks"})

        response = client.get("/api/inventory/categories")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [c["name"] for c in data["categories"]] == ["Aguardiente", "Cervezas", "Snacks"]

    def test_get_category(self, client, category):
        response = client.get(f"/api/inventory/categories/{category.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Cervezas"

    def test_get_category_not_found(self, client):
        response = client.get(f"/api/inventory/categories/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Categoría no encontrada"

    def test_update_category(self, client, category):
        response = client.put(f"/api/inventory/categories/{category.id}", json={"icon": "Beer2"})
        assert response.status_code == 200
        assert response.json()["icon"] == "Beer2"
        assert response.json()["name"] == "Cervezas"

    def test_update_category_null_values(self, client, category):
        response = client.put(f"/api/inventory/categories/{category.id}", json={"name": None, "icon": None})
        assert response.status_code == 200
        assert response.json()["name"] == "Cervezas"
        assert response.json()["icon"] is None

    def test_update_to_duplicate_name(self, client, category):
        other = client.post("/api/inventory/categories", json={"name": "Licores"}).json()
        response = client.put(f"/api/inventory/categories/{other['id']}", json={"name": "Cervezas"})
        assert response.status_code == 409


class TestCategoryDelete:

    def test_admin_deletes_without_password(self, client, category, admin_headers):
        response = client.delete(f"/api/inventory/categories/{category.id}", headers=admin_headers)
        assert response.status_code == 200

        response = client.get(f"/api/inventory/categories/{category.id}")
        assert response.status_code == 404

    def test_cashier_needs_admin_password(self, client, category, admin_user, cashier_headers):
        response = client.delete(f"/api/inventory/categories/{category.id}", headers=cashier_headers)
        assert response.status_code == 401

        response = client.delete(
            f"/api/inventory/categories/{category.id}",
            headers={**cashier_headers, "X-Admin-Password": "incorrecta"}
        )
        assert response.status_code == 401

        response = client.delete(
            f"/api/inventory/categories/{category.id}",
            headers={**cashier_headers, "X-Admin-Password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200

    def test_cannot_delete_category_with_products(self, client, beer, admin_headers):
        response = client.delete(f"/api/inventory/categories/{beer.category_id}", headers=admin_headers)
        assert response.status_code == 409


class TestCategoryNames:

    def test_duplicate_check_ignores_case_and_spaces(self, client, category):
        response = client.post("/api/inventory/categories", json={"name": "  cervezas "})
        assert response.status_code == 409

    def test_blank_name_rejected(self, client):
        response = client.post("/api/inventory/categories", json={"name": "   "})
        assert response.status_code == 422
