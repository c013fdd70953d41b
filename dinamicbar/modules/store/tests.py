"""
Tests para los datos del negocio (singleton)
"""


class TestStore:

    def test_store_not_configured(self, client):
        response = client.get("/api/store")
        assert response.status_code == 200
        assert response.json() == {"store": None}

    def test_save_store_creates_then_replaces(self, client):
        response = client.post("/api/store", json={"name": "Mi Restaurante POS", "phone": "3001112233"})
        assert response.status_code == 201
        store_id = response.json()["id"]

        response = client.post("/api/store", json={"name": "Bar La Esquina"})
        assert response.status_code == 201
        assert response.json()["id"] == store_id
        assert response.json()["name"] == "Bar La Esquina"

        store = client.get("/api/store").json()["store"]
        assert store["name"] == "Bar La Esquina"

    def test_update_store_partial(self, client):
        client.post("/api/store", json={"name": "Mi Restaurante POS", "address": "Calle 1"})

        response = client.put("/api/store", json={"phone": "6011234567"})
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "6011234567"
        assert data["address"] == "Calle 1"

    def test_update_store_null_values(self, client):
        client.post("/api/store", json={"name": "Mi Restaurante POS", "address": "Calle 1"})

        response = client.put("/api/store", json={"name": None, "address": None})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Mi Restaurante POS"
        assert data["address"] is None

    def test_update_store_not_configured(self, client):
        response = client.put("/api/store", json={"name": "Nuevo"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Tienda no configurada"
