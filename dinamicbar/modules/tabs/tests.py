"""
Tests para el módulo de Cuentas

- Apertura, renombrado y cierre sin cobro
- Productos: agregar (acumula), cambiar cantidad, quitar
- Totales siempre iguales a precio de venta por cantidad
- Cobro completo y pago dividido
"""

from decimal import Decimal
from uuid import uuid4

import pytest


@pytest.fixture
def tab(client):
    return client.post("/api/tabs", json={"name": "Cuenta Juan"}).json()


class TestTabs:

    def test_create_tab(self, client):
        response = client.post("/api/tabs", json={"name": "Barra 1"})
        assert response.status_code == 201
        data = response.json()
        assert data["is_active"] is True
        assert data["items"] == []
        assert Decimal(data["total"]) == Decimal("0")

    def test_table_allows_single_active_tab(self, client):
        table = client.post("/api/tables", json={"name": "Mesa 5"}).json()
        response = client.post("/api/tabs", json={"name": "Mesa 5", "table_id": table["id"]})
        assert response.status_code == 201

        response = client.post("/api/tabs", json={"name": "Otra", "table_id": table["id"]})
        assert response.status_code == 409

    def test_create_tab_unknown_table(self, client):
        response = client.post("/api/tabs", json={"name": "X", "table_id": str(uuid4())})
        assert response.status_code == 404

    def test_rename_tab(self, client, tab):
        response = client.patch(f"/api/tabs/{tab['id']}", json={"name": "Cuenta Pedro"})
        assert response.status_code == 200
        assert response.json()["name"] == "Cuenta Pedro"

    def test_get_tab_not_found(self, client):
        response = client.get(f"/api/tabs/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Cuenta no encontrada"

    def test_close_without_payment_moves_to_history(self, client, tab, beer):
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})

        response = client.delete(f"/api/tabs/{tab['id']}")
        assert response.status_code == 200

        assert client.get("/api/tabs").json()["total"] == 0
        history = client.get("/api/tabs/history").json()
        assert [t["id"] for t in history["tabs"]] == [tab["id"]]
        assert len(history["tabs"][0]["items"]) == 1

        response = client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id)})
        assert response.status_code == 409


class TestTabItems:

    def test_add_item_merges_quantities(self, client, tab, beer, soda):
        response = client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
        assert response.status_code == 201
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(soda.id)})
        response = client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 1})

        data = response.json()
        assert len(data["items"]) == 2
        beer_line = next(i for i in data["items"] if i["product_id"] == str(beer.id))
        assert beer_line["quantity"] == 3
        assert Decimal(beer_line["total"]) == Decimal("10500")
        assert Decimal(data["total"]) == Decimal("13000")
        assert data["subtotal"] == data["total"]

    def test_add_item_validation(self, client, tab, beer):
        response = client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 0})
        assert response.status_code == 422

        response = client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(uuid4())})
        assert response.status_code == 404

    def test_set_quantity_and_zero_removes(self, client, tab, beer):
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})

        response = client.put(f"/api/tabs/{tab['id']}/items/{beer.id}", json={"quantity": 5})
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("17500")

        response = client.put(f"/api/tabs/{tab['id']}/items/{beer.id}", json={"quantity": 0})
        assert response.json()["items"] == []
        assert Decimal(response.json()["total"]) == Decimal("0")

    def test_remove_item(self, client, tab, beer, soda):
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id)})
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(soda.id)})

        response = client.delete(f"/api/tabs/{tab['id']}/items/{beer.id}")
        assert response.status_code == 200
        assert [i["product_id"] for i in response.json()["items"]] == [str(soda.id)]
        assert Decimal(response.json()["total"]) == Decimal("2500")

    def test_remove_missing_item(self, client, tab, beer):
        response = client.delete(f"/api/tabs/{tab['id']}/items/{beer.id}")
        assert response.status_code == 404


class TestTabPayment:

    @pytest.fixture
    def loaded_tab(self, client, tab, beer, soda):
        client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
        return client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(soda.id), "quantity": 1}).json()

    def test_close_with_cash_payment(self, client, db_session, loaded_tab, beer, open_register):
        response = client.post(
            f"/api/tabs/{loaded_tab['id']}/close",
            json={"payment_method": "CASH", "cash_received": "10000"}
        )
        assert response.status_code == 200
        sale = response.json()
        assert Decimal(sale["total"]) == Decimal("9500")
        assert Decimal(sale["change"]) == Decimal("500")
        assert sale["is_partial"] is False

        tab = client.get(f"/api/tabs/{loaded_tab['id']}").json()
        assert tab["is_active"] is False
        assert tab["items"] == []
        assert Decimal(tab["total"]) == Decimal("9500")

        db_session.refresh(beer)
        assert beer.stock == 22

    def test_close_requires_open_register(self, client, loaded_tab):
        response = client.post(f"/api/tabs/{loaded_tab['id']}/close", json={"payment_method": "CARD"})
        assert response.status_code == 409

        assert client.get(f"/api/tabs/{loaded_tab['id']}").json()["is_active"] is True

    def test_split_until_tab_closes(self, client, loaded_tab, open_register):
        lines = {i["product"]["name"]: i for i in loaded_tab["items"]}
        beer_line = lines["Cerveza Águila"]
        soda_line = lines["Gaseosa"]

        response = client.post(
            f"/api/tabs/{loaded_tab['id']}/split",
            json={"paid_items": [{"tab_item_id": beer_line["id"], "quantity": 1}], "payment_method": "TRANSFER"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tab_closed"] is False
        assert Decimal(data["payment"]["amount"]) == Decimal("3500")
        assert {i["id"]: i["quantity"] for i in data["remaining_items"]} == {beer_line["id"]: 1, soda_line["id"]: 1}

        tab = client.get(f"/api/tabs/{loaded_tab['id']}").json()
        assert Decimal(tab["total"]) == Decimal("6000")

        response = client.post(
            f"/api/tabs/{loaded_tab['id']}/split",
            json={
                "paid_items": [
                    {"tab_item_id": beer_line["id"], "quantity": 1},
                    {"tab_item_id": soda_line["id"], "quantity": 1}
                ],
                "payment_method": "CASH",
                "cash_received": "6000"
            }
        )
        assert response.status_code == 200
        assert response.json()["tab_closed"] is True
        assert response.json()["remaining_items"] == []

    def test_split_more_than_in_tab(self, client, loaded_tab, open_register):
        line = loaded_tab["items"][0]
        response = client.post(
            f"/api/tabs/{loaded_tab['id']}/split",
            json={"paid_items": [{"tab_item_id": line["id"], "quantity": 99}], "payment_method": "CARD"}
        )
        assert response.status_code == 400

        response = client.post(
            f"/api/tabs/{loaded_tab['id']}/split",
            json={"paid_items": [{"tab_item_id": str(uuid4()), "quantity": 1}], "payment_method": "CARD"}
        )
        assert response.status_code == 400
