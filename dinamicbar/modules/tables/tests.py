"""
Tests para mesas y zonas

- Organización de mesas por zona
- Cuenta activa de la mesa (se abre al agregar el primer producto)
- Quitar productos con contraseña de administrador
- Pago dividido desde la mesa
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from dinamicbar.conftest import ADMIN_PASSWORD


@pytest.fixture
def terrace(client):
    return client.post("/api/table-groups", json={"name": "Terraza"}).json()


@pytest.fixture
def table(client, terrace):
    return client.post("/api/tables", json={"name": "Mesa 1", "table_group_id": terrace["id"]}).json()


class TestTableGroups:

    def test_overview_groups_and_ungrouped(self, client, table):
        client.post("/api/tables", json={"name": "Barra"})

        response = client.get("/api/tables")
        assert response.status_code == 200
        data = response.json()
        assert [g["name"] for g in data["table_groups"]] == ["Terraza"]
        assert [t["name"] for t in data["table_groups"][0]["tables"]] == ["Mesa 1"]
        assert [t["name"] for t in data["ungrouped_tables"]] == ["Barra"]

        assert client.get("/api/table-groups").json() == data

    def test_rename_group(self, client, terrace):
        response = client.put(f"/api/table-groups/{terrace['id']}", json={"name": "Patio"})
        assert response.status_code == 200
        assert response.json()["name"] == "Patio"

    def test_delete_group_ungroups_tables(self, client, terrace, table):
        response = client.delete(f"/api/table-groups/{terrace['id']}")
        assert response.status_code == 204

        data = client.get("/api/tables").json()
        assert data["table_groups"] == []
        assert [t["name"] for t in data["ungrouped_tables"]] == ["Mesa 1"]

    def test_group_not_found(self, client):
        response = client.put(f"/api/table-groups/{uuid4()}", json={"name": "X"})
        assert response.status_code == 404


class TestTables:

    def test_create_table_unknown_group(self, client):
        response = client.post("/api/tables", json={"name": "Mesa 9", "table_group_id": str(uuid4())})
        assert response.status_code == 404

    def test_update_table_position(self, client, table):
        response = client.put(f"/api/tables/{table['id']}", json={"position_x": 120, "position_y": 40})
        assert response.status_code == 200
        data = response.json()
        assert (data["position_x"], data["position_y"]) == (120, 40)
        assert data["name"] == "Mesa 1"

    def test_update_ignores_null_for_required_fields(self, client, table):
        response = client.put(f"/api/tables/{table['id']}", json={"name": None, "position_x": None})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Mesa 1"
        assert data["position_x"] == 0
        assert data["table_group_id"] == table["table_group_id"]

    def test_update_null_group_ungroups_table(self, client, table):
        response = client.put(f"/api/tables/{table['id']}", json={"table_group_id": None})
        assert response.status_code == 200
        assert response.json()["table_group_id"] is None

    def test_get_table_not_found(self, client):
        assert client.get(f"/api/tables/{uuid4()}").status_code == 404

    def test_add_item_opens_tab(self, client, table, beer):
        response = client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
        assert response.status_code == 200
        tab = response.json()
        assert tab["name"] == "Mesa 1"
        assert tab["table_id"] == table["id"]
        assert Decimal(tab["total"]) == Decimal("7000")

        response = client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(beer.id)})
        tab_again = response.json()
        assert tab_again["id"] == tab["id"]
        assert tab_again["items"][0]["quantity"] == 3

        active = client.get(f"/api/tables/{table['id']}").json()["active_tab"]
        assert active["id"] == tab["id"]

    def test_cannot_delete_table_with_items(self, client, table, beer):
        client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(beer.id)})
        response = client.delete(f"/api/tables/{table['id']}")
        assert response.status_code == 409

    def test_delete_empty_table(self, client, table):
        response = client.delete(f"/api/tables/{table['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/tables/{table['id']}").status_code == 404


class TestTableTabOperations:

    @pytest.fixture
    def table_tab(self, client, table, beer, soda):
        client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(beer.id), "quantity": 4})
        return client.post(f"/api/tables/{table['id']}/items", json={"product_id": str(soda.id), "quantity": 1}).json()

    def _line(self, tab, product):
        return next(i for i in tab["items"] if i["product_id"] == str(product.id))

    def test_remove_units_requires_admin_password(self, client, table, table_tab, beer, admin_user, waiter_headers):
        line = self._line(table_tab, beer)
        url = f"/api/tables/{table['id']}/products/{beer.id}"
        params = {"tab_item_id": line["id"], "quantity_to_delete": 1}

        response = client.delete(url, params=params, headers=waiter_headers)
        assert response.status_code == 401

        response = client.delete(url, params=params, headers={**waiter_headers, "X-Admin-Password": ADMIN_PASSWORD})
        assert response.status_code == 200
        assert self._line(response.json(), beer)["quantity"] == 3
        assert Decimal(response.json()["total"]) == Decimal("13000")

    def test_remove_all_units(self, client, table, table_tab, beer, admin_headers):
        line = self._line(table_tab, beer)
        response = client.delete(
            f"/api/tables/{table['id']}/products/{beer.id}",
            params={"tab_item_id": line["id"]},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert [i["product"]["name"] for i in response.json()["items"]] == ["Gaseosa"]

    def test_table_without_tab(self, client, table, beer, admin_headers):
        response = client.delete(
            f"/api/tables/{table['id']}/products/{beer.id}",
            params={"tab_item_id": str(uuid4())},
            headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "La mesa no tiene una cuenta abierta"

    def test_split_from_table(self, client, db_session, table, table_tab, beer, open_register):
        line = self._line(table_tab, beer)
        response = client.post(
            f"/api/tables/{table['id']}/split",
            json={"items_to_pay": [{"tab_item_id": line["id"], "quantity": 2}], "payment_method": "CARD"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tab_closed"] is False
        assert Decimal(data["sale"]["total"]) == Decimal("7000")
        assert data["payment"]["is_partial"] is True

        db_session.refresh(beer)
        assert beer.stock == 22
