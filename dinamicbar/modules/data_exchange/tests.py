"""
Tests para importación y exportación

- Inventario CSV separado por ';' (exportar, importar, formato anterior)
- Libro Excel de productos y proveedores
- Respaldo JSON completo y restauración
- Limpieza de registros
- Subida de imágenes
"""

import csv
import io
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from dinamicbar.core.config import settings
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.products.models import Product
from dinamicbar.modules.data_exchange.service import parse_decimal, parse_int


def csv_file(text: str, name: str = "inventario.csv"):
    return {"file": (name, text.encode("utf-8"), "text/csv")}


class TestParsers:

    def test_parse_decimal(self):
        assert parse_decimal("2500") == Decimal("2500.00")
        assert parse_decimal("2500,5") == Decimal("2500.50")
        assert parse_decimal("1.234,50") == Decimal("1234.50")
        assert parse_decimal("") == Decimal("0")
        assert parse_decimal("abc") == Decimal("0")
        assert parse_decimal(None) == Decimal("0")

    def test_parse_int(self):
        assert parse_int("12") == 12
        assert parse_int("3,0") == 3
        assert parse_int("-4") == 0


class TestInventoryCsv:

    def test_export_inventory(self, client, beer, soda):
        client.patch(f"/api/inventory/products/{beer.id}", json={"action": "updateImage", "image": "/uploads/a.png"})

        response = client.get("/api/inventory-backup/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(response.text), delimiter=";"))
        assert rows[0] == ["CATEGORIA", "PRODUCTO", "COSTO", "VALOR VENTA", "UNIDADES", "IMAGEN"]
        assert rows[1] == ["Cervezas", "Cerveza Águila", "2000.00", "3500.00", "24", "/uploads/a.png"]
        assert rows[2][1] == "Gaseosa"

    def test_import_creates_and_updates(self, client, db_session, beer):
        content = (
            "CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES;IMAGEN\n"
            "Cervezas;Cerveza Águila;2100;3800,50;30;\n"
            "Licores;Aguardiente Antioqueño;45.000,00;80000;6;/uploads/guaro.png\n"
            ";Sin categoría;1;2;3;\n"
            "Snacks;;1;2;3;\n"
        )
        response = client.post("/api/inventory-backup/import", files=csv_file(content))
        assert response.status_code == 200
        data = response.json()
        assert (data["created"], data["updated"], data["skipped"]) == (1, 1, 2)

        db_session.refresh(beer)
        assert beer.stock == 30
        assert beer.sale_price == Decimal("3800.50")

        guaro = db_session.query(Product).filter(Product.name == "Aguardiente Antioqueño").one()
        assert guaro.purchase_price == Decimal("45000.00")
        assert guaro.image == "/uploads/guaro.png"
        assert guaro.category.name == "Licores"
        assert db_session.query(Category).filter(Category.name == "Snacks").first() is None

    def test_legacy_import_without_image(self, client, db_session):
        content = "CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES\nGaseosas;Coca-Cola;1800;3000;12\n"
        response = client.post("/api/import", files=csv_file(content))
        assert response.status_code == 200
        assert response.json()["created"] == 1

        product = db_session.query(Product).filter(Product.name == "Coca-Cola").one()
        assert product.stock == 12
        assert product.image is None

    def test_import_empty_image_clears_it(self, client, db_session, beer):
        beer.image = "/uploads/aguila.png"
        db_session.commit()

        content = "CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES;IMAGEN\nCervezas;Cerveza Águila;2000;3500;24;\n"
        client.post("/api/inventory-backup/import", files=csv_file(content))

        db_session.refresh(beer)
        assert beer.image is None

    def test_legacy_import_keeps_image(self, client, db_session, beer):
        beer.image = "/uploads/aguila.png"
        db_session.commit()

        content = "CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES\nCervezas;Cerveza Águila;2000;3500;24\n"
        client.post("/api/import", files=csv_file(content))

        db_session.refresh(beer)
        assert beer.image == "/uploads/aguila.png"

    def test_import_latin1_file(self, client, db_session):
        content = "CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES\nCafé;Tinto;500;1500;100\n".encode("latin-1")
        response = client.post("/api/import", files={"file": ("viejo.csv", content, "text/csv")})
        assert response.status_code == 200
        assert db_session.query(Category).filter(Category.name == "Café").count() == 1

    def test_import_without_file(self, client):
        assert client.post("/api/inventory-backup/import").status_code == 400
        assert client.post("/api/import", files=csv_file("")).status_code == 400


class TestWorkbookExport:

    def test_export_workbook(self, client, beer, supplier):
        response = client.get("/api/export")
        assert response.status_code == 200
        assert response.headers["content-type"] == (
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ["Productos", "Proveedores"]

        products = list(workbook["Productos"].values)
        assert products[0] == ("ID", "Producto", "Categoría", "Costo", "Precio Venta", "Stock")
        assert products[1][1:] == ("Cerveza Águila", "Cervezas", 2000, 3500, 24)

        suppliers = list(workbook["Proveedores"].values)
        assert suppliers[0] == ("ID", "Nombre", "Teléfono", "Email", "Dirección")
        assert suppliers[1][1] == "Distribuidora Central"


@pytest.fixture
def sold_tab(client, beer, soda, open_register):
    tab = client.post("/api/tabs", json={"name": "Cuenta"}).json()
    client.post(f"/api/tabs/{tab['id']}/items", json={"product_id": str(beer.id), "quantity": 2})
    client.post("/api/sales", json={"tab_id": tab["id"], "payment_method": "CARD"})
    return tab


class TestBackup:

    def test_export_backup(self, client, admin_user, sold_tab, supplier):
        response = client.get("/api/backup/export")
        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]

        backup = response.json()
        assert "export_date" in backup
        assert len(backup["products"]) == 2
        assert len(backup["sales"]) == 1
        assert len(backup["sale_items"]) == 1
        assert len(backup["cash_transactions"]) == 2
        assert backup["users"][0]["username"] == "admin"
        assert backup["sales"][0]["payment_method"] == "CARD"

    def test_restore_backup(self, client, db_session, admin_headers, sold_tab, beer):
        backup = client.get("/api/backup/export").json()

        client.post("/api/settings/clear-records", headers=admin_headers)
        assert client.get("/api/inventory/products").json()["total"] == 0

        response = client.post("/api/backup/import", json=backup, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["restored"]["products"] == 2

        restored = client.get(f"/api/inventory/products/{beer.id}").json()
        assert restored["stock"] == 22
        assert client.get("/api/sales").json()["total"] == 1

        register = client.get("/api/cash-register").json()["cash_register"]
        assert Decimal(register["total_sales"]) == Decimal("7000")

    def test_restore_requires_admin(self, client, cashier_headers):
        response = client.post("/api/backup/import", json={"products": []}, headers=cashier_headers)
        assert response.status_code == 403

    def test_invalid_backup(self, client, db_session, admin_headers, beer):
        assert client.post("/api/backup/import", json=[1, 2], headers=admin_headers).status_code == 400
        assert client.post("/api/backup/import", json={"products": "x"}, headers=admin_headers).status_code == 400
        assert client.post("/api/backup/import", json={"otro": []}, headers=admin_headers).status_code == 400

        response = client.post(
            "/api/backup/import",
            json={"products": [{"id": "no-es-uuid", "name": "X"}]},
            headers=admin_headers
        )
        assert response.status_code == 400

        # Nada se borró
        assert client.get(f"/api/inventory/products/{beer.id}").status_code == 200


class TestClearRecords:

    def test_clear_records_keeps_users_and_tables(self, client, admin_headers, sold_tab, supplier):
        client.post("/api/tables", json={"name": "Mesa 1"})
        client.post("/api/vouchers", json={"type": "EXPENSE", "amount": "1000", "description": "X"})

        response = client.post("/api/settings/clear-records", headers=admin_headers)
        assert response.status_code == 200
        deleted = response.json()["deleted"]
        assert deleted["sales"] == 1
        assert deleted["products"] == 2
        assert deleted["vouchers"] == 1

        assert client.get("/api/inventory/products").json()["total"] == 0
        assert client.get("/api/suppliers").json()["total"] == 0
        assert client.get("/api/cash-register").json()["cash_register"] is None
        assert client.get("/api/tabs").json()["total"] == 0
        assert len(client.get("/api/tables").json()["ungrouped_tables"]) == 1
        assert client.get("/api/users", headers=admin_headers).json()["total"] == 1

    def test_clear_records_requires_admin(self, client, waiter_headers):
        assert client.post("/api/settings/clear-records", headers=waiter_headers).status_code == 403


class TestUpload:

    def test_upload_image(self, client):
        response = client.post("/api/upload", files={"file": ("logo.PNG", b"\x89PNG\r\n\x1a\nfake", "image/png")})
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/uploads/")
        assert url.endswith(".png")

        served = client.get(url)
        assert served.status_code == 200
        assert served.content == b"\x89PNG\r\n\x1a\nfake"

    def test_upload_rejects_non_images(self, client):
        response = client.post("/api/upload", files={"file": ("doc.pdf", b"%PDF", "application/pdf")})
        assert response.status_code == 400

    def test_upload_rejects_large_files(self, client):
        content = b"0" * (settings.MAX_UPLOAD_SIZE + 1)
        response = client.post("/api/upload", files={"file": ("big.jpg", content, "image/jpeg")})
        assert response.status_code == 400

    def test_upload_without_file(self, client):
        assert client.post("/api/upload").status_code == 400

    def test_upload_extension_follows_content_type(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("x.html", b"<script>alert(1)</script>", "image/png")}
        )
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.endswith(".png")

        served = client.get(url)
        assert served.headers["content-type"] == "image/png"

    def test_upload_size_limit_boundary(self, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 10)

        response = client.post("/api/upload", files={"file": ("a.jpg", b"0" * 10, "image/jpeg")})
        assert response.status_code == 200
        assert response.json()["url"].endswith(".jpg")

        response = client.post("/api/upload", files={"file": ("b.jpg", b"0" * 11, "image/jpeg")})
        assert response.status_code == 400
