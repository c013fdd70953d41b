"""
Importación y exportación de datos

- Inventario en CSV separado por ';' (CATEGORIA;PRODUCTO;COSTO;VALOR VENTA;UNIDADES;IMAGEN)
- Libro Excel con productos y proveedores
- Respaldo completo en JSON y su restauración
- Limpieza de registros del negocio
- Subida de imágenes al directorio local
"""

import csv
import enum
import io
import logging
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile, status
from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy import Boolean, DateTime, Enum, Integer, Numeric, Uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dinamicbar.core.config import settings
from dinamicbar.common.mixins import utcnow
from dinamicbar.modules.auth.models import User
from dinamicbar.modules.store.models import Store
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.products.models import Product
from dinamicbar.modules.suppliers.models import Supplier
from dinamicbar.modules.purchases.models import Purchase, PurchaseItem
from dinamicbar.modules.tables.models import TableGroup, Table
from dinamicbar.modules.tabs.models import Tab, TabItem, Payment
from dinamicbar.modules.sales.models import Sale, SaleItem
from dinamicbar.modules.cash_register.models import CashRegister, CashTransaction
from dinamicbar.modules.vouchers.models import Voucher

logger = logging.getLogger(__name__)

INVENTORY_HEADER = ["CATEGORIA", "PRODUCTO", "COSTO", "VALOR VENTA", "UNIDADES", "IMAGEN"]

# Orden de inserción respetando llaves foráneas (se borra en orden inverso)
BACKUP_MODELS = [
    ("users", User),
    ("store", Store),
    ("categories", Category),
    ("products", Product),
    ("suppliers", Supplier),
    ("purchases", Purchase),
    ("purchase_items", PurchaseItem),
    ("table_groups", TableGroup),
    ("tables", Table),
    ("tabs", Tab),
    ("tab_items", TabItem),
    ("payments", Payment),
    ("cash_registers", CashRegister),
    ("sales", Sale),
    ("sale_items", SaleItem),
    ("cash_transactions", CashTransaction),
    ("vouchers", Voucher),
]

# Registros del negocio que borra "limpiar registros" (en este orden)
CLEARABLE_MODELS = [
    ("cash_transactions", CashTransaction),
    ("sale_items", SaleItem),
    ("sales", Sale),
    ("payments", Payment),
    ("tab_items", TabItem),
    ("tabs", Tab),
    ("purchase_items", PurchaseItem),
    ("purchases", Purchase),
    ("products", Product),
    ("categories", Category),
    ("suppliers", Supplier),
    ("cash_registers", CashRegister),
    ("vouchers", Voucher),
]

# Extensión con la que se guarda cada tipo de imagen aceptado
IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def parse_decimal(value: Optional[str]) -> Decimal:
    """Número con coma o punto decimal; vacío o inválido vale 0"""
    if value is None:
        return Decimal("0")
    cleaned = value.strip().replace("$", "").replace(" ", "")
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(".", "")
    cleaned = cleaned.replace(",", ".")
    try:
        return Decimal(cleaned).quantize(Decimal("0.01"))
    except InvalidOperation:
        return Decimal("0")


def parse_int(value: Optional[str]) -> int:
    return max(0, int(parse_decimal(value)))


def serialize_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return str(value)


def serialize_row(instance) -> Dict[str, Any]:
    return {
        column.name: serialize_value(getattr(instance, column.key))
        for column in instance.__table__.columns
    }


def deserialize_row(model, row: Dict[str, Any]) -> Dict[str, Any]:
    """Convierte un registro JSON a los tipos de las columnas del modelo"""
    values = {}
    for column in model.__table__.columns:
        if column.name not in row:
            continue
        value = row[column.name]
        if value is not None:
            column_type = column.type
            if isinstance(column_type, Uuid):
                value = uuid.UUID(str(value))
            elif isinstance(column_type, Numeric):
                value = Decimal(str(value))
            elif isinstance(column_type, DateTime):
                value = datetime.fromisoformat(value)
            elif isinstance(column_type, Enum):
                value = column_type.enum_class(value)
            elif isinstance(column_type, Boolean):
                value = bool(value)
            elif isinstance(column_type, Integer):
                value = int(value)
        values[column.name] = value
    return values


class DataExchangeService:
    """Servicio de importación, exportación y respaldo"""

    def __init__(self, db: Session):
        self.db = db

    # ===== INVENTARIO CSV =====

    def export_inventory_csv(self) -> str:
        products = self.db.query(Product).join(Product.category).order_by(Category.name, Product.name).all()

        output = io.StringIO()
        writer = csv.writer(output, delimiter=";", lineterminator="\n")
        writer.writerow(INVENTORY_HEADER)
        for product in products:
            writer.writerow([
                product.category.name,
                product.name,
                product.purchase_price,
                product.sale_price,
                product.stock,
                product.image or "",
            ])
        content = output.getvalue()
        output.close()
        return content

    @staticmethod
    def decode_upload(content: bytes) -> str:
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El archivo está vacío"
            )
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return content.decode("latin-1")

    def import_inventory_csv(self, text: str, with_image: bool = True) -> Dict[str, Any]:
        """
        Crear o actualizar categorías y productos por nombre.

        Las filas sin categoría o sin producto se omiten. Con la columna
        IMAGEN, una celda vacía deja el producto sin imagen.
        """
        rows = list(csv.reader(io.StringIO(text), delimiter=";"))
        created = updated = skipped = 0
        categories = {c.name.lower(): c for c in self.db.query(Category).all()}
        products = {p.name.lower(): p for p in self.db.query(Product).all()}

        try:
            for line_number, row in enumerate(rows[1:], start=2):
                if not any(cell.strip() for cell in row):
                    continue
                cells = [cell.strip() for cell in row] + [""] * 6
                category_name, product_name = cells[0], cells[1]
                if not category_name or not product_name:
                    logger.warning(f"Fila {line_number} omitida: falta categoría o producto")
                    skipped += 1
                    continue

                category = categories.get(category_name.lower())
                if category is None:
                    category = Category(name=category_name)
                    self.db.add(category)
                    self.db.flush()
                    categories[category_name.lower()] = category

                values = {
                    "category_id": category.id,
                    "purchase_price": parse_decimal(cells[2]),
                    "sale_price": parse_decimal(cells[3]),
                    "stock": parse_int(cells[4]),
                }
                if with_image:
                    values["image"] = cells[5] or None

                product = products.get(product_name.lower())
                if product is None:
                    product = Product(name=product_name, **values)
                    self.db.add(product)
                    products[product_name.lower()] = product
                    created += 1
                else:
                    for field, value in values.items():
                        setattr(product, field, value)
                    updated += 1

            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Error importando inventario")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

        logger.info(f"Inventario importado: {created} creados, {updated} actualizados, {skipped} omitidos")
        return {
            "message": "Inventario importado exitosamente",
            "created": created,
            "updated": updated,
            "skipped": skipped,
        }

    # ===== EXCEL =====

    def export_workbook(self) -> io.BytesIO:
        """Libro con hojas Productos y Proveedores"""
        workbook = Workbook()
        products_sheet = workbook.active
        products_sheet.title = "Productos"
        products_sheet.append(["ID", "Producto", "Categoría", "Costo", "Precio Venta", "Stock"])
        for product in self.db.query(Product).order_by(Product.name).all():
            products_sheet.append([
                str(product.id),
                product.name,
                product.category.name if product.category else "",
                float(product.purchase_price),
                float(product.sale_price),
                product.stock,
            ])

        suppliers_sheet = workbook.create_sheet(title="Proveedores")
        suppliers_sheet.append(["ID", "Nombre", "Teléfono", "Email", "Dirección"])
        for supplier in self.db.query(Supplier).order_by(Supplier.name).all():
            suppliers_sheet.append([
                str(supplier.id),
                supplier.name,
                supplier.phone or "",
                supplier.email or "",
                supplier.address or "",
            ])

        for sheet in workbook.worksheets:
            for cell in sheet[1]:
                cell.font = Font(bold=True)
            for column in sheet.columns:
                width = max(len(str(cell.value or "")) for cell in column)
                sheet.column_dimensions[column[0].column_letter].width = min(width + 2, 50)

        buffer = io.BytesIO()
        workbook.save(buffer)
        buffer.seek(0)
        return buffer

    # ===== RESPALDO JSON =====

    def export_backup(self) -> Dict[str, Any]:
        backup = {}
        for key, model in BACKUP_MODELS:
            backup[key] = [serialize_row(row) for row in self.db.query(model).all()]
        backup["export_date"] = utcnow().isoformat()
        return backup

    def import_backup(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Reemplaza todos los datos por los del respaldo en una sola transacción"""
        sections = self._validate_backup(document)

        try:
            for key, model in reversed(BACKUP_MODELS):
                if key == "users" and key not in sections:
                    # Sin usuarios en el respaldo se conservan los actuales
                    continue
                self.db.query(model).delete(synchronize_session=False)

            restored = {}
            for key, model in BACKUP_MODELS:
                rows = sections.get(key, [])
                if rows:
                    self.db.execute(model.__table__.insert(), [deserialize_row(model, row) for row in rows])
                restored[key] = len(rows)

            self.db.commit()
            self.db.expire_all()
            logger.info(f"Respaldo restaurado: {restored}")
            return {"message": "Respaldo restaurado exitosamente", "restored": restored}

        except (ValueError, TypeError, KeyError, IntegrityError) as e:
            self.db.rollback()
            logger.warning(f"Respaldo inválido: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El respaldo no es válido"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error restaurando respaldo")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    @staticmethod
    def _validate_backup(document: Any) -> Dict[str, List[Dict[str, Any]]]:
        if not isinstance(document, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El respaldo no es válido"
            )

        sections = {}
        for key, _ in BACKUP_MODELS:
            if key not in document or document[key] is None:
                continue
            rows = document[key]
            if isinstance(rows, dict):
                rows = [rows]
            if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Sección '{key}' inválida en el respaldo"
                )
            sections[key] = rows

        if not sections:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El respaldo no contiene datos"
            )
        return sections

    # ===== LIMPIEZA =====

    def clear_records(self) -> Dict[str, Any]:
        """Borra ventas, compras, inventario, proveedores, cajas y comprobantes"""
        try:
            deleted = {}
            for key, model in CLEARABLE_MODELS:
                deleted[key] = self.db.query(model).delete(synchronize_session=False)
            self.db.commit()
            self.db.expire_all()
            logger.warning(f"Registros eliminados: {deleted}")
            return {"message": "Registros eliminados exitosamente", "deleted": deleted}
        except Exception:
            self.db.rollback()
            logger.exception("Error limpiando registros")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )


# ===== IMÁGENES =====

def save_upload(file: UploadFile, content: bytes) -> str:
    """
    Guarda una imagen en UPLOAD_DIR y devuelve su URL pública.

    La extensión sale del tipo de contenido, nunca del nombre del archivo.
    """
    extension = IMAGE_EXTENSIONS.get(file.content_type)
    if extension is None or file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo debe ser una imagen"
        )
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo está vacío"
        )
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"El archivo supera el máximo de {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
        )

    filename = f"{uuid.uuid4()}{extension}"
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / filename).write_bytes(content)

    logger.info(f"Imagen guardada: {filename} ({len(content)} bytes)")
    return f"/uploads/{filename}"
