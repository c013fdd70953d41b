from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from dinamicbar.core.config import settings
from dinamicbar.database.database import get_db
from dinamicbar.modules.auth.dependencies import require_admin
from dinamicbar.modules.data_exchange.service import DataExchangeService, save_upload
from dinamicbar.modules.data_exchange.schemas import (
    ImportResult, BackupImportResult, ClearResult, UploadResponse
)

data_exchange_router = APIRouter(tags=["Data exchange"])


def _read_text(file: UploadFile) -> str:
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No se recibió ningún archivo"
        )
    return DataExchangeService.decode_upload(file.file.read())


# ===== INVENTARIO CSV =====

@data_exchange_router.get("/inventory-backup/export")
def export_inventory(db: Session = Depends(get_db)):
    """Inventario en CSV separado por punto y coma"""
    content = DataExchangeService(db).export_inventory_csv()
    filename = f"inventario_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@data_exchange_router.post("/inventory-backup/import", response_model=ImportResult)
def import_inventory(file: UploadFile = File(None), db: Session = Depends(get_db)):
    return DataExchangeService(db).import_inventory_csv(_read_text(file), with_image=True)


@data_exchange_router.post("/import", response_model=ImportResult)
def import_legacy_inventory(file: UploadFile = File(None), db: Session = Depends(get_db)):
    """Formato anterior de 5 columnas, sin IMAGEN"""
    return DataExchangeService(db).import_inventory_csv(_read_text(file), with_image=False)


# ===== EXCEL =====

@data_exchange_router.get("/export")
def export_workbook(db: Session = Depends(get_db)):
    buffer = DataExchangeService(db).export_workbook()
    filename = f"{settings.STORE_NAME.lower()}_{date.today().isoformat()}.xlsx"
    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ===== RESPALDO =====

@data_exchange_router.get("/backup/export")
def export_backup(db: Session = Depends(get_db)):
    backup = DataExchangeService(db).export_backup()
    filename = f"backup_{date.today().isoformat()}.json"
    return JSONResponse(
        content=backup,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@data_exchange_router.post("/backup/import", response_model=BackupImportResult)
def import_backup(
    document: Any = Body(...),
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    """Reemplaza todos los datos por el contenido del respaldo"""
    return DataExchangeService(db).import_backup(document)


@data_exchange_router.post("/settings/clear-records", response_model=ClearResult)
def clear_records(db: Session = Depends(get_db), _=Depends(require_admin)):
    return DataExchangeService(db).clear_records()


# ===== IMÁGENES =====

@data_exchange_router.post("/upload", response_model=UploadResponse)
def upload_image(file: UploadFile = File(None)) -> Dict[str, str]:
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No se recibió ningún archivo"
        )
    # Como máximo MAX_UPLOAD_SIZE + 1 bytes en memoria
    content = file.file.read(settings.MAX_UPLOAD_SIZE + 1)
    return {"url": save_upload(file, content)}
