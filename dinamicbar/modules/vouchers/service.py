import logging
from sqlalchemy import desc
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from dinamicbar.modules.vouchers.models import Voucher, VoucherType
from dinamicbar.modules.vouchers.schemas import VoucherCreate, VoucherUpdate

logger = logging.getLogger(__name__)


class VoucherService:
    """Servicio para comprobantes de ingreso y egreso"""

    def __init__(self, db: Session):
        self.db = db

    def create_voucher(self, data: VoucherCreate) -> Voucher:
        try:
            voucher = Voucher(**data.model_dump(exclude_none=True))
            self.db.add(voucher)
            self.db.commit()
            self.db.refresh(voucher)
            logger.info(f"Comprobante {voucher.type.value} registrado: {voucher.amount}")
            return voucher
        except Exception:
            self.db.rollback()
            logger.exception("Error creando comprobante")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def get_vouchers(self, type: Optional[VoucherType] = None) -> Dict[str, Any]:
        query = self.db.query(Voucher)
        if type:
            query = query.filter(Voucher.type == type)
        vouchers = query.order_by(desc(Voucher.date)).all()
        return {"vouchers": vouchers, "total": len(vouchers)}

    def get_voucher_by_id(self, voucher_id: UUID) -> Voucher:
        voucher = self.db.query(Voucher).filter(Voucher.id == voucher_id).first()
        if not voucher:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Comprobante no encontrado"
            )
        return voucher

    def update_voucher(self, voucher_id: UUID, data: VoucherUpdate) -> Voucher:
        try:
            voucher = self.get_voucher_by_id(voucher_id)
            for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(voucher, field, value)
            self.db.commit()
            self.db.refresh(voucher)
            return voucher
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando comprobante")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_voucher(self, voucher_id: UUID) -> Dict[str, str]:
        try:
            voucher = self.get_voucher_by_id(voucher_id)
            self.db.delete(voucher)
            self.db.commit()
            return {"message": "Comprobante eliminado exitosamente"}
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando comprobante")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
