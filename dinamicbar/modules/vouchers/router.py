from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.vouchers.models import VoucherType
from dinamicbar.modules.vouchers.service import VoucherService
from dinamicbar.modules.vouchers.schemas import VoucherCreate, VoucherUpdate, VoucherOut, VoucherList

vouchers_router = APIRouter(tags=["Vouchers"])


@vouchers_router.get("", response_model=VoucherList)
def list_vouchers(
    type: Optional[str] = Query(None, pattern="^(?i:income|expense)$", description="income o expense"),
    db: Session = Depends(get_db)
):
    voucher_type = VoucherType(type.upper()) if type else None
    return VoucherService(db).get_vouchers(voucher_type)


@vouchers_router.post("", response_model=VoucherOut, status_code=status.HTTP_201_CREATED)
def create_voucher(data: VoucherCreate, db: Session = Depends(get_db)):
    return VoucherService(db).create_voucher(data)


@vouchers_router.get("/{voucher_id}", response_model=VoucherOut)
def get_voucher(voucher_id: UUID, db: Session = Depends(get_db)):
    return VoucherService(db).get_voucher_by_id(voucher_id)


@vouchers_router.put("/{voucher_id}", response_model=VoucherOut)
def update_voucher(voucher_id: UUID, data: VoucherUpdate, db: Session = Depends(get_db)):
    return VoucherService(db).update_voucher(voucher_id, data)


@vouchers_router.delete("/{voucher_id}")
def delete_voucher(voucher_id: UUID, db: Session = Depends(get_db)):
    return VoucherService(db).delete_voucher(voucher_id)
