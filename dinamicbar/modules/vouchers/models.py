from sqlalchemy import Column, String, DateTime, Numeric, Enum
import enum

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin, utcnow


class VoucherType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Voucher(Base, BaseMixin):
    """Comprobante manual de ingreso o egreso para contabilidad"""
    __tablename__ = "vouchers"

    type = Column(Enum(VoucherType), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
