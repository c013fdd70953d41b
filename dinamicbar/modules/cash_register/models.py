"""
Modelos SQLAlchemy para sesiones de caja

- CashRegister: Sesión entre una apertura y un cierre con arqueo
- CashTransaction: Movimientos registrados durante la sesión

Solo puede existir una sesión abierta a la vez. Los totales de la sesión
se calculan siempre a partir de sus transacciones.
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Numeric, Enum, Text, Uuid, Index, text
from sqlalchemy.orm import relationship
from decimal import Decimal
import enum

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin, utcnow
from dinamicbar.modules.purchases.models import PaymentMethod


# ===== ENUMS =====

class TransactionType(str, enum.Enum):
    """Tipos de movimiento de caja"""
    OPENING = "OPENING"   # Apertura (monto inicial)
    CLOSING = "CLOSING"   # Cierre (monto contado)
    SALE = "SALE"         # Venta (ingreso automático)
    REFUND = "REFUND"     # Anulación de venta (egreso automático)
    INCOME = "INCOME"     # Ingreso manual
    EXPENSE = "EXPENSE"   # Gasto pagado desde caja


# ===== MODELOS =====

class CashRegister(Base, BaseMixin):
    __tablename__ = "cash_registers"

    is_open = Column(Boolean, nullable=False, default=True, index=True)
    opening_amount = Column(Numeric(12, 2), nullable=False, default=0)
    closing_amount = Column(Numeric(12, 2), nullable=True)  # Solo se llena al cerrar
    opened_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    opened_by = Column(String(100), nullable=True)
    closed_by = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    transactions = relationship(
        "CashTransaction",
        back_populates="cash_register",
        cascade="all, delete-orphan",
        order_by="CashTransaction.created_at.desc()"
    )
    sales = relationship("Sale", back_populates="cash_register")

    __table_args__ = (
        # Una sola sesión abierta: índice único parcial sobre las cajas abiertas
        Index(
            "uq_cash_registers_single_open", "is_open", unique=True,
            postgresql_where=text("is_open"),
            sqlite_where=text("is_open = 1"),
        ),
    )

    def _sum(self, *types: TransactionType, method: PaymentMethod = None) -> Decimal:
        return sum(
            (t.amount for t in self.transactions
             if t.type in types and (method is None or t.payment_method == method)),
            Decimal("0")
        )

    @property
    def total_sales(self) -> Decimal:
        """Ventas netas (ventas menos anulaciones)"""
        return self._sum(TransactionType.SALE) - self._sum(TransactionType.REFUND)

    @property
    def expected_cash(self) -> Decimal:
        """Efectivo que debería haber en caja según los movimientos"""
        cash_sales = (
            self._sum(TransactionType.SALE, method=PaymentMethod.CASH)
            - self._sum(TransactionType.REFUND, method=PaymentMethod.CASH)
        )
        return (
            self.opening_amount
            + cash_sales
            + self._sum(TransactionType.INCOME)
            - self._sum(TransactionType.EXPENSE)
        )

    @property
    def difference(self) -> Decimal:
        """Diferencia entre lo contado al cierre y lo esperado"""
        if self.is_open or self.closing_amount is None:
            return Decimal("0")
        return self.closing_amount - self.expected_cash


class CashTransaction(Base, BaseMixin):
    __tablename__ = "cash_transactions"

    cash_register_id = Column(Uuid, ForeignKey("cash_registers.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(TransactionType), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # Siempre positivo; el tipo define el signo
    payment_method = Column(Enum(PaymentMethod), nullable=True)
    description = Column(String(255), nullable=True)
    sale_id = Column(Uuid, ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(String(100), nullable=True)

    # Relationships
    cash_register = relationship("CashRegister", back_populates="transactions")
