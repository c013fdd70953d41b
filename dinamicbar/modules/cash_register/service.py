"""
Servicios de negocio para sesiones de caja

- Apertura con monto inicial (una sola sesión abierta)
- Cierre con arqueo calculado desde las transacciones
- Ingresos y gastos manuales
"""

import logging
from decimal import Decimal
from typing import Dict, Any, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from dinamicbar.common.mixins import utcnow
from dinamicbar.modules.cash_register.models import CashRegister, CashTransaction, TransactionType
from dinamicbar.modules.cash_register.schemas import (
    CashRegisterOpen, CashRegisterClose, CashTransactionCreate
)
from dinamicbar.modules.purchases.models import PaymentMethod

logger = logging.getLogger(__name__)


class CashRegisterService:
    """Servicio para apertura, cierre y movimientos de caja"""

    def __init__(self, db: Session):
        self.db = db

    def get_open_register(self) -> Optional[CashRegister]:
        """Sesión abierta actual o None"""
        return self.db.query(CashRegister).options(
            selectinload(CashRegister.transactions)
        ).filter(CashRegister.is_open.is_(True)).first()

    def require_open_register(self) -> CashRegister:
        register = self.get_open_register()
        if not register:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No hay una caja abierta. Abra la caja antes de registrar pagos."
            )
        return register

    def add_transaction(self, register: CashRegister, type: TransactionType, amount: Decimal,
                        description: str, payment_method: Optional[PaymentMethod] = None,
                        sale_id: Optional[UUID] = None, created_by: Optional[str] = None) -> CashTransaction:
        """Agregar transacción a la sesión sin confirmar (el llamador hace commit)"""
        transaction = CashTransaction(
            type=type,
            amount=amount,
            description=description,
            payment_method=payment_method,
            sale_id=sale_id,
            created_by=created_by
        )
        register.transactions.append(transaction)
        return transaction

    def open_cash_register(self, data: CashRegisterOpen) -> CashRegister:
        """Abrir caja registrando la transacción de apertura"""
        try:
            if self.get_open_register():
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Ya existe una caja abierta"
                )

            register = CashRegister(
                is_open=True,
                opening_amount=data.opening_amount,
                opened_by=data.opened_by,
                opened_at=utcnow(),
                notes=data.notes
            )
            self.add_transaction(
                register, TransactionType.OPENING, data.opening_amount,
                "Apertura de caja", created_by=data.opened_by
            )

            self.db.add(register)
            self.db.commit()
            self.db.refresh(register)

            logger.info(f"Caja abierta {register.id} con {register.opening_amount}")
            return register

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ya existe una caja abierta"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error abriendo caja")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def close_cash_register(self, data: CashRegisterClose) -> Dict[str, Any]:
        """Cerrar caja con arqueo"""
        try:
            register = self.get_open_register()
            if not register:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="No hay una caja abierta"
                )

            self.add_transaction(
                register, TransactionType.CLOSING, data.closing_amount,
                "Cierre de caja", created_by=data.closed_by
            )

            register.is_open = False
            register.closing_amount = data.closing_amount
            register.closed_by = data.closed_by
            register.closed_at = utcnow()
            if data.notes:
                register.notes = f"{register.notes}\n{data.notes}" if register.notes else data.notes

            self.db.commit()
            self.db.refresh(register)

            summary = self.build_summary(register)
            logger.info(
                f"Caja cerrada {register.id}: esperado {summary['expected_cash']}, "
                f"contado {register.closing_amount}, diferencia {summary['difference']}"
            )
            return {"cash_register": register, "summary": summary}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error cerrando caja")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def get_history(self, limit: int = 10) -> Dict[str, Any]:
        """Sesiones más recientes primero"""
        query = self.db.query(CashRegister).options(selectinload(CashRegister.transactions))
        total = query.count()
        registers = query.order_by(desc(CashRegister.opened_at)).limit(limit).all()
        return {"cash_registers": registers, "total": total}

    def get_register_by_id(self, register_id: UUID) -> CashRegister:
        register = self.db.query(CashRegister).options(
            selectinload(CashRegister.transactions)
        ).filter(CashRegister.id == register_id).first()
        if not register:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Caja registradora no encontrada"
            )
        return register

    def get_summary(self, register_id: UUID) -> Dict[str, Any]:
        return self.build_summary(self.get_register_by_id(register_id))

    def build_summary(self, register: CashRegister) -> Dict[str, Any]:
        """Calcular resumen de la sesión a partir de sus transacciones"""
        summary = {
            "total_transactions": 0,
            "total_sales": Decimal("0"),
            "total_refunds": Decimal("0"),
            "total_income": Decimal("0"),
            "total_expenses": Decimal("0"),
        }
        by_method = {method: Decimal("0") for method in PaymentMethod}

        for transaction in register.transactions:
            if transaction.type in (TransactionType.OPENING, TransactionType.CLOSING):
                continue
            summary["total_transactions"] += 1

            if transaction.type == TransactionType.SALE:
                summary["total_sales"] += transaction.amount
                if transaction.payment_method:
                    by_method[transaction.payment_method] += transaction.amount
            elif transaction.type == TransactionType.REFUND:
                summary["total_refunds"] += transaction.amount
                summary["total_sales"] -= transaction.amount
                if transaction.payment_method:
                    by_method[transaction.payment_method] -= transaction.amount
            elif transaction.type == TransactionType.INCOME:
                summary["total_income"] += transaction.amount
            elif transaction.type == TransactionType.EXPENSE:
                summary["total_expenses"] += transaction.amount

        return {
            "cash_register_id": register.id,
            "is_open": register.is_open,
            "opening_amount": register.opening_amount,
            "closing_amount": register.closing_amount,
            **summary,
            "sales_by_payment_method": {
                "cash": by_method[PaymentMethod.CASH],
                "card": by_method[PaymentMethod.CARD],
                "transfer": by_method[PaymentMethod.TRANSFER],
            },
            "expected_cash": register.expected_cash,
            "difference": register.difference,
        }

    def get_transactions(self) -> Dict[str, Any]:
        """Transacciones de la sesión abierta"""
        register = self.get_open_register()
        if not register:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No hay una caja abierta"
            )
        return {"transactions": register.transactions, "total": len(register.transactions)}

    def create_transaction(self, data: CashTransactionCreate) -> CashTransaction:
        """Registrar ingreso o gasto manual en la sesión abierta"""
        try:
            register = self.require_open_register()
            transaction = self.add_transaction(
                register, TransactionType(data.type.value), data.amount,
                data.description, created_by=data.created_by
            )
            self.db.commit()
            self.db.refresh(transaction)
            logger.info(f"Movimiento de caja {transaction.type.value}: {transaction.amount}")
            return transaction

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error registrando movimiento de caja")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
