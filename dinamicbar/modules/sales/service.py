"""
Servicios de negocio para ventas

- Cobro total de una cuenta (POST /sales y cierre de cuenta)
- Cobro dividido de parte de los productos de una cuenta
- Anulación de ventas mientras su caja siga abierta
- Reportes por rango de fechas

Todo cobro exige una caja abierta y se ejecuta en una sola transacción:
descuenta stock, registra la venta, el pago y el movimiento de caja.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Any, List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from dinamicbar.common.mixins import utcnow
from dinamicbar.modules.sales.models import Sale, SaleItem, SaleStatus
from dinamicbar.modules.tabs.models import Tab, Payment
from dinamicbar.modules.tabs.schemas import PaymentData, SplitItem
from dinamicbar.modules.tabs.service import TabService
from dinamicbar.modules.products.models import Product
from dinamicbar.modules.purchases.models import PaymentMethod
from dinamicbar.modules.cash_register.models import CashRegister, TransactionType
from dinamicbar.modules.cash_register.service import CashRegisterService

logger = logging.getLogger(__name__)


class SalesService:
    """Servicio para cobros, anulaciones y reportes de ventas"""

    def __init__(self, db: Session):
        self.db = db
        self.tabs = TabService(db)
        self.cash = CashRegisterService(db)

    # ===== COBROS =====

    def _validate_payment(self, total: Decimal, payment: PaymentData) -> Optional[Decimal]:
        """Valida el efectivo recibido y devuelve el cambio"""
        if payment.payment_method != PaymentMethod.CASH:
            return None
        if payment.cash_received is None or payment.cash_received < total:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Efectivo insuficiente. Total a pagar: {total}"
            )
        return payment.cash_received - total

    def _register_sale(self, register: CashRegister, tab: Tab,
                       lines: List[Tuple[Product, int]], payment: PaymentData,
                       is_partial: bool) -> Tuple[Sale, Payment]:
        """Crear venta, pago y movimiento de caja y descontar stock (sin commit)"""
        total = sum((product.sale_price * quantity for product, quantity in lines), Decimal("0"))
        change = self._validate_payment(total, payment)

        sale = Sale(
            tab_id=tab.id,
            cash_register_id=register.id,
            subtotal=total,
            total=total,
            payment_method=payment.payment_method,
            cash_received=payment.cash_received if payment.payment_method == PaymentMethod.CASH else None,
            change=change,
            is_partial=is_partial,
            status=SaleStatus.COMPLETED
        )

        for product, quantity in lines:
            if product.stock < quantity:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Stock insuficiente para el producto '{product.name}'. "
                           f"Disponible: {product.stock}, Solicitado: {quantity}"
                )
            product.stock -= quantity
            sale.items.append(SaleItem(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.sale_price,
                total_price=product.sale_price * quantity
            ))

        self.db.add(sale)
        self.db.flush()

        tab_payment = Payment(
            amount=total,
            method=payment.payment_method,
            is_partial=is_partial,
            date=utcnow()
        )
        tab.payments.append(tab_payment)

        description = f"Pago parcial - {tab.name}" if is_partial else f"Venta - {tab.name}"
        self.cash.add_transaction(
            register, TransactionType.SALE, total, description,
            payment_method=payment.payment_method, sale_id=sale.id
        )
        return sale, tab_payment

    def process_sale(self, tab_id: UUID, payment: PaymentData) -> Sale:
        """Cobrar la cuenta completa y cerrarla"""
        try:
            tab = self.tabs.get_active_tab(tab_id)
            if not tab.items:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="La cuenta no tiene productos"
                )
            register = self.cash.require_open_register()

            lines = [(item.product, item.quantity) for item in tab.items]
            sale, _ = self._register_sale(register, tab, lines, payment, is_partial=False)

            # Los totales de la cuenta se conservan para el historial
            tab.items.clear()
            tab.is_active = False

            self.db.commit()
            self.db.refresh(sale)
            logger.info(f"Venta {sale.id} procesada: {sale.total} ({sale.payment_method.value})")
            return sale

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error procesando venta")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def split_tab(self, tab: Tab, paid_items: List[SplitItem], payment: PaymentData) -> Dict[str, Any]:
        """
        Cobrar parte de los productos de una cuenta.

        Las cantidades pagadas se descuentan de la cuenta; cuando no quedan
        productos la cuenta se cierra.
        """
        try:
            if not tab.is_active:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="La cuenta está cerrada"
                )
            register = self.cash.require_open_register()

            items_by_id = {item.id: item for item in tab.items}
            requested = defaultdict(int)
            for paid in paid_items:
                requested[paid.tab_item_id] += paid.quantity

            lines = []
            for tab_item_id, quantity in requested.items():
                item = items_by_id.get(tab_item_id)
                if item is None:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"El producto {tab_item_id} no pertenece a la cuenta"
                    )
                if quantity > item.quantity:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Cantidad inválida para '{item.product.name}': "
                               f"en cuenta {item.quantity}, a pagar {quantity}"
                    )
                lines.append((item.product, quantity))

            sale, tab_payment = self._register_sale(register, tab, lines, payment, is_partial=True)

            for tab_item_id, quantity in requested.items():
                item = items_by_id[tab_item_id]
                if quantity == item.quantity:
                    tab.items.remove(item)
                else:
                    item.quantity -= quantity

            tab.recalculate_totals()
            tab_closed = not tab.items
            if tab_closed:
                tab.is_active = False

            self.db.commit()
            self.db.refresh(sale)
            self.db.refresh(tab)
            logger.info(f"Pago dividido en {tab.name}: {sale.total}; cuenta cerrada: {tab_closed}")
            return {
                "sale": sale,
                "payment": tab_payment,
                "remaining_items": list(tab.items),
                "tab_closed": tab_closed
            }

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error en pago dividido")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    # ===== ANULACIÓN =====

    def cancel_sale(self, sale_id: UUID, reason: str) -> Sale:
        """
        Anular venta: devuelve stock, regresa los productos a la cuenta y
        registra un reembolso. Solo mientras la caja de la venta siga abierta.
        """
        try:
            sale = self.get_sale_by_id(sale_id)
            if sale.status == SaleStatus.CANCELLED:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="La venta ya fue anulada"
                )

            register = self.cash.get_open_register()
            if register is None or register.id != sale.cash_register_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Solo se pueden anular ventas de la caja abierta"
                )

            tab = self._tab_for_refund(sale)

            for sale_item in sale.items:
                if sale_item.product_id is None:
                    continue
                product = self.db.query(Product).filter(Product.id == sale_item.product_id).first()
                if product is None:
                    continue
                product.stock += sale_item.quantity
                if tab is not None:
                    self.tabs.merge_item(tab, product, sale_item.quantity)

            if tab is not None:
                tab.is_active = True

            sale.status = SaleStatus.CANCELLED
            sale.cancel_reason = reason
            self.cash.add_transaction(
                register, TransactionType.REFUND, sale.total,
                f"Anulación de venta: {reason}",
                payment_method=sale.payment_method, sale_id=sale.id
            )

            self.db.commit()
            self.db.refresh(sale)
            logger.info(f"Venta {sale.id} anulada: {reason}")
            return sale

        except HTTPException:
            self.db.rollback()
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error anulando venta")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def _tab_for_refund(self, sale: Sale) -> Optional[Tab]:
        """Cuenta donde regresan los productos anulados"""
        if sale.tab_id is None:
            return None
        tab = self.tabs.get_tab(sale.tab_id)
        if not tab.is_active and tab.table is not None:
            # Si la mesa ya tiene otra cuenta abierta, los productos van a esa
            current = self.tabs.get_table_tab(tab.table)
            if current is not None:
                return current
        return tab

    # ===== CONSULTAS =====

    def get_sale_by_id(self, sale_id: UUID) -> Sale:
        sale = self.db.query(Sale).options(
            selectinload(Sale.items)
        ).filter(Sale.id == sale_id).first()
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venta no encontrada"
            )
        return sale

    def get_sales(self, limit: int = 50, start_date: Optional[date] = None,
                  end_date: Optional[date] = None, today: bool = False) -> Dict[str, Any]:
        """Listar ventas recientes con filtros por fecha"""
        query = self.db.query(Sale).options(selectinload(Sale.items))

        if today:
            start_date = end_date = utcnow().date()

        if start_date:
            query = query.filter(Sale.created_at >= datetime.combine(start_date, time.min))
        if end_date:
            query = query.filter(Sale.created_at < datetime.combine(end_date + timedelta(days=1), time.min))

        sales = query.order_by(desc(Sale.created_at)).limit(limit).all()
        return {"sales": sales, "total": len(sales)}

    def get_report(self, start_date: date, end_date: date) -> Dict[str, Any]:
        """Resumen de ventas completadas en el rango (ambas fechas incluidas)"""
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha inicial debe ser anterior o igual a la final"
            )

        sales = self.db.query(Sale).options(selectinload(Sale.items)).filter(
            Sale.status == SaleStatus.COMPLETED,
            Sale.created_at >= datetime.combine(start_date, time.min),
            Sale.created_at < datetime.combine(end_date + timedelta(days=1), time.min)
        ).all()

        by_method = {method: 0 for method in PaymentMethod}
        by_hour = [{"hour": hour, "count": 0, "revenue": Decimal("0")} for hour in range(24)]
        products: Dict[str, Dict[str, Any]] = {}
        total_revenue = Decimal("0")

        for sale in sales:
            total_revenue += sale.total
            by_method[sale.payment_method] += 1
            bucket = by_hour[sale.created_at.hour]
            bucket["count"] += 1
            bucket["revenue"] += sale.total

            for item in sale.items:
                entry = products.setdefault(
                    item.product_name,
                    {"product_name": item.product_name, "quantity": 0, "revenue": Decimal("0")}
                )
                entry["quantity"] += item.quantity
                entry["revenue"] += item.total_price

        top_products = sorted(products.values(), key=lambda p: p["quantity"], reverse=True)[:10]

        return {
            "start_date": start_date,
            "end_date": end_date,
            "total_sales": len(sales),
            "total_revenue": total_revenue,
            "sales_by_payment_method": {
                "cash": by_method[PaymentMethod.CASH],
                "card": by_method[PaymentMethod.CARD],
                "transfer": by_method[PaymentMethod.TRANSFER],
            },
            "top_products": top_products,
            "sales_by_hour": by_hour,
        }
