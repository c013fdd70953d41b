"""
Exportación CSV del resumen contable.

El resumen se escribe como dos columnas (Concepto;Valor), una fila por
concepto, con ';' como separador igual que el respaldo de inventario.
"""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from fastapi import Response

SUMMARY_ROWS: List[Tuple[str, str]] = [
    ("period_start", "Fecha Inicio"),
    ("period_end", "Fecha Fin"),
    ("sales_count", "Número de Ventas"),
    ("sales_income", "Ventas"),
    ("voucher_income", "Comprobantes de Ingreso"),
    ("cash_income", "Ingresos de Caja"),
    ("total_income", "Total Ingresos"),
    ("purchases_count", "Número de Compras"),
    ("purchases_expenses", "Compras"),
    ("voucher_expenses", "Comprobantes de Egreso"),
    ("cash_expenses", "Gastos de Caja"),
    ("total_expenses", "Total Egresos"),
    ("net_result", "Resultado Neto"),
]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def summary_to_csv(summary: Dict[str, Any]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, delimiter=";")
    writer.writerow(["Concepto", "Valor"])
    for key, label in SUMMARY_ROWS:
        writer.writerow([label, _cell(summary.get(key))])
    return output.getvalue()


def summary_csv_response(summary: Dict[str, Any]) -> Response:
    """Respuesta descargable con el resumen del periodo."""
    filename = f"resumen_contable_{summary['period_start']}_{summary['period_end']}.csv"
    return Response(
        content=summary_to_csv(summary),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
