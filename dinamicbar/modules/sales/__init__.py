"""
Módulo de Ventas

FLUJO:
1. Validar caja abierta y efectivo recibido
2. Descontar stock de cada producto vendido
3. Registrar venta, pago y movimiento de caja en una sola transacción
4. Anular: devuelve stock, reabre la cuenta y registra el reembolso
"""
