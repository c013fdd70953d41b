"""
Módulo de Caja

Solo puede existir una caja abierta. Todo pago requiere caja abierta.
Efectivo esperado = apertura + ventas en efectivo - reembolsos en efectivo
+ ingresos - gastos.
"""
