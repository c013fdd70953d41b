"""
Módulo de Cuentas (Tabs)

Una cuenta agrupa los productos consumidos, normalmente en una mesa.

- Una mesa tiene como máximo una cuenta activa
- Agregar un producto que ya está en la cuenta suma la cantidad
- Los totales se recalculan con el precio de venta vigente del producto
- Cerrar con pago genera una venta (ver módulo sales)
- El pago dividido cobra solo las unidades seleccionadas
"""
