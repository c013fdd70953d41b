"""
Importación y exportación: inventario CSV, libro Excel, respaldo JSON e imágenes.
"""
