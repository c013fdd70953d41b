"""
Seed script: datos iniciales para un bar de demostración.

What it creates:
- Usuarios: admin/admin123 (ADMIN), cajero/cajero123 (CASHIER), mesero/mesero123 (WAITER).
- Datos del negocio: "Mi Restaurante POS".
- Categorías con ícono y tecla rápida (Cervezas, Licores, Gaseosas, Snacks).
- Productos con stock inicial.
- Zonas y mesas (Salón: Mesa 1-6, Terraza: Mesa 7-10).

Run inside the API container:
    docker compose exec api python scripts/seed_bar_data.py

Existing rows (same username / name) are left untouched, so the script can run more than once.
Note: This is intended for development environments only.
"""

# Add project root to sys.path so `dinamicbar.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
from decimal import Decimal

from dinamicbar.database.database import SessionLocal, Base, engine
import dinamicbar.models  # noqa: F401
from dinamicbar.modules.auth.models import User, UserRole
from dinamicbar.modules.auth.utils import hash_password
from dinamicbar.modules.store.models import Store
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.products.models import Product, ProductType
from dinamicbar.modules.tables.models import TableGroup, Table


USERS = [
    ("admin", "admin123", UserRole.ADMIN),
    ("cajero", "cajero123", UserRole.CASHIER),
    ("mesero", "mesero123", UserRole.WAITER),
]

CATEGORIES = [
    ("Cervezas", "Beer", "1"),
    ("Licores", "Wine", "2"),
    ("Gaseosas", "CupSoda", "3"),
    ("Snacks", "Cookie", "4"),
]

# (categoría, nombre, costo, precio de venta, stock, tipo)
PRODUCTS = [
    ("Cervezas", "Cerveza Águila", "2000", "3500", 48, ProductType.ALCOHOLIC),
    ("Cervezas", "Cerveza Poker", "2000", "3500", 48, ProductType.ALCOHOLIC),
    ("Cervezas", "Club Colombia", "2600", "4500", 24, ProductType.ALCOHOLIC),
    ("Licores", "Aguardiente Antioqueño 750ml", "42000", "75000", 6, ProductType.ALCOHOLIC),
    ("Licores", "Ron Medellín 750ml", "45000", "80000", 4, ProductType.ALCOHOLIC),
    ("Gaseosas", "Coca-Cola 400ml", "1800", "3000", 36, ProductType.NON_ALCOHOLIC),
    ("Gaseosas", "Agua 600ml", "900", "2000", 24, ProductType.NON_ALCOHOLIC),
    ("Snacks", "Papas de limón", "1500", "3000", 20, ProductType.NON_ALCOHOLIC),
    ("Snacks", "Maní salado", "1000", "2500", 3, ProductType.NON_ALCOHOLIC),
]

TABLE_GROUPS = [
    ("Salón", range(1, 7)),
    ("Terraza", range(7, 11)),
]


def create_users(db):
    created = 0
    for username, password, role in USERS:
        if db.query(User).filter(User.username == username).first():
            continue
        db.add(User(username=username, password=hash_password(password), role=role))
        created += 1
    db.commit()
    return created


def create_store(db, name: str):
    store = db.query(Store).first()
    if store is None:
        store = Store(name=name, phone="3000000000", address="Calle 10 # 5-20")
        db.add(store)
        db.commit()
    return store


def create_categories(db):
    categories = {}
    for name, icon, shortcut in CATEGORIES:
        category = db.query(Category).filter(Category.name == name).first()
        if category is None:
            category = Category(name=name, icon=icon, shortcut=shortcut)
            db.add(category)
            db.flush()
        categories[name] = category
    db.commit()
    return categories


def create_products(db, categories):
    created = 0
    for category_name, name, cost, price, stock, product_type in PRODUCTS:
        if db.query(Product).filter(Product.name == name).first():
            continue
        db.add(Product(
            name=name,
            category_id=categories[category_name].id,
            stock=stock,
            purchase_price=Decimal(cost),
            sale_price=Decimal(price),
            type=product_type
        ))
        created += 1
    db.commit()
    return created


def create_tables(db):
    created = 0
    for group_name, numbers in TABLE_GROUPS:
        group = db.query(TableGroup).filter(TableGroup.name == group_name).first()
        if group is None:
            group = TableGroup(name=group_name)
            db.add(group)
            db.flush()
        for position, number in enumerate(numbers):
            name = f"Mesa {number}"
            if db.query(Table).filter(Table.name == name).first():
                continue
            db.add(Table(name=name, table_group_id=group.id, position_x=position * 120, position_y=0))
            created += 1
    db.commit()
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed bar demo data")
    parser.add_argument("--store-name", default="Mi Restaurante POS")
    parser.add_argument("--create-tables", action="store_true", help="Crear el esquema antes de sembrar (sin Alembic)")
    args = parser.parse_args()

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        print(f"Users created: {create_users(db)}")
        store = create_store(db, args.store_name)
        print(f"Store: {store.name}")
        categories = create_categories(db)
        print(f"Categories: {len(categories)}")
        print(f"Products created: {create_products(db, categories)}")
        print(f"Tables created: {create_tables(db)}")

        print("\nSeed completed.")
        print("Login credentials:")
        for username, password, role in USERS:
            print(f"  {role.value:<8} {username} / {password}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
