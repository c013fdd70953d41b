"""
Fixtures compartidas por las pruebas de todos los módulos.

Base de datos SQLite en memoria recreada en cada prueba.
"""
import json
import os
import tempfile
from decimal import Decimal

# La configuración se lee al importar la aplicación
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="dinamicbar-uploads-"))

import pytest
from fastapi.testclient import TestClient

from dinamicbar.main import app
from dinamicbar.database.database import Base, SessionLocal, engine, get_db
from dinamicbar.modules.auth.models import User, UserRole
from dinamicbar.modules.auth.utils import hash_password
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.products.models import Product, ProductType
from dinamicbar.modules.suppliers.models import Supplier
from dinamicbar.modules.cash_register.schemas import CashRegisterOpen
from dinamicbar.modules.cash_register.service import CashRegisterService


ADMIN_PASSWORD = "admin123"


def user_headers(user: User) -> dict:
    """Header X-User tal como lo envía el cliente después del login"""
    return {"X-User": json.dumps({"id": str(user.id), "username": user.username})}


# ===== BASE DE DATOS =====

@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ===== USUARIOS =====

def _create_user(db, username: str, password: str, role: UserRole) -> User:
    user = User(username=username, password=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return _create_user(db_session, "admin", ADMIN_PASSWORD, UserRole.ADMIN)


@pytest.fixture
def cashier_user(db_session):
    return _create_user(db_session, "cajero", "cajero123", UserRole.CASHIER)


@pytest.fixture
def waiter_user(db_session):
    return _create_user(db_session, "mesero", "mesero123", UserRole.WAITER)


@pytest.fixture
def admin_headers(admin_user):
    return user_headers(admin_user)


@pytest.fixture
def cashier_headers(cashier_user):
    return user_headers(cashier_user)


@pytest.fixture
def waiter_headers(waiter_user):
    return user_headers(waiter_user)


# ===== CATÁLOGO =====

@pytest.fixture
def category(db_session):
    category = Category(name="Cervezas", icon="Beer", shortcut="1")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def beer(db_session, category):
    product = Product(
        name="Cerveza Águila",
        category_id=category.id,
        stock=24,
        purchase_price=Decimal("2000.00"),
        sale_price=Decimal("3500.00"),
        type=ProductType.ALCOHOLIC,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def soda(db_session, category):
    product = Product(
        name="Gaseosa",
        category_id=category.id,
        stock=10,
        min_stock=3,
        purchase_price=Decimal("1500.00"),
        sale_price=Decimal("2500.00"),
        type=ProductType.NON_ALCOHOLIC,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture
def supplier(db_session):
    supplier = Supplier(name="Distribuidora Central", phone="3001234567", email="ventas@central.com")
    db_session.add(supplier)
    db_session.commit()
    db_session.refresh(supplier)
    return supplier


# ===== CAJA =====

@pytest.fixture
def open_register(db_session):
    return CashRegisterService(db_session).open_cash_register(
        CashRegisterOpen(opening_amount=Decimal("100000"), opened_by="cajero")
    )
