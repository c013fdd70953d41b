"""
Tests para autenticación y gestión de usuarios

- Login y verificación de contraseña de administrador
- Jerarquía de roles y header X-User
- CRUD de usuarios restringido a administradores
- Protección del último administrador
"""

import json
from uuid import uuid4

from dinamicbar.conftest import ADMIN_PASSWORD
from dinamicbar.modules.auth.models import UserRole
from dinamicbar.modules.auth.utils import (
    hash_password, verify_password, has_permission, requires_management_password
)


# ===== TESTS DE UTILIDADES =====

class TestAuthUtils:
    """Tests para hashing y permisos"""

    def test_hash_and_verify_password(self):
        hashed = hash_password("secreto123")
        assert hashed != "secreto123"
        assert verify_password("secreto123", hashed)
        assert not verify_password("otra", hashed)
        assert not verify_password("secreto123", "")
        assert not verify_password("", hashed)

    def test_role_hierarchy(self):
        assert has_permission(UserRole.ADMIN, UserRole.CASHIER)
        assert has_permission(UserRole.CASHIER, UserRole.WAITER)
        assert has_permission(UserRole.WAITER, UserRole.WAITER)
        assert not has_permission(UserRole.WAITER, UserRole.CASHIER)
        assert not has_permission(UserRole.CASHIER, UserRole.ADMIN)

    def test_admin_never_needs_management_password(self):
        assert not requires_management_password("VOID_SALE", UserRole.ADMIN)
        assert requires_management_password("VOID_SALE", UserRole.CASHIER)
        assert requires_management_password("DELETE_PRODUCT", None)
        assert not requires_management_password("LISTAR", UserRole.WAITER)
        assert not requires_management_password("REFUND", UserRole.CASHIER)


# ===== TESTS DE LOGIN =====

class TestLogin:
    """Tests para POST /api/auth"""

    def test_login_success(self, client, admin_user):
        response = client.post("/api/auth", json={"username": "admin", "password": ADMIN_PASSWORD})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["username"] == "admin"
        assert user["role"] == "ADMIN"
        assert "password" not in user

    def test_login_unknown_user(self, client, admin_user):
        response = client.post("/api/auth", json={"username": "nadie", "password": "x"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Usuario no encontrado"

    def test_login_wrong_password(self, client, admin_user):
        response = client.post("/api/auth", json={"username": "admin", "password": "incorrecta"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Contraseña incorrecta"

    def test_login_requires_fields(self, client):
        response = client.post("/api/auth", json={"username": "admin"})
        assert response.status_code == 422

    def test_verify_admin_password(self, client, admin_user):
        response = client.post("/api/auth/verify-password", json={"password": ADMIN_PASSWORD})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = client.post("/api/auth/verify-password", json={"password": "mala"})
        assert response.status_code == 401


# ===== TESTS DE USUARIOS =====

class TestUsers:
    """Tests para /api/users"""

    def test_list_requires_user_header(self, client, admin_user):
        response = client.get("/api/users")
        assert response.status_code == 401

    def test_list_rejects_invalid_header(self, client, admin_user):
        response = client.get("/api/users", headers={"X-User": "no-es-json"})
        assert response.status_code == 401

        response = client.get("/api/users", headers={"X-User": json.dumps({"id": str(uuid4())})})
        assert response.status_code == 401

    def test_list_requires_admin(self, client, cashier_headers):
        response = client.get("/api/users", headers=cashier_headers)
        assert response.status_code == 403

    def test_list_users(self, client, admin_headers, waiter_user):
        response = client.get("/api/users", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [u["username"] for u in data["users"]] == ["admin", "mesero"]

    def test_create_user(self, client, admin_headers):
        response = client.post(
            "/api/users",
            json={"username": "nuevo", "password": "clave123", "role": "CASHIER"},
            headers=admin_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "nuevo"
        assert data["role"] == "CASHIER"

        login = client.post("/api/auth", json={"username": "nuevo", "password": "clave123"})
        assert login.status_code == 200

    def test_create_duplicate_user(self, client, admin_headers):
        payload = {"username": "admin", "password": "clave123", "role": "WAITER"}
        response = client.post("/api/users", json=payload, headers=admin_headers)
        assert response.status_code == 409

    def test_create_user_validation(self, client, admin_headers):
        response = client.post(
            "/api/users",
            json={"username": "ab", "password": "123", "role": "WAITER"},
            headers=admin_headers
        )
        assert response.status_code == 422

    def test_get_user_not_found(self, client, admin_headers):
        response = client.get(f"/api/users/{uuid4()}", headers=admin_headers)
        assert response.status_code == 404

    def test_update_user_role_and_password(self, client, admin_headers, waiter_user):
        response = client.put(
            f"/api/users/{waiter_user.id}",
            json={"role": "CASHIER", "password": "nueva123"},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["role"] == "CASHIER"

        login = client.post("/api/auth", json={"username": "mesero", "password": "nueva123"})
        assert login.status_code == 200

    def test_update_without_data(self, client, admin_headers, waiter_user):
        response = client.put(f"/api/users/{waiter_user.id}", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_cannot_demote_last_admin(self, client, admin_user, admin_headers):
        response = client.put(
            f"/api/users/{admin_user.id}",
            json={"role": "WAITER"},
            headers=admin_headers
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "No se puede quitar el último administrador"

    def test_cannot_delete_last_admin(self, client, admin_user, admin_headers):
        response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
        assert response.status_code == 409

    def test_delete_user(self, client, admin_headers, waiter_user):
        response = client.delete(f"/api/users/{waiter_user.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = client.get(f"/api/users/{waiter_user.id}", headers=admin_headers)
        assert response.status_code == 404
