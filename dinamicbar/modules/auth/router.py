from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.auth.dependencies import require_admin
from dinamicbar.modules.auth.service import AuthService, UserService
from dinamicbar.modules.auth.schemas import (
    UserLogin, PasswordVerify, UserCreate, UserUpdate, UserOut, UserList, LoginResponse
)

auth_router = APIRouter()
users_router = APIRouter()


@auth_router.post("", response_model=LoginResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Iniciar sesión con usuario y contraseña.

    Devuelve el usuario autenticado; el cliente lo guarda localmente y lo
    reenvía en el header X-User.
    """
    auth_service = AuthService(db)
    user = auth_service.authenticate(credentials.username, credentials.password)
    return {"user": user}


@auth_router.post("/verify-password")
def verify_admin_password(data: PasswordVerify, db: Session = Depends(get_db)):
    """Verificar la contraseña del administrador (operaciones restringidas)."""
    auth_service = AuthService(db)
    return auth_service.verify_admin_password(data.password)


@users_router.get("", response_model=UserList)
def list_users(db: Session = Depends(get_db), admin=Depends(require_admin)):
    return UserService(db).get_users()


@users_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return UserService(db).create_user(data)


@users_router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: UUID, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return UserService(db).get_user_by_id(user_id)


@users_router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: UUID, data: UserUpdate, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return UserService(db).update_user(user_id, data)


@users_router.delete("/{user_id}")
def delete_user(user_id: UUID, db: Session = Depends(get_db), admin=Depends(require_admin)):
    return UserService(db).delete_user(user_id)
