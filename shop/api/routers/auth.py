# shop/api/routers/auth.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import get_current_user, require_admin
from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import (
    RegisterIn,
    LoginIn,
    LoginOut,
    ForgotPasswordIn,
    ProfileUpdateIn,
    UserOut,
    OkOut,
    MessageOut,
    OrderOut,
)
from shop.services.user_service import UserService
from shop.services.order_service import OrderService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    return UserService(db).register(payload)


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return UserService(db).login(payload.email, payload.password)


@router.post("/forgot-password", response_model=MessageOut)
def forgot_password(payload: ForgotPasswordIn, db: Session = Depends(get_db)):
    UserService(db).forgot_password(payload.email, payload.answer, payload.new_password)
    return {"message": "Password reset successfully"}


@router.get("/user-auth", response_model=OkOut)
def user_auth(_: UserModel = Depends(get_current_user)):
    return {"ok": True}


@router.get("/admin-auth", response_model=OkOut)
def admin_auth(_: UserModel = Depends(require_admin)):
    return {"ok": True}


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: ProfileUpdateIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).update_profile(user.id, payload)


@router.get("/orders", response_model=List[OrderOut])
def my_orders(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return OrderService(db).list_for_buyer(user.id)
