#shop/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import get_current_user
from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import AddItemIn, SetQuantityIn, CartOut
from shop.services.cart_service import CartService

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


@router.post("/add-item", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CartService(db).add_item(user.id, payload.product_id, payload.quantity)


@router.get("/get", response_model=CartOut)
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return CartService(db).get_cart(user.id)


@router.delete("/remove-item/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CartService(db).remove_item(user.id, product_id)


@router.put("/update-quantity/{product_id}", response_model=CartOut)
def update_quantity(
    product_id: int,
    payload: SetQuantityIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CartService(db).set_item_quantity(user.id, product_id, payload.quantity)


@router.delete("/clear-all", response_model=CartOut)
def clear_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return CartService(db).clear(user.id)
