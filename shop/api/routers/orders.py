# shop/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import get_current_user, require_admin
from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import PlaceOrderIn, OrderOut, OrderStatusIn, OrderStatusesOut
from shop.services.order_service import OrderService

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("/place-order", response_model=OrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Prices come from the catalog; totalAmount from the client is only compared.
    """
    return OrderService(db).place_order(
        user.id,
        payload.cart_items,
        payload.total_amount,
        payload.payment_method,
    )


@router.get("/user-orders", response_model=List[OrderOut])
def user_orders(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return OrderService(db).list_for_buyer(user.id)


@router.get("/all-orders", response_model=List[OrderOut])
def all_orders(_: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return OrderService(db).list_all()


@router.get("/order-statuses", response_model=OrderStatusesOut)
def order_statuses(_: UserModel = Depends(require_admin)):
    return {"statuses": OrderService.statuses()}


@router.put("/order-status/{order_id}", response_model=OrderOut)
def set_order_status(
    order_id: int,
    payload: OrderStatusIn,
    _: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderService(db).set_status(order_id, payload.status)
