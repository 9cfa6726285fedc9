# shop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from shop.domain.enums import Role, OrderStatus


# ---------------------------------------------------------------- auth

class RegisterIn(BaseModel):
    """Missing fields are checked by UserService so the first one can be reported by name."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    answer: Optional[str] = None
    role: Role = Role.USER


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordIn(BaseModel):
    email: Optional[str] = None
    answer: Optional[str] = None
    new_password: Optional[str] = Field(None, alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class ProfileUpdateIn(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: Optional[str] = None
    role: Role

    model_config = ConfigDict(from_attributes=True)


class LoginOut(BaseModel):
    token: str
    user: UserOut


class OkOut(BaseModel):
    ok: bool = True


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- catalog

class CategoryIn(BaseModel):
    name: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    created_by: int

    model_config = ConfigDict(from_attributes=True)


class ProductFields(BaseModel):
    """
    Typed record for the multipart product form.
    Presence of required fields is checked by ProductService so the first
    missing one can be reported by name.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category: Optional[int] = None
    quantity: Optional[int] = Field(None, ge=0)
    shipping: bool = False


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    price: Decimal
    category_id: int
    category: Optional[CategoryOut] = None
    quantity: int
    photo: Optional[str] = None
    shipping: bool
    created_by: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PublicProductOut(BaseModel):
    """Photo-less payload for stock checks."""

    id: int
    name: str
    slug: str
    price: Decimal
    category_id: int
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class ProductFilterIn(BaseModel):
    keyword: Optional[str] = None
    checked: List[int] = Field(default_factory=list, description="category ids")
    radio: List[Decimal] = Field(default_factory=list, description="[min, max] price, inclusive")


class AdminFilterIn(BaseModel):
    keyword: Optional[str] = None


class ProductListOut(BaseModel):
    products: List[ProductOut]
    total: int


class PublicProductListOut(BaseModel):
    products: List[PublicProductOut]
    total: int


# ---------------------------------------------------------------- cart

class AddItemIn(BaseModel):
    product_id: int = Field(..., alias="productId", gt=0)
    quantity: int = Field(1, gt=0)

    model_config = ConfigDict(populate_by_name=True)


class SetQuantityIn(BaseModel):
    quantity: int = Field(..., ge=0, description="0 removes the line")


class CartItemOut(BaseModel):
    product_id: int
    product: Optional[ProductOut] = None
    quantity: int
    price_at_addition: Decimal


class CartOut(BaseModel):
    cart_id: Optional[int] = None
    user_id: Optional[int] = None
    status: Optional[str] = None
    items: List[CartItemOut] = Field(default_factory=list)
    total_price: Decimal = Decimal("0.00")
    expires_at: Optional[datetime] = None


# ---------------------------------------------------------------- orders

class OrderLineIn(BaseModel):
    product_id: int = Field(..., alias="product")
    quantity: int = Field(..., gt=0)

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderIn(BaseModel):
    cart_items: List[OrderLineIn] = Field(default_factory=list, alias="cartItems")
    total_amount: Optional[Decimal] = Field(None, alias="totalAmount")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


class OrderStatusIn(BaseModel):
    status: str


class OrderLineOut(BaseModel):
    product_id: int
    quantity: int
    price_at_addition: Decimal
    name: str
    photo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentOut(BaseModel):
    method: str
    status: str
    transaction_id: Optional[str] = None


class BuyerOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    products: List[OrderLineOut]
    payment: PaymentOut
    buyer: BuyerOut
    total_amount: Decimal
    shipping_address: str
    order_status: OrderStatus
    reconciliation_pending: bool = False
    created_at: datetime


class OrderStatusesOut(BaseModel):
    statuses: List[OrderStatus]
