#import every model so Base.metadata knows all tables before create_all

from shop.data.models.user import UserModel
from shop.data.models.category import CategoryModel
from shop.data.models.product import ProductModel
from shop.data.models.cart import CartModel
from shop.data.models.cart_item import CartItemModel
from shop.data.models.order import OrderModel
from shop.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
