# shop/domain/enums.py
from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class CartStatus(str, Enum):
    # converted/abandoned are reserved for cart lifecycle automation
    ACTIVE = "active"
    CONVERTED = "converted"
    ABANDONED = "abandoned"


class OrderStatus(str, Enum):
    NOT_PROCESSED = "Not Processed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


CASH_ON_DELIVERY = "cod"
