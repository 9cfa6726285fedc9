from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from shop.data.models.cart import CartModel
from shop.data.models.cart_item import CartItemModel
from shop.repos.cart_repo import CartRepo
from shop.repos.product_repo import ProductRepo
from shop.domain.enums import CartStatus
from shop.domain.errors import ValidationError, NotFoundError, InsufficientStockError
from shop.domain.schemas import ProductOut
from shop.utils.settings import CART_TTL_SECONDS
from shop.utils.logging import get_logger

logger = get_logger(__name__)

EMPTY_TOTAL = Decimal("0.00")


class CartService:
    """
    Use cases for the cart domain, one cart per user.
    commands (add, set quantity, remove, clear) change state,
    query (get) only reads.

    Prices are snapshotted when a line is first added and never refreshed.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)

        #no cart yet is an empty cart, not an error
        if not cart:
            return {"items": [], "total_price": EMPTY_TOTAL}

        return self._to_dict(cart)

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        cart = self._get_or_create(user_id)

        existing_item = self.repo.get_cart_item(cart.id, product_id)
        if existing_item:
            #no stock check on add, the snapshot price stays
            logger.info(
                f"Product {product_id} already in cart {cart.id}, raising quantity "
                f"from {existing_item.quantity} to {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id} at {product.price}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product_id,
                    quantity=quantity,
                    price_at_addition=product.price,
                )
            )

        self.repo.commit()
        return self._to_dict(self.repo.refresh(cart))

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        self.repo.delete_cart_item(item)
        self.repo.commit()

        logger.info(f"Product {product_id} removed from cart {cart.id}")
        return self._to_dict(self.repo.refresh(cart))

    def set_item_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity is None or quantity < 0:
            raise ValidationError("Quantity must be a non-negative number")

        if quantity == 0:
            return self.remove_item(user_id, product_id)

        cart = self.repo.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        product = self.products.get_product(product_id)
        if not product:
            #stale line, product was deleted from the catalog
            self.repo.delete_cart_item(item)
            self.repo.commit()
            logger.warning(f"Purged stale product {product_id} from cart {cart.id}")
            raise NotFoundError("Product not found, removed from cart")

        if product.quantity < quantity:
            raise InsufficientStockError(
                f"Only {product.quantity} of {product.name} are available in stock",
                available=product.quantity,
            )

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart {cart.id}: product {product_id} quantity set to {quantity}")
        return self._to_dict(self.repo.refresh(cart))

    def clear(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)
        if not cart:
            return {"items": [], "total_price": EMPTY_TOTAL}

        self.repo.clear_items(cart)
        self.repo.commit()

        logger.info(f"Cart {cart.id} cleared")
        return self._to_dict(self.repo.refresh(cart))

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_by_user(user_id)
        if cart:
            return cart

        expires = datetime.now(timezone.utc) + timedelta(seconds=CART_TTL_SECONDS)
        try:
            cart = self.repo.create_cart(
                CartModel(
                    user_id=user_id,
                    status=CartStatus.ACTIVE.value,
                    expires_at=expires,
                )
            )
        except IntegrityError:
            #concurrent first add already created it
            self.repo.rollback()
            return self.repo.get_by_user(user_id)

        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    def _to_dict(self, cart: CartModel) -> Dict[str, Any]:
        products = self.products.get_products(i.product_id for i in cart.items)
        total = sum((i.price_at_addition * i.quantity for i in cart.items), EMPTY_TOTAL)

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "items": [
                {
                    "product_id": i.product_id,
                    "product": (
                        ProductOut.model_validate(products[i.product_id])
                        if i.product_id in products else None
                    ),
                    "quantity": i.quantity,
                    "price_at_addition": i.price_at_addition,
                }
                for i in cart.items
            ],
            "total_price": total,
            "expires_at": cart.expires_at,
        }
