# shop/services/order_service.py
from decimal import Decimal
from typing import Dict, Any, Iterable

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from shop.data.models.order import OrderModel
from shop.data.models.order_item import OrderItemModel
from shop.repos.order_repo import OrderRepo
from shop.repos.product_repo import ProductRepo
from shop.repos.user_repo import UserRepo
from shop.repos.cart_repo import CartRepo
from shop.domain.enums import OrderStatus, PaymentStatus, CASH_ON_DELIVERY
from shop.domain.errors import ValidationError, NotFoundError, InsufficientStockError
from shop.domain.schemas import OrderLineIn
from shop.utils.logging import get_logger

logger = get_logger(__name__)

#client total may differ by this much before a mismatch is logged
TOTAL_EPSILON = Decimal("0.01")
CENTS = Decimal("0.01")

#no payment gateway, placeholder
TRANSACTION_PLACEHOLDER = "N/A"


class OrderService:
    """
    Service for the order domain.

    Placement writes the order first, then applies the stock decrements as one
    bulk write, then clears the cart. The three steps are separate
    transactions; an order whose later step failed is flagged
    `reconciliation_pending` and picked up by tasks/reconcile.py.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.carts = CartRepo(db)

    def place_order(
        self,
        user_id: int,
        cart_items: Iterable[OrderLineIn],
        declared_total: Decimal | None,
        payment_method: str | None,
    ) -> Dict[str, Any]:
        """
        Use Case: placing an order.

        1. Validates the request and the buyer's address
        2. Checks live stock and prices every line at the current price
        3. Creates the order with the server-computed total
        4. Applies the stock decrements (bulk)
        5. Clears the buyer's cart
        """
        cart_items = list(cart_items or [])
        if not cart_items:
            raise ValidationError("Cart is empty. Cannot place order.")
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required.")

        buyer = self.users.get_user(user_id)
        if not buyer or not buyer.address:
            raise ValidationError(
                "Please update your delivery address in your profile before placing an order."
            )

        products = self.products.get_products(line.product_id for line in cart_items)

        calculated_total = Decimal("0.00")
        order_lines = []
        requested: Dict[int, int] = {}

        for line in cart_items:
            product = products.get(line.product_id)
            if not product:
                raise NotFoundError(f"Product not found: {line.product_id}")

            #the same product on two lines counts against one stock
            requested[product.id] = requested.get(product.id, 0) + line.quantity
            if product.quantity < requested[product.id]:
                raise InsufficientStockError(
                    f"Not enough stock for {product.name}. Available: {product.quantity}",
                    available=product.quantity,
                )

            #current catalog price, never the client's
            price = Decimal(product.price)
            calculated_total += price * line.quantity

            order_lines.append(
                OrderItemModel(
                    product_id=product.id,
                    quantity=line.quantity,
                    price_at_addition=price,
                    name=product.name,
                    photo=product.photo,
                )
            )

        calculated_total = calculated_total.quantize(CENTS)
        stock_deltas = [{"product_id": pid, "delta": qty} for pid, qty in requested.items()]

        if declared_total is not None and abs(calculated_total - Decimal(declared_total)) > TOTAL_EPSILON:
            logger.warning(
                f"Client total mismatch for user {user_id}. Client: {declared_total}, "
                f"server: {calculated_total}. Proceeding with server total."
            )

        method = payment_method.strip()
        order = OrderModel(
            buyer_id=user_id,
            payment_method=method,
            payment_status=(
                PaymentStatus.PENDING.value if method == CASH_ON_DELIVERY else PaymentStatus.PAID.value
            ),
            transaction_id=TRANSACTION_PLACEHOLDER,
            total_amount=calculated_total,
            shipping_address=buyer.address,
            order_status=OrderStatus.NOT_PROCESSED.value,
            products=order_lines,
        )
        created = self.repo.create_order(order)
        logger.info(f"Order {created.id} created for user {user_id}, total {calculated_total}")

        self._apply_stock(created, stock_deltas)
        self._clear_cart(created, user_id)

        return self.to_dict(created)

    def list_for_buyer(self, user_id: int) -> list[Dict[str, Any]]:
        return [self.to_dict(o) for o in self.repo.list_for_buyer(user_id)]

    def list_all(self) -> list[Dict[str, Any]]:
        return [self.to_dict(o) for o in self.repo.list_all()]

    @staticmethod
    def statuses() -> list[str]:
        return [s.value for s in OrderStatus]

    def set_status(self, order_id: int, status: str) -> Dict[str, Any]:
        """Any status may follow any other; only membership is checked."""
        allowed = self.statuses()
        if status not in allowed:
            raise ValidationError(
                f"Invalid order status. Allowed values are: {', '.join(allowed)}"
            )

        order = self.repo.update_order_status(order_id, status)
        if not order:
            raise NotFoundError("Order not found")

        logger.info(f"Order {order_id} status set to {status}")
        return self.to_dict(order)

    def reconcile_pending(self) -> int:
        """
        Re-applies the stock step of flagged orders and clears the flag.
        Cart clearing is not retried: the cart may hold new items by now.
        """
        done = 0
        for order in self.repo.list_pending_reconciliation():
            try:
                if not order.stock_applied:
                    self.products.decrement_stock(
                        [{"product_id": line.product_id, "delta": line.quantity} for line in order.products]
                    )
                    order.stock_applied = True
                order.reconciliation_pending = False
                self.repo.commit()
                done += 1
                logger.info(f"Order {order.id} reconciled")
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Order {order.id} still pending reconciliation: {e}")
        return done

    def _apply_stock(self, order: OrderModel, stock_deltas: list[dict]) -> None:
        #decrement and marker commit together, a retry never double-counts
        try:
            self.products.decrement_stock(stock_deltas)
            order.stock_applied = True
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Stock update failed for order {order.id}: {e}")
            self._flag_for_reconciliation(order)

    def _clear_cart(self, order: OrderModel, user_id: int) -> None:
        try:
            cart = self.carts.get_by_user(user_id)
            if cart:
                self.carts.clear_items(cart)
                self.carts.commit()
        except SQLAlchemyError as e:
            self.carts.rollback()
            logger.error(f"Clearing cart of user {user_id} failed after order {order.id}: {e}")
            self._flag_for_reconciliation(order)

    def _flag_for_reconciliation(self, order: OrderModel) -> None:
        order.reconciliation_pending = True
        self.repo.commit()
        logger.warning(f"Order {order.id} flagged for reconciliation")

    @staticmethod
    def to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "products": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "price_at_addition": line.price_at_addition,
                    "name": line.name,
                    "photo": line.photo,
                }
                for line in order.products
            ],
            "payment": {
                "method": order.payment_method,
                "status": order.payment_status,
                "transaction_id": order.transaction_id,
            },
            "buyer": {
                "id": order.buyer.id,
                "name": order.buyer.name,
                "email": order.buyer.email,
            },
            "total_amount": order.total_amount,
            "shipping_address": order.shipping_address,
            "order_status": order.order_status,
            "reconciliation_pending": order.reconciliation_pending,
            "created_at": order.created_at,
        }
