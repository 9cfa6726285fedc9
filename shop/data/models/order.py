from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from shop.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False, default="pending")
    transaction_id = Column(String, nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(String, nullable=False)
    order_status = Column(String, nullable=False, default="Not Processed")

    #saga markers, see tasks/reconcile.py
    stock_applied = Column(Boolean, nullable=False, default=False)
    reconciliation_pending = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    products = relationship(
        "OrderItemModel",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
        lazy="selectin",
    )
    buyer = relationship("UserModel", lazy="joined")
