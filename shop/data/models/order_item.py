from sqlalchemy import Column, Integer, ForeignKey, String, Numeric

from shop.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    price_at_addition = Column(Numeric(10, 2), nullable=False)
    #denormalized for order history
    name = Column(String, nullable=False)
    photo = Column(String, nullable=True)
