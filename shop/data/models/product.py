#shop/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shop.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    #stock, decremented on order placement
    quantity = Column(Integer, nullable=False, default=0)
    photo = Column(String, nullable=True)
    shipping = Column(Boolean, nullable=False, default=False)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    category = relationship("CategoryModel", lazy="joined")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
