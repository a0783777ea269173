"""Product model."""
from sqlalchemy import (
    Column, String, Text, Integer, Boolean, Numeric, DateTime, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, IdType


class Product(Base):
    """Product model.

    ``stock`` and ``is_available`` belong to the stock ledger
    (``app.services.stock_service``); order and cart code only read them.
    """

    __tablename__ = 'product'
    __table_args__ = (
        CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
    )

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    mrp = Column(Numeric(10, 2), nullable=True)
    category_id = Column(IdType, ForeignKey('category.id'), nullable=False, index=True)
    subcategory_id = Column(IdType, ForeignKey('subcategory.id'), nullable=True, index=True)
    brand_id = Column(IdType, ForeignKey('brand.id'), nullable=True, index=True)
    stock = Column(Integer, nullable=False, default=0, server_default='0')
    unit = Column(String(20), nullable=True)  # kg, g, l, ml, pcs
    quantity_per_unit = Column(Numeric(10, 2), nullable=True)
    weight_quantity = Column(String(50), nullable=True)  # "500 g", "1 kg"
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=0, server_default='0')
    rating = Column(Numeric(3, 2), nullable=False, default=0, server_default='0')
    review_count = Column(Integer, nullable=False, default=0, server_default='0')
    image_url = Column(Text, nullable=True)
    tags = Column(Text, nullable=True)  # comma separated
    is_available = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_trending = Column(Boolean, nullable=False, default=False)
    is_new_arrival = Column(Boolean, nullable=False, default=False)
    min_order_quantity = Column(Integer, nullable=False, default=1, server_default='1')
    max_order_quantity = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship('Category', back_populates='products')
    subcategory = relationship('Subcategory')
    brand = relationship('Brand')

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"

    @property
    def tag_list(self):
        """Tags as a list (stored comma separated)."""
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(',') if tag.strip()]
