"""Cart and CartItem models."""
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, IdType


class Cart(Base):
    """Shopping cart - one per user."""

    __tablename__ = 'cart'

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(IdType, ForeignKey('app_user.id'), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship('User', back_populates='cart')
    items = relationship(
        'CartItem', back_populates='cart', cascade='all, delete-orphan', order_by='CartItem.id'
    )

    def __repr__(self):
        return f"<Cart(id={self.id}, user_id={self.user_id})>"


class CartItem(Base):
    """Cart line; price is snapshotted when the product is first added."""

    __tablename__ = 'cart_item'
    __table_args__ = (
        UniqueConstraint('cart_id', 'product_id', name='uq_cart_item_product'),
    )

    id = Column(IdType, primary_key=True, autoincrement=True)
    cart_id = Column(IdType, ForeignKey('cart.id'), nullable=False, index=True)
    product_id = Column(IdType, ForeignKey('product.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_at_add = Column(Numeric(10, 2), nullable=False)

    # Relationships
    cart = relationship('Cart', back_populates='items')
    product = relationship('Product')

    @property
    def line_total(self):
        return self.price_at_add * self.quantity

    def __repr__(self):
        return f"<CartItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
