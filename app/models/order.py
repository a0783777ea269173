"""Order model."""
from sqlalchemy import Column, String, Numeric, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, IdType
import enum


class OrderStatus(str, enum.Enum):
    """Order lifecycle status."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self):
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(str, enum.Enum):
    """Payment status of an order."""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class Order(Base):
    """Placed order with a point-in-time snapshot of prices and delivery address."""

    __tablename__ = 'customer_order'

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(IdType, ForeignKey('app_user.id'), nullable=False, index=True)
    order_number = Column(String(64), nullable=False, unique=True, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(Enum(OrderStatus, name='order_status'), nullable=False, default=OrderStatus.PENDING)
    payment_method = Column(String(20), nullable=False)
    payment_status = Column(
        Enum(PaymentStatus, name='payment_status'), nullable=False, default=PaymentStatus.PENDING
    )

    # Delivery address snapshot (copied, not referenced)
    delivery_name = Column(String(255), nullable=False)
    delivery_phone = Column(String(20), nullable=False)
    delivery_address = Column(String(512), nullable=False)
    delivery_city = Column(String(100), nullable=False)
    delivery_state = Column(String(100), nullable=False)
    delivery_pincode = Column(String(10), nullable=False)

    delivered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship('User')
    lines = relationship(
        'OrderLine', back_populates='order', cascade='all, delete-orphan', order_by='OrderLine.position'
    )

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', status={self.status.value})>"
