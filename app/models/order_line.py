"""Order Line model."""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, IdType


class OrderLine(Base):
    """Immutable snapshot of one product's quantity and price within an order."""

    __tablename__ = 'order_line'

    id = Column(IdType, primary_key=True, autoincrement=True)
    order_id = Column(IdType, ForeignKey('customer_order.id'), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # input order of the line
    # Plain reference: products may be deleted after the order was placed
    product_id = Column(IdType, nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)

    # Relationships
    order = relationship('Order', back_populates='lines')

    def __repr__(self):
        return f"<OrderLine(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
