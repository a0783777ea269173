"""Address model."""
from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, IdType


ADDRESS_TYPES = ('home', 'work', 'other')


class Address(Base):
    """Delivery address in a user's address book."""

    __tablename__ = 'address'

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(IdType, ForeignKey('app_user.id'), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=False)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address_type = Column(String(50), nullable=False, default='home')
    is_default = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship('User', back_populates='addresses')

    @property
    def street(self):
        """Single-line street address: line 1, plus line 2 when present."""
        if self.address_line2:
            return f"{self.address_line1}, {self.address_line2}"
        return self.address_line1

    def __repr__(self):
        return f"<Address(id={self.id}, user_id={self.user_id}, city='{self.city}')>"
