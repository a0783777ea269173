"""Models package - exports all SQLAlchemy models."""
from app.models.user import User
from app.models.category import Category
from app.models.subcategory import Subcategory
from app.models.brand import Brand
from app.models.product import Product
from app.models.cart import Cart, CartItem
from app.models.address import Address, ADDRESS_TYPES
from app.models.order import Order, OrderStatus, PaymentStatus
from app.models.order_line import OrderLine

__all__ = [
    'User',
    'Category', 'Subcategory', 'Brand', 'Product',
    'Cart', 'CartItem',
    'Address', 'ADDRESS_TYPES',
    'Order', 'OrderStatus', 'PaymentStatus', 'OrderLine',
]
