"""
Unit tests for SQLAlchemy models.
"""

import pytest
from decimal import Decimal
from app.models import User, Product, CartItem, OrderStatus
from app.utils.serializers import money


class TestUserModel:
    """Tests for User model."""

    def test_password_hashing(self):
        user = User(name='Test', email='user@test.com')
        user.set_password('mypassword')

        assert user.password_hash != 'mypassword'
        assert user.check_password('mypassword') is True
        assert user.check_password('wrongpassword') is False

    def test_user_email_unique(self, session, user):
        duplicate = User(name='Duplicate', email=user.email, password_hash='x')
        session.add(duplicate)

        with pytest.raises(Exception):  # IntegrityError
            session.commit()


class TestProductModel:
    """Tests for Product model."""

    def test_tag_list(self):
        assert Product(tags='organic, local,,fresh').tag_list == ['organic', 'local', 'fresh']
        assert Product(tags=None).tag_list == []

    def test_stock_cannot_go_negative(self, session, apple):
        apple.stock = -1

        with pytest.raises(Exception):  # IntegrityError (check constraint)
            session.commit()


def test_address_street(address):
    assert address.street == '12 MG Road, Flat 4B'
    address.address_line2 = None
    assert address.street == '12 MG Road'


def test_cart_item_line_total():
    item = CartItem(quantity=3, price_at_add=Decimal('40.50'))
    assert item.line_total == Decimal('121.50')


@pytest.mark.parametrize('status, terminal', [
    (OrderStatus.PENDING, False),
    (OrderStatus.CONFIRMED, False),
    (OrderStatus.SHIPPED, False),
    (OrderStatus.DELIVERED, True),
    (OrderStatus.CANCELLED, True),
])
def test_order_status_terminal(status, terminal):
    assert status.is_terminal is terminal


def test_money_formatting():
    assert money(Decimal('5')) == '5.00'
    assert money(None) is None
