import pytest
from datetime import datetime
from decimal import Decimal
import uuid

from app import create_app
from app.database import get_session, drop_tables
from app.models import User, Address, Category, Product
from app.utils.clock import FixedClock


# SQLite hands back naive datetimes, so the test clock is naive too
START = datetime(2024, 3, 1, 9, 30, 0)


@pytest.fixture(scope='function')
def app():
    """Create application instance for testing (fresh in-memory database)."""
    app = create_app('config.TestConfig')
    app.extensions['clock'] = FixedClock(START)

    with app.app_context():
        yield app
        get_session().rollback()
        drop_tables()


@pytest.fixture(scope='function')
def clock(app):
    return app.extensions['clock']


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Create database session for testing."""
    session = get_session()
    yield session
    session.rollback()


def make_user(session, email=None, name='Test Shopper', password='password123'):
    suffix = str(uuid.uuid4())[:8]
    user = User(
        name=name,
        email=email or f'shopper-{suffix}@test.com',
        phone_number='9876543210'
    )
    user.set_password(password)
    session.add(user)
    session.commit()
    return user


def make_address(session, user_id, **overrides):
    fields = dict(
        user_id=user_id,
        full_name='Asha Rao',
        phone_number='9876543210',
        address_line1='12 MG Road',
        address_line2='Flat 4B',
        city='Bengaluru',
        state='Karnataka',
        pincode='560001',
        address_type='home',
        is_default=True,
    )
    fields.update(overrides)
    address = Address(**fields)
    session.add(address)
    session.commit()
    return address


def make_product(session, category_id, name='Apple', price='120.00', stock=10, **overrides):
    product = Product(
        name=name,
        price=Decimal(price),
        mrp=Decimal(price),
        category_id=category_id,
        stock=stock,
        is_available=stock > 0,
        **overrides
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def user(session):
    """Create a registered shopper."""
    return make_user(session)


@pytest.fixture(scope='function')
def other_user(session):
    return make_user(session, name='Other Shopper')


@pytest.fixture(scope='function')
def admin_user(session):
    """Shopper whose email is listed in ADMIN_EMAILS."""
    return make_user(session, email='admin@grocery.test', name='Store Admin')


@pytest.fixture(scope='function')
def address(session, user):
    return make_address(session, user.id)


@pytest.fixture(scope='function')
def category(session):
    category = Category(name='Fresh Fruits', display_order=1, is_active=True)
    session.add(category)
    session.commit()
    return category


@pytest.fixture(scope='function')
def apple(session, category):
    """Product with 10 units at 120.00."""
    return make_product(session, category.id, name='Apple', price='120.00', stock=10)


@pytest.fixture(scope='function')
def banana(session, category):
    """Product with 5 units at 40.50."""
    return make_product(session, category.id, name='Banana', price='40.50', stock=5)


def bearer(user):
    """Authorization header for ``user`` (requires an app context)."""
    from app.services.auth_service import generate_token
    return {'Authorization': f'Bearer {generate_token(user)}'}


@pytest.fixture(scope='function')
def auth_headers(app, user):
    return bearer(user)


@pytest.fixture(scope='function')
def admin_headers(app, admin_user):
    return bearer(admin_user)


@pytest.fixture(scope='function')
def product_factory(session, category):
    """Build extra products in the default category."""
    def factory(name, price='10.00', stock=10, **overrides):
        return make_product(session, category.id, name=name, price=price, stock=stock, **overrides)
    return factory


@pytest.fixture(scope='function')
def address_factory(session):
    def factory(user_id, **overrides):
        return make_address(session, user_id, **overrides)
    return factory


@pytest.fixture(scope='function')
def other_headers(app, other_user):
    return bearer(other_user)
