"""
Order service with transactional logic.
Handles order placement (stock reservation), status updates and cancellation.
"""
import logging
import uuid
from decimal import Decimal
from typing import List, Dict, Any, Optional
from flask import current_app, has_app_context
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models import Address, Order, OrderLine, OrderStatus, PaymentStatus, Product, User
from app.exceptions import (
    GroceryError, InvalidArgumentError, InvalidStateError, NotFoundError
)
from app.services.stock_service import decrease_stock, increase_stock
from app.blueprints.metrics import (
    orders_created_total, orders_cancelled_total, order_failures_total, stock_outs_total
)
from app.utils.clock import get_clock

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHODS = frozenset({'COD', 'CARD', 'UPI', 'WALLET', 'NETBANKING'})
TERMINAL_STATUSES = (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


def _config(key: str, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def create_order(
    session: Session,
    user_id: int,
    lines: List[Dict[str, Any]],
    payment_method: str,
    delivery_address_id: int,
    clock=None
) -> Order:
    """
    Place an order and reserve stock for every line.

    Lines are processed in input order; the first product without enough
    stock is the one reported. Everything runs in one transaction, so a
    failing line rolls back the decrements already applied for earlier lines.

    Args:
        session: SQLAlchemy session
        user_id: owner of the order
        lines: [{'product_id': int, 'quantity': int}, ...]
        payment_method: free text, stored uppercased
        delivery_address_id: address copied into the order
        clock: object with now(); defaults to the app clock

    Returns:
        Order: persisted order with its lines

    Raises:
        InvalidArgumentError: empty lines, bad quantity, unknown payment method
        NotFoundError: user, address or product missing
        InsufficientStockError: a product has less stock than requested
    """
    clock = clock or get_clock()
    logger.info(f"Creating order for user: {user_id}")

    if not lines:
        raise InvalidArgumentError('Cart items cannot be empty')

    try:
        if session.get(User, user_id) is None:
            raise NotFoundError('User', user_id)

        address = session.get(Address, delivery_address_id)
        if address is None:
            raise NotFoundError('Address', delivery_address_id)

        method = normalize_payment_method(payment_method)
        now = clock.now()

        order = Order(
            user_id=user_id,
            order_number=_unique_order_number(session, clock),
            status=OrderStatus.PENDING,
            payment_method=method,
            # COD and prepaid methods both start PENDING
            payment_status=PaymentStatus.PENDING,
            delivery_name=address.full_name,
            delivery_phone=address.phone_number,
            delivery_address=address.street,
            delivery_city=address.city,
            delivery_state=address.state,
            delivery_pincode=address.pincode,
            created_at=now,
            updated_at=now,
        )

        total_amount = Decimal('0.00')
        sold_out = 0
        for position, line in enumerate(lines):
            product_id, quantity = _parse_line(line)

            product = session.get(Product, product_id, populate_existing=True)
            if product is None:
                raise NotFoundError('Product', product_id)

            product_name = product.name
            unit_price = product.price

            if decrease_stock(session, product_id, quantity) == 0:
                sold_out += 1

            line_total = (unit_price * quantity).quantize(Decimal('0.01'))
            order.lines.append(OrderLine(
                position=position,
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=unit_price,
                line_total=line_total
            ))
            total_amount += line_total

        order.total_amount = total_amount
        session.add(order)
        session.commit()

    except GroceryError as e:
        session.rollback()
        order_failures_total.labels(reason=type(e).__name__).inc()
        raise
    except Exception:
        session.rollback()
        logger.error(f"Unexpected error creating order for user {user_id}", exc_info=True)
        raise

    orders_created_total.labels(payment_method=method).inc()
    if sold_out:
        stock_outs_total.inc(sold_out)
    logger.info(f"Order created successfully with order number: {order.order_number}")
    return order


def get_order(session: Session, order_id: int) -> Order:
    """Get order by ID."""
    order = session.get(Order, order_id)
    if order is None:
        raise NotFoundError('Order', order_id)
    return order


def get_order_by_number(session: Session, order_number: str) -> Order:
    """Get order by its human-readable number."""
    order = session.query(Order).filter(Order.order_number == order_number).first()
    if order is None:
        raise NotFoundError('Order', message=f'Order not found with order number: {order_number}')
    return order


def get_user_orders(session: Session, user_id: int, status: Optional[str] = None) -> List[Order]:
    """Orders of a user, most recent first, optionally filtered by status."""
    query = session.query(Order).filter(Order.user_id == user_id)
    if status:
        query = query.filter(Order.status == parse_status(status))
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def update_order_status(session: Session, order_id: int, status: str, clock=None) -> Order:
    """
    Overwrite the order status.

    DELIVERED stamps ``delivered_at``; no other status touches it and it is
    never cleared. No stock side effects (use ``cancel_order`` for that).
    A CANCELLED order has already released its stock and keeps that status.
    """
    clock = clock or get_clock()
    logger.info(f"Updating order {order_id} status to: {status}")

    new_status = parse_status(status)
    get_order(session, order_id)

    values = {'status': new_status}
    if new_status == OrderStatus.DELIVERED:
        values['delivered_at'] = clock.now()

    try:
        result = session.execute(
            update(Order)
            .where(Order.id == order_id, Order.status != OrderStatus.CANCELLED)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InvalidStateError('Cannot change status of a cancelled order')
        session.commit()
    except Exception:
        session.rollback()
        raise

    order = session.get(Order, order_id, populate_existing=True)
    logger.info(f"Order {order.order_number} status updated to {new_status.value}")
    return order


def cancel_order(session: Session, order_id: int) -> Order:
    """
    Cancel an order and put every line's quantity back into stock.

    The status flip is a conditional UPDATE, so of two concurrent cancels
    only one restores stock.

    Raises:
        NotFoundError: order missing, or a line's product no longer exists
            (the whole cancellation is rolled back)
        InvalidStateError: order already DELIVERED or CANCELLED
    """
    logger.info(f"Cancelling order: {order_id}")

    order = get_order(session, order_id)
    if order.status.is_terminal:
        raise InvalidStateError(f'Cannot cancel order with status: {order.status.value}')

    try:
        result = session.execute(
            update(Order)
            .where(Order.id == order_id, Order.status.notin_(TERMINAL_STATUSES))
            .values(status=OrderStatus.CANCELLED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            current = session.get(Order, order_id, populate_existing=True)
            raise InvalidStateError(f'Cannot cancel order with status: {current.status.value}')

        for line in order.lines:
            increase_stock(session, line.product_id, line.quantity)
        session.commit()
    except GroceryError:
        session.rollback()
        raise
    except Exception:
        session.rollback()
        logger.error(f"Unexpected error cancelling order {order_id}", exc_info=True)
        raise

    orders_cancelled_total.inc()
    order = session.get(Order, order_id, populate_existing=True)
    logger.info(f"Order {order.order_number} cancelled successfully")
    return order


def normalize_payment_method(payment_method: Optional[str]) -> str:
    """Uppercase and validate a payment method."""
    method = (payment_method or '').strip().upper()
    if not method:
        raise InvalidArgumentError('Payment method is required')
    allowed = _config('PAYMENT_METHODS', DEFAULT_PAYMENT_METHODS)
    if method not in allowed:
        raise InvalidArgumentError(f'Invalid payment method: {payment_method}')
    return method


def parse_status(status: Optional[str]) -> OrderStatus:
    """Map a caller-supplied string onto OrderStatus."""
    try:
        return OrderStatus((status or '').strip().upper())
    except ValueError:
        raise InvalidArgumentError(f'Invalid order status: {status}')


def generate_order_number(clock) -> str:
    """ORD-<epoch millis>-<8 random uppercase hex chars>."""
    millis = int(clock.now().timestamp() * 1000)
    return f"ORD-{millis}-{uuid.uuid4().hex[:8].upper()}"


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _unique_order_number(session: Session, clock) -> str:
    max_attempts = _config('ORDER_NUMBER_MAX_ATTEMPTS', 5)
    for _ in range(max_attempts):
        candidate = generate_order_number(clock)
        exists = session.query(Order.id).filter(Order.order_number == candidate).first()
        if not exists:
            return candidate
        logger.warning(f"Order number collision on {candidate}, retrying")
    raise GroceryError('Could not generate a unique order number', 500)


def _parse_line(line: Dict[str, Any]):
    try:
        product_id = int(line['product_id'])
        quantity = line['quantity']
    except (KeyError, TypeError, ValueError):
        raise InvalidArgumentError('Each item needs a product_id and a quantity')

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidArgumentError('Quantity must be at least 1')
    return product_id, quantity
