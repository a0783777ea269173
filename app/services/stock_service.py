"""
Stock ledger service.

Single choke point for changes to ``Product.stock`` and ``Product.is_available``.
Both operations run as one conditional UPDATE so the check and the write
cannot interleave with another request.
They only flush; the caller owns the transaction (commit/rollback).
"""
import logging
from sqlalchemy import update, case
from sqlalchemy.orm import Session
from app.models import Product
from app.exceptions import InvalidArgumentError, NotFoundError, InsufficientStockError

logger = logging.getLogger(__name__)


def _validate_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidArgumentError('Quantity must be a positive integer')


def _reload(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id, populate_existing=True)
    if product is None:
        raise NotFoundError('Product', product_id)
    return product


def decrease_stock(session: Session, product_id: int, quantity: int) -> int:
    """
    Take ``quantity`` units out of stock.

    Runs ``UPDATE product SET stock = stock - :n WHERE id = :id AND stock >= :n``
    and flips ``is_available`` off in the same statement when stock reaches 0.

    Returns:
        int: stock left after the decrease

    Raises:
        InvalidArgumentError: quantity is not a positive integer
        NotFoundError: product does not exist
        InsufficientStockError: stock < quantity (nothing is changed)
    """
    _validate_quantity(quantity)
    session.flush()
    logger.info(f"Decreasing stock for product {product_id} by {quantity}")

    result = session.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock >= quantity)
        .values(
            stock=Product.stock - quantity,
            is_available=case((Product.stock == quantity, False), else_=Product.is_available),
        )
        .execution_options(synchronize_session=False)
    )

    product = _reload(session, product_id)

    if result.rowcount == 0:
        logger.warning(
            f"Insufficient stock for '{product.name}': requested {quantity}, available {product.stock}"
        )
        raise InsufficientStockError(product.name, quantity, product.stock)

    if product.stock == 0:
        logger.info(f"Product '{product.name}' is now out of stock")

    logger.info(f"Stock decreased. New stock for product {product_id}: {product.stock}")
    return product.stock


def increase_stock(session: Session, product_id: int, quantity: int) -> int:
    """
    Put ``quantity`` units back into stock (restock, cancelled order).

    Marks the product available again when it was unavailable and ends with
    stock > 0. Never marks a product unavailable.

    Returns:
        int: stock after the increase

    Raises:
        InvalidArgumentError: quantity is not a positive integer
        NotFoundError: product does not exist
    """
    _validate_quantity(quantity)
    session.flush()
    logger.info(f"Increasing stock for product {product_id} by {quantity}")

    result = session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            stock=Product.stock + quantity,
            is_available=case((Product.stock + quantity > 0, True), else_=Product.is_available),
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        raise NotFoundError('Product', product_id)

    product = _reload(session, product_id)
    logger.info(f"Stock increased. New stock for product {product_id}: {product.stock}")
    return product.stock


def get_stock_level(session: Session, product_id: int) -> dict:
    """Current stock and availability of a product."""
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product', product_id)
    return {
        'product_id': product.id,
        'product_name': product.name,
        'stock': product.stock,
        'is_available': product.is_available,
    }
