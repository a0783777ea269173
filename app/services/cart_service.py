"""Cart service - persistent per-user cart (validates stock, never reserves it)."""
import logging
from sqlalchemy.orm import Session
from app.models import Cart, CartItem, Product, User
from app.exceptions import InvalidArgumentError, InsufficientStockError, NotFoundError

logger = logging.getLogger(__name__)


def get_or_create_cart(session: Session, user_id: int) -> Cart:
    """
    Get existing cart or create new one for user.
    One cart per user.
    """
    cart = session.query(Cart).filter(Cart.user_id == user_id).first()

    if not cart:
        if session.get(User, user_id) is None:
            raise NotFoundError('User', user_id)
        logger.info(f"Creating new cart for user: {user_id}")
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.flush()

    return cart


def get_cart(session: Session, user_id: int) -> Cart:
    cart = get_or_create_cart(session, user_id)
    session.commit()
    return cart


def add_item(session: Session, user_id: int, product_id: int, quantity: int) -> Cart:
    """Add product to cart or merge quantity into the existing line."""
    logger.info(f"Adding item to cart for user: {user_id}, productId: {product_id}, quantity: {quantity}")
    _validate_quantity(quantity)

    product = _get_product(session, product_id)
    if product.stock < quantity:
        raise InsufficientStockError(product.name, quantity, product.stock)

    cart = get_or_create_cart(session, user_id)

    item = session.query(CartItem).filter(
        CartItem.cart_id == cart.id,
        CartItem.product_id == product_id
    ).first()

    if item:
        new_quantity = item.quantity + quantity
        if product.stock < new_quantity:
            raise InsufficientStockError(product.name, new_quantity, product.stock)
        item.quantity = new_quantity
        logger.info(f"Updated existing cart item quantity to: {new_quantity}")
    else:
        item = CartItem(
            cart_id=cart.id,
            product_id=product_id,
            quantity=quantity,
            price_at_add=product.price
        )
        cart.items.append(item)
        logger.info(f"Created new cart item for product: {product.name}")

    session.commit()
    return cart


def update_item(session: Session, user_id: int, item_id: int, quantity: int) -> Cart:
    """Set the quantity of a line in the user's cart."""
    logger.info(f"Updating cart item: {item_id} for user: {user_id} with quantity: {quantity}")
    _validate_quantity(quantity)

    cart = session.query(Cart).filter(Cart.user_id == user_id).first()
    if not cart:
        raise NotFoundError('Cart', message=f'Cart not found for user: {user_id}')

    item = session.get(CartItem, item_id)
    if item is None or item.cart_id != cart.id:
        raise NotFoundError('Cart item', item_id)

    product = _get_product(session, item.product_id)
    if product.stock < quantity:
        raise InsufficientStockError(product.name, quantity, product.stock)

    item.quantity = quantity
    session.commit()
    return cart


def remove_item(session: Session, item_id: int, user_id: int = None) -> None:
    """Remove a line; when user_id is given the line must belong to that user's cart."""
    logger.info(f"Removing cart item: {item_id}")

    item = session.get(CartItem, item_id)
    if item is None or (user_id is not None and item.cart.user_id != user_id):
        raise NotFoundError('Cart item', item_id)

    item.cart.items.remove(item)
    session.commit()


def clear_cart(session: Session, user_id: int) -> None:
    logger.info(f"Clearing cart for user: {user_id}")

    cart = session.query(Cart).filter(Cart.user_id == user_id).first()
    if not cart:
        raise NotFoundError('Cart', message=f'Cart not found for user: {user_id}')

    cart.items.clear()
    session.commit()
    logger.info(f"Cart cleared successfully for user: {user_id}")


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id, populate_existing=True)
    if product is None:
        raise NotFoundError('Product', product_id)
    return product


def _validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidArgumentError('Quantity must be at least 1')
