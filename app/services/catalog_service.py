"""Catalog service: categories, subcategories, brands and products."""
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Dict, Any, Optional
from flask import current_app, has_app_context
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from app.models import Brand, CartItem, Category, Product, Subcategory
from app.exceptions import InvalidArgumentError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)


# =====================================================
# PRODUCTS
# =====================================================

def create_product(session: Session, data: Dict[str, Any]) -> Product:
    """Create a product; category is required, subcategory/brand optional."""
    logger.info(f"Creating new product: {data.get('name')}")

    product = Product()
    _apply_product_fields(session, product, data, creating=True)

    session.add(product)
    session.commit()

    logger.info(f"Product created successfully with ID: {product.id}")
    return product


def update_product(session: Session, product_id: int, data: Dict[str, Any]) -> Product:
    """Replace every editable field of a product (PUT semantics). Stock is left to the ledger."""
    logger.info(f"Updating product with ID: {product_id}")

    product = get_product(session, product_id)
    _apply_product_fields(session, product, data)
    session.commit()

    logger.info(f"Product updated successfully with ID: {product.id}")
    return product


def delete_product(session: Session, product_id: int) -> None:
    """Delete a product and drop it from every cart. Past orders keep their snapshot."""
    logger.info(f"Deleting product with ID: {product_id}")

    product = get_product(session, product_id)
    session.query(CartItem).filter(CartItem.product_id == product_id).delete(synchronize_session=False)
    session.delete(product)
    session.commit()

    logger.info(f"Product deleted successfully with ID: {product_id}")


def get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product', product_id)
    return product


def list_products(session: Session) -> List[Product]:
    return session.query(Product).order_by(Product.name).all()


def list_products_by_category(session: Session, category_id: int) -> List[Product]:
    return session.query(Product).filter(Product.category_id == category_id).order_by(Product.name).all()


def list_products_by_subcategory(session: Session, subcategory_id: int) -> List[Product]:
    return session.query(Product).filter(Product.subcategory_id == subcategory_id).order_by(Product.name).all()


def list_featured_products(session: Session) -> List[Product]:
    return session.query(Product).filter(Product.is_featured.is_(True)).order_by(Product.name).all()


def search_products(session: Session, term: Optional[str]) -> List[Product]:
    """
    Case-insensitive match on product name, description or category name.

    Terms shorter than SEARCH_MIN_LENGTH (after trimming) return no results.
    """
    min_length = current_app.config.get('SEARCH_MIN_LENGTH', 2) if has_app_context() else 2
    term = (term or '').strip()
    if len(term) < min_length:
        logger.warning(f"Search term too short (minimum {min_length} characters required): {term!r}")
        return []

    pattern = f"%{term.lower()[:100]}%"
    return (session.query(Product)
            .join(Category, Product.category_id == Category.id)
            .filter(or_(
                func.lower(Product.name).like(pattern),
                func.lower(func.coalesce(Product.description, '')).like(pattern),
                func.lower(Category.name).like(pattern)
            ))
            .order_by(Product.name)
            .all())


def list_products_by_category_name(session: Session, slug: str) -> List[Product]:
    """Products of a category given as a kebab-case slug (``fresh-fruits``)."""
    name = kebab_to_title(slug)
    logger.info(f"Fetching products by category name: {name}")
    return (session.query(Product)
            .join(Category, Product.category_id == Category.id)
            .filter(func.lower(Category.name) == name.lower())
            .order_by(Product.name)
            .all())


def kebab_to_title(value: Optional[str]) -> Optional[str]:
    """``fresh-fruits`` -> ``Fresh Fruits``."""
    if value is None or not value.strip():
        return value
    words = [word.strip() for word in value.split('-') if word.strip()]
    return ' '.join(word[0].upper() + word[1:].lower() for word in words)


def product_stats(session: Session) -> Dict[str, int]:
    """Counts for the admin dashboard."""
    total = session.query(func.count(Product.id)).scalar()
    available = session.query(func.count(Product.id)).filter(Product.is_available.is_(True)).scalar()
    out_of_stock = session.query(func.count(Product.id)).filter(Product.stock == 0).scalar()
    featured = session.query(func.count(Product.id)).filter(Product.is_featured.is_(True)).scalar()
    return {
        'total_products': total,
        'available_products': available,
        'out_of_stock_products': out_of_stock,
        'featured_products': featured,
    }


# =====================================================
# CATEGORIES & BRANDS
# =====================================================

def list_category_names(session: Session) -> List[str]:
    """Distinct, sorted names of categories that have at least one product."""
    rows = (session.query(Category.name)
            .join(Product, Product.category_id == Category.id)
            .distinct()
            .all())
    return sorted(row[0] for row in rows)


def list_active_categories(session: Session) -> List[Category]:
    return (session.query(Category)
            .filter(Category.is_active.is_(True))
            .order_by(Category.display_order, Category.name)
            .all())


def list_active_brands(session: Session) -> List[Brand]:
    return session.query(Brand).filter(Brand.is_active.is_(True)).order_by(Brand.name).all()


def create_category(session: Session, name: str, description: str = None, display_order: int = None) -> Category:
    """Create a category; names are unique."""
    name = (name or '').strip()
    if not name:
        raise InvalidArgumentError('Category name cannot be blank')
    if session.query(Category).filter(func.lower(Category.name) == name.lower()).first():
        raise ConflictError(f'Category already exists: {name}')

    category = Category(name=name, description=description, display_order=display_order, is_active=True)
    session.add(category)
    session.commit()
    logger.info(f"Category created: {name}")
    return category


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _apply_product_fields(session: Session, product: Product, data: Dict[str, Any], creating: bool = False) -> None:
    """
    Copy validated payload fields onto ``product``.

    Only creation sets ``stock``; afterwards quantity on hand moves through
    stock_service alone and a ``stock`` key in an update payload is ignored.
    """
    name = (data.get('name') or '').strip()
    if not name:
        raise InvalidArgumentError('Product name cannot be blank')

    price = _decimal(data.get('price'), 'price', required=True)
    if price <= 0:
        raise InvalidArgumentError('Price must be greater than 0')

    category_id = data.get('category_id')
    if category_id is None:
        raise InvalidArgumentError('Category ID is required')
    category = session.get(Category, category_id)
    if category is None:
        raise NotFoundError('Category', category_id)

    subcategory = None
    if data.get('subcategory_id') is not None:
        subcategory = session.get(Subcategory, data['subcategory_id'])
        if subcategory is None:
            raise NotFoundError('Subcategory', data['subcategory_id'])

    brand = None
    if data.get('brand_id') is not None:
        brand = session.get(Brand, data['brand_id'])
        if brand is None:
            raise NotFoundError('Brand', data['brand_id'])

    if creating:
        stock = data.get('stock')
        stock = 0 if stock is None else stock
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise InvalidArgumentError('Stock must be a non-negative integer')
    else:
        if 'stock' in data:
            logger.warning(f"Ignoring stock in update of product {product.id}; use restock/consume")
        stock = session.query(Product.stock).filter(Product.id == product.id).scalar()

    is_available = data.get('is_available')
    is_available = True if is_available is None else bool(is_available)
    if stock == 0:
        # Nothing to sell
        is_available = False

    tags = data.get('tags')
    if isinstance(tags, (list, tuple)):
        tags = ','.join(str(tag).strip() for tag in tags if str(tag).strip())

    mrp = _decimal(data.get('mrp'), 'mrp')

    product.name = name
    product.description = data.get('description')
    product.price = price
    product.mrp = mrp if mrp is not None else price
    product.category = category
    product.subcategory = subcategory
    product.brand = brand
    if creating:
        product.stock = stock
    product.unit = data.get('unit')
    product.quantity_per_unit = _decimal(data.get('quantity_per_unit'), 'quantity_per_unit')
    product.weight_quantity = data.get('weight_quantity')
    product.discount_percentage = _decimal(data.get('discount_percentage'), 'discount_percentage') or Decimal('0')
    product.image_url = data.get('image_url')
    product.tags = tags
    product.is_available = is_available
    product.is_featured = bool(data.get('is_featured', False))
    product.is_trending = bool(data.get('is_trending', False))
    product.is_new_arrival = bool(data.get('is_new_arrival', False))
    product.min_order_quantity = data.get('min_order_quantity') or 1
    product.max_order_quantity = data.get('max_order_quantity')


def _decimal(value, field: str, required: bool = False) -> Optional[Decimal]:
    if value is None or value == '':
        if required:
            raise InvalidArgumentError(f'{field} is required')
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgumentError(f'Invalid decimal value for {field}: {value}')
