"""Admin blueprint: dashboard counts, user list and manual stock adjustments."""
import logging
from flask import Blueprint, jsonify
from app.blueprints.metrics import stock_outs_total
from app.database import get_session
from app.decorators.admin_security import admin_required
from app.exceptions import GroceryError
from app.services import catalog_service, stock_service, user_service
from app.utils.http import get_json_body, require_int
from app.utils.serializers import user_to_dict

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


@admin_bp.route('/product-stats', methods=['GET'])
@admin_required
def product_stats():
    return jsonify(catalog_service.product_stats(get_session()))


@admin_bp.route('/users', methods=['GET'])
@admin_required
def list_users():
    users = user_service.list_users(get_session())
    return jsonify([user_to_dict(u) for u in users])


@admin_bp.route('/products/<int:product_id>/stock', methods=['GET'])
@admin_required
def stock_level(product_id):
    return jsonify(stock_service.get_stock_level(get_session(), product_id))


@admin_bp.route('/products/<int:product_id>/restock', methods=['POST'])
@admin_required
def restock(product_id):
    """Body: {"quantity": n}. Adds n units and re-enables the product."""
    return _adjust(product_id, stock_service.increase_stock)


@admin_bp.route('/products/<int:product_id>/consume', methods=['POST'])
@admin_required
def consume(product_id):
    """Body: {"quantity": n}. Removes n units (breakage, shrinkage...)."""
    return _adjust(product_id, stock_service.decrease_stock)


def _adjust(product_id, operation):
    quantity = require_int(get_json_body(), 'quantity')
    session = get_session()
    try:
        remaining = operation(session, product_id, quantity)
        session.commit()
    except GroceryError:
        session.rollback()
        raise

    if remaining == 0 and operation is stock_service.decrease_stock:
        stock_outs_total.inc()
    logger.info(f"Manual stock adjustment ({operation.__name__}) on product {product_id}: {quantity}")
    return jsonify(stock_service.get_stock_level(session, product_id))
