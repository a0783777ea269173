"""
Orders blueprint.

Customers place, read and cancel their own orders; status updates are
reserved to admins.
"""
from flask import Blueprint, jsonify, request, g
from app.database import get_session
from app.decorators.admin_security import admin_required, is_admin
from app.exceptions import ForbiddenError, InvalidArgumentError
from app.middleware import require_login, ensure_owner
from app.services import order_service
from app.utils.http import get_json_body, require_int
from app.utils.serializers import order_to_dict

orders_bp = Blueprint('orders', __name__, url_prefix='/orders')


def _check_access(order):
    """Owner or admin."""
    if order.user_id != g.user_id and not is_admin(g.user):
        raise ForbiddenError('You can only access your own orders')


@orders_bp.route('', methods=['POST'])
@require_login
def create_order():
    """
    Place an order.

    Body:
        {"items": [{"product_id": 1, "quantity": 2}],
         "payment_method": "COD", "delivery_address_id": 3}
    """
    data = get_json_body()
    items = data.get('items')
    if items is not None and not isinstance(items, list):
        raise InvalidArgumentError('items must be a list')

    session = get_session()
    address_id = require_int(data, 'delivery_address_id')

    # Orders may only ship to one of the caller's own addresses
    from app.services.address_service import get_address
    ensure_owner(get_address(session, address_id).user_id)

    order = order_service.create_order(
        session,
        g.user_id,
        items or [],
        data.get('payment_method'),
        address_id
    )
    return jsonify(order_to_dict(order)), 201


@orders_bp.route('/user/<int:user_id>', methods=['GET'])
@require_login
def list_user_orders(user_id):
    if not is_admin(g.user):
        ensure_owner(user_id)
    orders = order_service.get_user_orders(get_session(), user_id, request.args.get('status'))
    return jsonify([order_to_dict(o) for o in orders])


@orders_bp.route('/<int:order_id>', methods=['GET'])
@require_login
def get_order(order_id):
    order = order_service.get_order(get_session(), order_id)
    _check_access(order)
    return jsonify(order_to_dict(order))


@orders_bp.route('/order-number/<string:order_number>', methods=['GET'])
@require_login
def get_order_by_number(order_number):
    order = order_service.get_order_by_number(get_session(), order_number)
    _check_access(order)
    return jsonify(order_to_dict(order))


@orders_bp.route('/<int:order_id>/status', methods=['PATCH'])
@admin_required
def update_status(order_id):
    status = request.args.get('status')
    if status is None:
        status = get_json_body().get('status')
    order = order_service.update_order_status(get_session(), order_id, status)
    return jsonify(order_to_dict(order))


@orders_bp.route('/<int:order_id>/cancel', methods=['POST'])
@require_login
def cancel_order(order_id):
    session = get_session()
    _check_access(order_service.get_order(session, order_id))
    order = order_service.cancel_order(session, order_id)
    return jsonify(order_to_dict(order))
