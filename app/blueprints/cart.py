"""Cart blueprint."""
from flask import Blueprint, jsonify, g
from app.database import get_session
from app.middleware import require_login, ensure_owner
from app.services import cart_service
from app.utils.http import get_json_body, require_int
from app.utils.serializers import cart_to_dict

cart_bp = Blueprint('cart', __name__, url_prefix='/cart')


@cart_bp.route('/<int:user_id>', methods=['GET'])
@require_login
def get_cart(user_id):
    ensure_owner(user_id)
    cart = cart_service.get_cart(get_session(), user_id)
    return jsonify(cart_to_dict(cart))


@cart_bp.route('/items', methods=['POST'])
@require_login
def add_item():
    data = get_json_body()
    user_id = require_int(data, 'user_id') if 'user_id' in data else g.user_id
    ensure_owner(user_id)

    cart = cart_service.add_item(
        get_session(),
        user_id,
        require_int(data, 'product_id'),
        require_int(data, 'quantity')
    )
    return jsonify(cart_to_dict(cart)), 201


@cart_bp.route('/items/<int:item_id>', methods=['PUT'])
@require_login
def update_item(item_id):
    data = get_json_body()
    cart = cart_service.update_item(get_session(), g.user_id, item_id, require_int(data, 'quantity'))
    return jsonify(cart_to_dict(cart))


@cart_bp.route('/items/<int:item_id>', methods=['DELETE'])
@require_login
def remove_item(item_id):
    cart_service.remove_item(get_session(), item_id, user_id=g.user_id)
    return '', 204


@cart_bp.route('/<int:user_id>', methods=['DELETE'])
@require_login
def clear_cart(user_id):
    ensure_owner(user_id)
    cart_service.clear_cart(get_session(), user_id)
    return '', 204
