"""Address book blueprint."""
from flask import Blueprint, jsonify, g
from app.database import get_session
from app.middleware import require_login, ensure_owner
from app.services import address_service
from app.utils.http import get_json_body
from app.utils.serializers import address_to_dict

addresses_bp = Blueprint('addresses', __name__, url_prefix='/addresses')


def _owned_address(address_id):
    address = address_service.get_address(get_session(), address_id)
    ensure_owner(address.user_id)
    return address


@addresses_bp.route('', methods=['POST'])
@require_login
def create_address():
    address = address_service.create_address(get_session(), g.user_id, get_json_body())
    return jsonify(address_to_dict(address)), 201


@addresses_bp.route('/user/<int:user_id>', methods=['GET'])
@require_login
def list_addresses(user_id):
    ensure_owner(user_id)
    addresses = address_service.list_user_addresses(get_session(), user_id)
    return jsonify([address_to_dict(a) for a in addresses])


@addresses_bp.route('/<int:address_id>', methods=['GET'])
@require_login
def get_address(address_id):
    return jsonify(address_to_dict(_owned_address(address_id)))


@addresses_bp.route('/<int:address_id>', methods=['PUT'])
@require_login
def update_address(address_id):
    _owned_address(address_id)
    address = address_service.update_address(get_session(), address_id, get_json_body())
    return jsonify(address_to_dict(address))


@addresses_bp.route('/<int:address_id>', methods=['DELETE'])
@require_login
def delete_address(address_id):
    _owned_address(address_id)
    address_service.delete_address(get_session(), address_id)
    return '', 204


@addresses_bp.route('/<int:address_id>/set-default', methods=['PATCH'])
@require_login
def set_default(address_id):
    address = address_service.set_default_address(get_session(), address_id, g.user_id)
    return jsonify(address_to_dict(address))
