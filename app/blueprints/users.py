"""User profile blueprint."""
from flask import Blueprint, jsonify
from app.database import get_session
from app.middleware import require_login, ensure_owner
from app.services import user_service
from app.utils.http import get_json_body
from app.utils.serializers import user_to_dict

users_bp = Blueprint('users', __name__, url_prefix='/users')


@users_bp.route('/<int:user_id>', methods=['GET'])
@require_login
def get_profile(user_id):
    ensure_owner(user_id)
    user = user_service.get_user(get_session(), user_id)
    return jsonify(user_to_dict(user))


@users_bp.route('/<int:user_id>', methods=['PUT'])
@require_login
def update_profile(user_id):
    ensure_owner(user_id)
    user = user_service.update_profile(get_session(), user_id, get_json_body())
    return jsonify(user_to_dict(user))
