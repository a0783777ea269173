"""Authentication blueprint: register and login."""
from flask import Blueprint, jsonify
from app.database import get_session
from app.services import auth_service
from app.utils.http import get_json_body

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    data = get_json_body()
    response = auth_service.register(
        get_session(),
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        phone_number=data.get('phone_number')
    )
    return jsonify(response), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = get_json_body()
    response = auth_service.login(get_session(), data.get('email'), data.get('password'))
    return jsonify(response), 200
