"""
Authentication service.

Handles registration, password login and JWT issue/verification.
"""
import logging
from datetime import datetime, timedelta, timezone
import jwt
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from app.models import User
from app.exceptions import (
    AuthenticationError, ConflictError, InvalidArgumentError, InvalidCredentialsError
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def register(session, name, email, password, phone_number=None):
    """
    Create a local user and return an auth payload.

    Raises:
        InvalidArgumentError: missing name/email or short password
        ConflictError: email already registered
    """
    email = (email or '').strip().lower()
    name = (name or '').strip()
    logger.info(f"Registering new user with email: {email}")

    if not name or not email or '@' not in email:
        raise InvalidArgumentError('Name and a valid email are required')
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgumentError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    if _find_by_email(session, email):
        logger.warning(f"Registration failed: User with email {email} already exists")
        raise ConflictError(f'User already exists with email: {email}')

    user = User(name=name, email=email, phone_number=phone_number)
    user.set_password(password)

    try:
        session.add(user)
        session.commit()
    except IntegrityError:
        # Race condition: same email registered concurrently
        session.rollback()
        raise ConflictError(f'User already exists with email: {email}')

    logger.info(f"User registered successfully with ID: {user.id}")
    return build_auth_response(user, 'Registration successful')


def login(session, email, password):
    """Verify credentials and return an auth payload."""
    email = (email or '').strip().lower()
    logger.info(f"Login attempt for email: {email}")

    user = _find_by_email(session, email)
    if not user:
        logger.warning(f"Login failed: User not found with email {email}")
        raise InvalidCredentialsError()

    if not user.check_password(password or ''):
        logger.warning(f"Login failed: Invalid password for email {email}")
        raise InvalidCredentialsError()

    logger.info(f"User logged in successfully with ID: {user.id}")
    return build_auth_response(user, 'Login successful')


def generate_token(user):
    """Sign an HS256 JWT carrying the user's id, email and name."""
    now = datetime.now(timezone.utc)
    payload = {
        'sub': user.email,
        'userId': user.id,
        'email': user.email,
        'name': user.name,
        'iat': now,
        'exp': now + timedelta(seconds=current_app.config['JWT_EXPIRATION_SECONDS']),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET'],
        algorithm=current_app.config.get('JWT_ALGORITHM', 'HS256')
    )


def decode_token(token):
    """
    Decode and verify a JWT.

    Returns:
        dict: token claims

    Raises:
        AuthenticationError: token expired or invalid
    """
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')]
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError('Token has expired')
    except jwt.InvalidTokenError:
        raise AuthenticationError('Invalid token')


def build_auth_response(user, message):
    return {
        'token': generate_token(user),
        'user_id': user.id,
        'name': user.name,
        'email': user.email,
        'phone_number': user.phone_number,
        'created_at': user.created_at.isoformat() if user.created_at else None,
        'message': message,
    }


def _find_by_email(session, email):
    return session.query(User).filter(func.lower(User.email) == email).first()
