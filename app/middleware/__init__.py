"""Middleware for bearer-token authentication."""
from functools import wraps
from flask import g, request, current_app
from app.database import get_session
from app.models import User
from app.exceptions import AuthenticationError, ForbiddenError


def load_current_user():
    """
    Load current user into g (Flask's per-request global).

    Called before each request. Reads ``Authorization: Bearer <token>``;
    sets g.user and g.user_id when the token is valid, otherwise leaves them
    None and keeps the reason in g.auth_error for require_login.
    """
    g.user = None
    g.user_id = None
    g.auth_error = None

    header = request.headers.get('Authorization', '')
    if not header:
        return

    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        g.auth_error = 'Malformed Authorization header'
        return

    from app.services.auth_service import decode_token

    try:
        claims = decode_token(token.strip())
    except AuthenticationError as e:
        g.auth_error = e.message
        return

    user = get_session().get(User, claims.get('userId'))
    if user is None or user.email != claims.get('email'):
        g.auth_error = 'Invalid token'
        current_app.logger.warning(f"Token for unknown user rejected: {claims.get('email')}")
        return

    g.user = user
    g.user_id = user.id  # Expose user_id directly for convenience


def require_login(f):
    """
    Decorator: Require a valid bearer token.

    Raises AuthenticationError (401) when no user is loaded.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user') is None:
            raise AuthenticationError(g.get('auth_error') or 'Authentication required')
        return f(*args, **kwargs)
    return decorated_function


def ensure_owner(user_id):
    """Raise ForbiddenError unless the current user is ``user_id``."""
    if g.get('user') is None:
        raise AuthenticationError(g.get('auth_error') or 'Authentication required')
    if g.user.id != user_id:
        raise ForbiddenError('You can only access your own resources')
