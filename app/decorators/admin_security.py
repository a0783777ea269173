"""
Admin security decorators.
Provides authorization for admin API routes.
"""

from functools import wraps
from flask import g, current_app
from app.exceptions import AuthenticationError, ForbiddenError


def is_admin(user):
    """Admins are the users whose email is listed in ADMIN_EMAILS."""
    if user is None:
        return False
    admin_emails = current_app.config.get('ADMIN_EMAILS') or set()
    return user.email.lower() in admin_emails


def admin_required(f):
    """
    Decorator: Require the current user to be an admin.

    Must be used on routes where load_current_user already ran (every request).
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user') is None:
            raise AuthenticationError(g.get('auth_error') or 'Authentication required')

        if not is_admin(g.user):
            current_app.logger.warning(f"Non-admin user {g.user.email} tried to reach an admin route")
            raise ForbiddenError('Admin access required')

        return f(*args, **kwargs)

    return decorated_function
