"""User profile service."""
import logging
from typing import Dict, Any, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models import User
from app.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def get_user(session: Session, user_id: int) -> User:
    logger.info(f"Fetching user with ID: {user_id}")
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError('User', user_id)
    return user


def update_profile(session: Session, user_id: int, data: Dict[str, Any]) -> User:
    """Partial update of name, email and phone number."""
    logger.info(f"Updating profile for user: {user_id}")

    user = get_user(session, user_id)

    email = data.get('email')
    if email:
        email = email.strip().lower()
        if email != user.email:
            taken = session.query(User.id).filter(func.lower(User.email) == email).first()
            if taken:
                raise ConflictError(f'User already exists with email: {email}')
            user.email = email

    if data.get('name'):
        user.name = data['name'].strip()

    if data.get('phone_number') is not None:
        user.phone_number = data['phone_number']

    session.commit()
    logger.info(f"Profile updated successfully for user: {user_id}")
    return user


def list_users(session: Session) -> List[User]:
    return session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
