"""
Unit tests for user profiles.
"""

import pytest
from app.exceptions import ConflictError, NotFoundError
from app.services import user_service


def test_update_profile_partial(session, user):
    updated = user_service.update_profile(session, user.id, {'name': 'Renamed'})

    assert updated.name == 'Renamed'
    assert updated.phone_number == '9876543210'


def test_update_profile_email_taken(session, user, other_user):
    with pytest.raises(ConflictError):
        user_service.update_profile(session, user.id, {'email': other_user.email})


def test_get_unknown_user(session):
    with pytest.raises(NotFoundError):
        user_service.get_user(session, 9999)


def test_list_users(session, user, other_user):
    assert {u.id for u in user_service.list_users(session)} == {user.id, other_user.id}
