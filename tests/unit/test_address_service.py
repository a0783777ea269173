"""
Unit tests for the address book.
"""

import pytest
from app.models import Address
from app.exceptions import InvalidArgumentError, NotFoundError
from app.services import address_service


def payload(**overrides):
    data = {
        'full_name': 'Asha Rao',
        'phone_number': '9876543210',
        'address_line1': '12 MG Road',
        'address_line2': 'Flat 4B',
        'city': 'Bengaluru',
        'state': 'Karnataka',
        'pincode': '560001',
        'address_type': 'home',
    }
    data.update(overrides)
    return data


class TestValidation:
    """Tests for validate_address."""

    def test_valid_payload_is_normalized(self):
        cleaned = address_service.validate_address(payload(city='  Bengaluru  ', address_line2='  '))

        assert cleaned['city'] == 'Bengaluru'
        assert cleaned['address_line2'] is None
        assert cleaned['is_default'] is False

    def test_coordinates_are_coerced_to_float(self):
        cleaned = address_service.validate_address(payload(latitude='12.9716', longitude=77.5946))

        assert cleaned['latitude'] == pytest.approx(12.9716)
        assert cleaned['longitude'] == pytest.approx(77.5946)

    def test_blank_coordinates_are_stored_as_none(self):
        cleaned = address_service.validate_address(payload(latitude='', longitude=None))

        assert cleaned['latitude'] is None
        assert cleaned['longitude'] is None

    @pytest.mark.parametrize('field, value', [
        ('phone_number', '12345'),
        ('phone_number', '98765abcde'),
        ('pincode', '5600'),
        ('address_type', 'office'),
        ('city', ''),
        ('latitude', 'north'),
        ('longitude', [77.5]),
        ('latitude', 91),
        ('longitude', True),
    ])
    def test_invalid_field_reported(self, field, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            address_service.validate_address(payload(**{field: value}))

        assert field in exc_info.value.payload['validation_errors']

    def test_missing_fields_reported_together(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            address_service.validate_address({})

        errors = exc_info.value.payload['validation_errors']
        assert {'full_name', 'phone_number', 'address_line1', 'city', 'state', 'pincode'} <= set(errors)


class TestAddressBook:
    """Tests for creating and managing addresses."""

    def test_create_address(self, session, user):
        address = address_service.create_address(session, user.id, payload())

        assert address.id is not None
        assert address.street == '12 MG Road, Flat 4B'

    def test_create_for_unknown_user(self, session):
        with pytest.raises(NotFoundError):
            address_service.create_address(session, 9999, payload())

    def test_new_default_unsets_previous_default(self, session, user):
        first = address_service.create_address(session, user.id, payload(is_default=True)).id
        second = address_service.create_address(session, user.id, payload(is_default=True, city='Mysuru')).id

        assert session.get(Address, first).is_default is False
        assert session.get(Address, second).is_default is True

    def test_list_puts_default_first(self, session, user):
        default_id = address_service.create_address(session, user.id, payload(is_default=True)).id
        address_service.create_address(session, user.id, payload(city='Mysuru'))

        addresses = address_service.list_user_addresses(session, user.id)

        assert addresses[0].id == default_id
        assert len(addresses) == 2

    def test_set_default(self, session, user):
        first = address_service.create_address(session, user.id, payload(is_default=True)).id
        second = address_service.create_address(session, user.id, payload(city='Mysuru')).id

        address_service.set_default_address(session, second, user.id)

        assert session.get(Address, first).is_default is False
        assert session.get(Address, second).is_default is True

    def test_set_default_of_another_user(self, session, user, other_user):
        address_id = address_service.create_address(session, other_user.id, payload()).id

        with pytest.raises(NotFoundError):
            address_service.set_default_address(session, address_id, user.id)

    def test_update_address(self, session, user):
        address_id = address_service.create_address(session, user.id, payload()).id

        address = address_service.update_address(session, address_id, payload(city='Mysuru', address_line2=None))

        assert address.city == 'Mysuru'
        assert address.street == '12 MG Road'

    def test_delete_address(self, session, user):
        address_id = address_service.create_address(session, user.id, payload()).id

        address_service.delete_address(session, address_id)

        assert session.get(Address, address_id) is None
        with pytest.raises(NotFoundError):
            address_service.get_address(session, address_id)
