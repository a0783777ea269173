"""Address book service."""
import logging
import re
from typing import List, Dict, Any
from sqlalchemy.orm import Session
from app.models import Address, ADDRESS_TYPES, User
from app.exceptions import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r'^[0-9]{10}$')
PINCODE_PATTERN = re.compile(r'^[0-9]{6}$')
COORDINATE_LIMITS = {'latitude': 90.0, 'longitude': 180.0}

REQUIRED_FIELDS = {
    'full_name': 255,
    'phone_number': None,
    'address_line1': 255,
    'city': 100,
    'state': 100,
    'pincode': None,
    'address_type': None,
}


def create_address(session: Session, user_id: int, data: Dict[str, Any]) -> Address:
    """Create an address; a new default unsets the user's previous default."""
    logger.info(f"Creating new address for user: {user_id}")

    if session.get(User, user_id) is None:
        raise NotFoundError('User', user_id)

    fields = validate_address(data)
    if fields['is_default']:
        _unset_defaults(session, user_id)

    address = Address(user_id=user_id, **fields)
    session.add(address)
    session.commit()

    logger.info(f"Address created successfully with ID: {address.id}")
    return address


def list_user_addresses(session: Session, user_id: int) -> List[Address]:
    """Default address first, then newest."""
    return (session.query(Address)
            .filter(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
            .all())


def get_address(session: Session, address_id: int) -> Address:
    address = session.get(Address, address_id)
    if address is None:
        raise NotFoundError('Address', address_id)
    return address


def update_address(session: Session, address_id: int, data: Dict[str, Any]) -> Address:
    logger.info(f"Updating address with ID: {address_id}")

    address = get_address(session, address_id)
    fields = validate_address(data)

    if fields['is_default'] and not address.is_default:
        _unset_defaults(session, address.user_id, keep_id=address.id)

    for key, value in fields.items():
        setattr(address, key, value)

    session.commit()
    logger.info("Address updated successfully")
    return address


def delete_address(session: Session, address_id: int) -> None:
    logger.info(f"Deleting address with ID: {address_id}")

    address = get_address(session, address_id)
    session.delete(address)
    session.commit()
    logger.info("Address deleted successfully")


def set_default_address(session: Session, address_id: int, user_id: int) -> Address:
    logger.info(f"Setting address {address_id} as default for user {user_id}")

    address = get_address(session, address_id)
    if address.user_id != user_id:
        raise NotFoundError('Address', address_id)

    _unset_defaults(session, user_id, keep_id=address.id)
    address.is_default = True
    session.commit()

    logger.info("Default address set successfully")
    return address


def validate_address(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check an address payload and return the normalized column values."""
    errors = {}
    cleaned = {}

    for field, max_length in REQUIRED_FIELDS.items():
        value = data.get(field)
        value = str(value).strip() if value is not None else None
        if not value:
            errors[field] = f'{field} is required'
        elif max_length and len(value) > max_length:
            errors[field] = f'{field} must not exceed {max_length} characters'
        cleaned[field] = value

    if cleaned.get('phone_number') and not PHONE_PATTERN.match(cleaned['phone_number']):
        errors['phone_number'] = 'Phone number must be exactly 10 digits'
    if cleaned.get('pincode') and not PINCODE_PATTERN.match(cleaned['pincode']):
        errors['pincode'] = 'Pincode must be exactly 6 digits'
    if cleaned.get('address_type') and cleaned['address_type'] not in ADDRESS_TYPES:
        errors['address_type'] = "Address type must be 'home', 'work', or 'other'"

    line2 = data.get('address_line2')
    line2 = line2.strip() if isinstance(line2, str) else line2
    if line2 and len(line2) > 255:
        errors['address_line2'] = 'address_line2 must not exceed 255 characters'

    for field, limit in COORDINATE_LIMITS.items():
        value = data.get(field)
        if value is None or value == '':
            cleaned[field] = None
            continue
        try:
            value = float(value) if not isinstance(value, bool) else None
        except (TypeError, ValueError):
            value = None
        if value is None:
            errors[field] = f'{field} must be a number'
            continue
        if not -limit <= value <= limit:
            errors[field] = f'{field} must be between {-limit} and {limit}'
        cleaned[field] = value

    if errors:
        raise InvalidArgumentError('Invalid input provided', payload={'validation_errors': errors})

    cleaned['address_line2'] = line2 or None
    cleaned['is_default'] = bool(data.get('is_default', False))
    return cleaned


def _unset_defaults(session: Session, user_id: int, keep_id: int = None) -> None:
    query = session.query(Address).filter(Address.user_id == user_id, Address.is_default.is_(True))
    if keep_id is not None:
        query = query.filter(Address.id != keep_id)
    for address in query.all():
        address.is_default = False
