"""Request parsing helpers shared by the API blueprints."""
from flask import request
from app.exceptions import InvalidArgumentError


def get_json_body() -> dict:
    """Return the JSON object sent with the request (empty dict when absent)."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgumentError('Request body must be a JSON object')
    return data


def require_int(data: dict, field: str) -> int:
    """Read an integer field from a JSON body."""
    value = data.get(field)
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f'{field} is required')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f'{field} must be an integer')
