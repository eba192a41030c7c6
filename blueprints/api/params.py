"""
Request parameter helpers shared by the API route modules.
Query strings and JSON bodies use camelCase keys.
"""

from flask import request

from utils.errors import ValidationError
from utils.messages import get_message
from utils.permissions import ensure_restaurant_access
from utils.validators import missing_fields, validate_date_format, validate_positive_integer


def json_body() -> dict:
    """Request JSON body, or an empty dict."""
    return request.get_json(silent=True) or {}


def require_params(source, names: list, message_key: str = 'missing_params'):
    """
    Raise ValidationError naming every absent or empty parameter.

    Args:
        source: request.args or a JSON body dict
        names: Required keys
        message_key: 'missing_params' for query strings, 'missing_fields' for bodies
    """
    missing = missing_fields(source, names)
    if missing:
        raise ValidationError(get_message(message_key, fields=', '.join(missing)))


def int_param(value, name: str, required: bool = True) -> int:
    """
    Coerce a positive integer parameter.

    Returns:
        int, or None when the value is absent and not required
    """
    if value in (None, '') and not required:
        return None

    is_valid, number, error = validate_positive_integer(value, name)
    if not is_valid:
        raise ValidationError(error)
    return number


def date_param(value, name: str = 'date') -> str:
    """Validate a YYYY-MM-DD parameter."""
    if not validate_date_format(value):
        raise ValidationError(get_message('invalid_date', field=name))
    return value


def restaurant_param(source, name: str = 'restaurantId') -> int:
    """Read the restaurant ID and check the current actor may use it."""
    return ensure_restaurant_access(int_param(source.get(name), name))


def bool_param(value) -> bool:
    return str(value).lower() in ('1', 'true', 'yes')
