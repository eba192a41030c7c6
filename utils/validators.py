"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate phone number format.
    Accepts an optional leading + followed by 6 to 15 digits, ignoring
    spaces, dashes, dots and parentheses.

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    cleaned = re.sub(r'[\s\-\.\(\)]', '', phone)
    return bool(re.match(r'^\+?[0-9]{6,15}$', cleaned))


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    if not isinstance(date_str, str):
        return False
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except ValueError:
        return False


def normalize_time(time_str: str) -> str:
    """
    Validate an H:MM, HH:MM or HH:MM:SS time and zero-pad it so stored
    times sort as text.

    Args:
        time_str: Time string (e.g. '9:45')

    Returns:
        'HH:MM', or 'HH:MM:SS' when seconds were given; None if invalid
    """
    if not isinstance(time_str, str):
        return None
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(time_str, fmt).strftime(fmt)
        except ValueError:
            continue
    return None


def validate_positive_integer(value, field_name: str) -> tuple:
    """
    Validate and coerce a strictly positive integer.

    Args:
        value: Raw value (int or numeric string)
        field_name: Field name used in the error message

    Returns:
        Tuple of (is_valid, int_value or None, error_message)
    """
    if isinstance(value, bool) or value is None or value == '':
        return False, None, f'{field_name} must be a positive integer'

    try:
        number = int(value)
    except (TypeError, ValueError):
        return False, None, f'{field_name} must be a positive integer'

    if isinstance(value, float) and value != number:
        return False, None, f'{field_name} must be a positive integer'

    if number <= 0:
        return False, None, f'{field_name} must be a positive integer'

    return True, number, ''


def missing_fields(data: dict, required: list) -> list:
    """
    List required keys that are absent, None or empty strings.

    Args:
        data: Input mapping
        required: Required key names

    Returns:
        Missing key names in the order given
    """
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = str(text).strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
