"""
Service and shift data access functions.
Services are the seating periods of a restaurant; shifts subdivide a service.
"""

from database import get_db
from utils.errors import NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import normalize_time


def get_services(restaurant_id: int, active_only: bool = True) -> list:
    """
    Get services of a restaurant with their shifts.

    Args:
        restaurant_id: Restaurant ID
        active_only: If True, only return active services

    Returns:
        List of service dicts, each with a 'shifts' list ordered by sort_order
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM services WHERE restaurant_id = ?'
    if active_only:
        query += ' AND is_active = 1'
    query += ' ORDER BY start_time'

    cursor.execute(query, (restaurant_id,))
    services = [dict(row) for row in cursor.fetchall()]

    for service in services:
        service['shifts'] = get_shifts(service['id'])

    return services


def get_service_by_id(service_id: int) -> dict:
    """
    Get service by ID.

    Args:
        service_id: Service ID

    Returns:
        Service dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM services WHERE id = ?', (service_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_shifts(service_id: int) -> list:
    """Get shifts of a service ordered by sort_order."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM shifts
        WHERE service_id = ?
        ORDER BY sort_order, start_time
    ''', (service_id,))
    return [dict(row) for row in cursor.fetchall()]


def get_shift_by_id(shift_id: int) -> dict:
    """Get shift by ID, or None."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM shifts WHERE id = ?', (shift_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_shift(service_id: int, name: str, start_time: str, end_time: str,
                 max_covers: int = None, sort_order: int = 0) -> dict:
    """
    Create a shift inside a service.

    Args:
        service_id: Parent service ID
        name: Shift name
        start_time: HH:MM
        end_time: HH:MM
        max_covers: Optional cover limit (informational)
        sort_order: Display order

    Returns:
        dict: Created shift

    Raises:
        NotFoundError: If the service does not exist
        ValidationError: If fields are missing or times are malformed
    """
    if not get_service_by_id(service_id):
        raise NotFoundError(get_message('service_not_found'))

    name = (name or '').strip()
    if not name:
        raise ValidationError(get_message('missing_fields', fields='name'))

    times = {}
    for field, value in (('start_time', start_time), ('end_time', end_time)):
        times[field] = normalize_time(value)
        if not times[field]:
            raise ValidationError(get_message('invalid_time', field=field))
    start_time, end_time = times['start_time'], times['end_time']

    if start_time >= end_time:
        raise ValidationError(get_message('shift_times_reversed'))

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO shifts (service_id, name, start_time, end_time, max_covers, sort_order)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (service_id, name, start_time, end_time, max_covers, sort_order))
    db.commit()

    return get_shift_by_id(cursor.lastrowid)


def validate_context(restaurant_id: int, service_id: int, shift_id: int = None) -> dict:
    """
    Check that a context's service belongs to the restaurant and its shift to the service.

    Args:
        restaurant_id: Restaurant ID
        service_id: Service ID
        shift_id: Optional shift ID

    Returns:
        dict: The service row

    Raises:
        NotFoundError: If the service (or shift) does not exist for this tenant
        ValidationError: If the shift belongs to another service
    """
    service = get_service_by_id(service_id)
    if not service or service['restaurant_id'] != restaurant_id:
        raise NotFoundError(get_message('service_not_found'))

    if shift_id is not None:
        shift = get_shift_by_id(shift_id)
        if not shift:
            raise NotFoundError(get_message('shift_not_found'))
        if shift['service_id'] != service_id:
            raise ValidationError(get_message('shift_not_in_service'))

    return service
