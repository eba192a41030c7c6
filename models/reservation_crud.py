"""
Reservation CRUD operations.
Handles creating, reading, updating, and deleting reservations.

Every write that places a reservation on a table or link checks the context
for conflicts inside a BEGIN IMMEDIATE transaction; the partial unique indexes
on reservations reject whatever slips past.
"""

import logging
import sqlite3

from database import get_db
from models.context import get_context_links, get_context_reservations
from models.reservation_state import (
    INITIAL_STATUS, is_releasing_status, record_status_history,
    validate_status_transition
)
from models.restaurant import get_restaurant_settings
from models.service import validate_context
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import (
    normalize_time, sanitize_input, validate_date_format, validate_email,
    validate_phone, validate_positive_integer
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

RESERVATION_SOURCES = ('manual', 'online', 'voice', 'walk_in')

# Fields a caller may change through update_reservation()
UPDATABLE_FIELDS = (
    'reservation_date', 'service_id', 'shift_id', 'reservation_time',
    'customer_name', 'customer_phone', 'customer_email', 'party_size',
    'table_id', 'table_link_id', 'status', 'source', 'notes',
    'internal_notes', 'duration_minutes',
)

# Fields that move a reservation to another table or context
PLACEMENT_FIELDS = (
    'reservation_date', 'service_id', 'shift_id', 'table_id', 'table_link_id',
)

PROTECTED_FIELDS = ('id', 'restaurant_id', 'created_at', 'created_by', 'updated_at')


# =============================================================================
# READ OPERATIONS
# =============================================================================

def get_reservation_by_id(reservation_id: int, restaurant_id: int = None) -> dict:
    """
    Get reservation with table, service and shift details.

    Args:
        reservation_id: Reservation ID
        restaurant_id: If given, only return the reservation when it belongs to this restaurant

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*,
               t.table_number,
               s.name as service_name,
               sh.name as shift_name
        FROM reservations r
        LEFT JOIN tables t ON r.table_id = t.id
        LEFT JOIN services s ON r.service_id = s.id
        LEFT JOIN shifts sh ON r.shift_id = sh.id
        WHERE r.id = ?
    '''
    params = [reservation_id]
    if restaurant_id is not None:
        query += ' AND r.restaurant_id = ?'
        params.append(restaurant_id)

    cursor.execute(query, params)
    row = cursor.fetchone()
    return dict(row) if row else None


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    restaurant_id: int,
    reservation_date: str,
    service_id: int,
    reservation_time: str,
    party_size: int,
    customer_name: str,
    shift_id: int = None,
    customer_phone: str = None,
    customer_email: str = None,
    notes: str = None,
    internal_notes: str = None,
    source: str = 'manual',
    table_id: int = None,
    table_link_id: int = None,
    duration_minutes: int = None,
    created_by: str = None
) -> dict:
    """
    Create a confirmed reservation.

    Args:
        restaurant_id: Restaurant ID
        reservation_date: Date (YYYY-MM-DD)
        service_id: Service ID
        reservation_time: Arrival time (HH:MM)
        party_size: Number of guests
        customer_name: Guest name
        shift_id: Optional shift ID
        customer_phone: Optional phone
        customer_email: Optional email
        notes: Guest-facing notes
        internal_notes: Staff-only notes
        source: 'manual', 'online', 'voice' or 'walk_in'
        table_id: Assigned table (exclusive with table_link_id)
        table_link_id: Assigned link (exclusive with table_id)
        duration_minutes: Defaults to the restaurant's default duration
        created_by: Acting staff ID

    Returns:
        dict: Created reservation

    Raises:
        ValidationError: If a field is missing or invalid
        NotFoundError: If the restaurant, service, shift, table or link does not exist
        ConflictError: If the table or link is already held in the context
    """
    settings = get_restaurant_settings(restaurant_id)

    values = {
        'reservation_date': reservation_date,
        'service_id': service_id,
        'shift_id': shift_id,
        'reservation_time': reservation_time,
        'party_size': party_size,
        'customer_name': sanitize_input(customer_name, 200),
        'customer_phone': sanitize_input(customer_phone, 30) or None,
        'customer_email': sanitize_input(customer_email, 200) or None,
        'notes': notes or None,
        'internal_notes': internal_notes or None,
        'source': source or 'manual',
        'table_id': table_id,
        'table_link_id': table_link_id,
        'duration_minutes': duration_minutes or settings['default_reservation_duration'],
    }
    _validate_reservation_fields(values, settings)
    validate_context(restaurant_id, values['service_id'], values['shift_id'])

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        _check_placement(cursor, restaurant_id, values)

        cursor.execute('''
            INSERT INTO reservations
            (restaurant_id, reservation_date, service_id, shift_id, reservation_time,
             customer_name, customer_phone, customer_email, party_size,
             table_id, table_link_id, status, source, notes, internal_notes,
             duration_minutes, created_by)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            restaurant_id, values['reservation_date'], values['service_id'],
            values['shift_id'], values['reservation_time'], values['customer_name'],
            values['customer_phone'], values['customer_email'], values['party_size'],
            values['table_id'], values['table_link_id'], INITIAL_STATUS,
            values['source'], values['notes'], values['internal_notes'],
            values['duration_minutes'], created_by
        ))
        reservation_id = cursor.lastrowid

        record_status_history(cursor, reservation_id, None, INITIAL_STATUS,
                              created_by, 'Reservation created')

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        logger.warning(f'Reservation rejected by unique index: {e}')
        raise ConflictError(_placement_conflict_message(values)) from e
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Reservation {reservation_id} created for {values['party_size']} on "
        f"{values['reservation_date']} service={values['service_id']} "
        f"table={values['table_id']} link={values['table_link_id']}"
    )
    return get_reservation_by_id(reservation_id)


# =============================================================================
# UPDATE
# =============================================================================

def update_reservation(reservation_id: int, fields: dict, changed_by: str = None,
                       restaurant_id: int = None) -> dict:
    """
    Update reservation fields.

    Identity and audit fields are ignored. A status change goes through the
    transition table; a move to another table, link or context is checked for
    conflicts like a new reservation.

    Args:
        reservation_id: Reservation ID
        fields: Partial field set (snake_case)
        changed_by: Acting staff ID
        restaurant_id: Tenant scope of the caller (None for unrestricted)

    Returns:
        dict: Updated reservation

    Raises:
        NotFoundError: If the reservation does not exist for this tenant
        ValidationError: If no updatable field is given or a value is invalid
        InvalidStatusTransitionError: If the status change is not allowed
        ConflictError: If the new placement is already held
    """
    current = get_reservation_by_id(reservation_id, restaurant_id)
    if not current:
        raise NotFoundError(get_message('reservation_not_found'))

    changes = {
        key: value for key, value in fields.items()
        if key in UPDATABLE_FIELDS and key not in PROTECTED_FIELDS
    }
    if not changes:
        raise ValidationError(get_message('no_fields'))

    owner_id = current['restaurant_id']
    settings = get_restaurant_settings(owner_id)

    # Assigning one kind of placement clears the other
    if changes.get('table_id') and 'table_link_id' not in changes:
        changes['table_link_id'] = None
    if changes.get('table_link_id') and 'table_id' not in changes:
        changes['table_id'] = None

    values = {key: current[key] for key in UPDATABLE_FIELDS}
    values.update(changes)
    for key in ('customer_phone', 'customer_email', 'notes', 'internal_notes'):
        values[key] = values[key] or None

    _validate_reservation_fields(values, settings)

    status_changed = validate_status_transition(current['status'], values['status'])

    if any(key in changes for key in ('service_id', 'shift_id')):
        validate_context(owner_id, values['service_id'], values['shift_id'])

    placement_changed = any(
        key in changes and changes[key] != current[key] for key in PLACEMENT_FIELDS
    )

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        if placement_changed and not is_releasing_status(values['status']):
            _check_placement(cursor, owner_id, values, exclude_reservation_id=reservation_id)

        updates = [f'{key} = ?' for key in changes]
        updates.append('updated_at = CURRENT_TIMESTAMP')
        cursor.execute(
            f'UPDATE reservations SET {", ".join(updates)} WHERE id = ?',
            [values[key] for key in changes] + [reservation_id]
        )

        if status_changed:
            record_status_history(cursor, reservation_id, current['status'],
                                  values['status'], changed_by)

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        logger.warning(f'Update of reservation {reservation_id} rejected by unique index: {e}')
        raise ConflictError(_placement_conflict_message(values)) from e
    except Exception:
        db.rollback()
        raise

    logger.info(f'Reservation {reservation_id} updated: {", ".join(sorted(changes))}')
    return get_reservation_by_id(reservation_id)


# =============================================================================
# DELETE
# =============================================================================

def delete_reservation(reservation_id: int, restaurant_id: int = None) -> bool:
    """
    Hard delete a reservation and its history.

    Raises:
        NotFoundError: If the reservation does not exist for this tenant
    """
    if not get_reservation_by_id(reservation_id, restaurant_id):
        raise NotFoundError(get_message('reservation_not_found'))

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('DELETE FROM reservations WHERE id = ?', (reservation_id,))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f'Reservation {reservation_id} deleted')
    return True


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

def _validate_reservation_fields(values: dict, settings: dict):
    """Validate and coerce reservation values in place."""
    required = ('reservation_date', 'service_id', 'reservation_time', 'party_size', 'customer_name')
    missing = [key for key in required if values.get(key) in (None, '')]
    if missing:
        raise ValidationError(get_message('missing_fields', fields=', '.join(missing)))

    for key in ('service_id', 'party_size', 'duration_minutes'):
        is_valid, number, error = validate_positive_integer(values[key], key)
        if not is_valid:
            raise ValidationError(error)
        values[key] = number

    for key in ('shift_id', 'table_id', 'table_link_id'):
        if values.get(key) in (None, ''):
            values[key] = None
            continue
        is_valid, number, error = validate_positive_integer(values[key], key)
        if not is_valid:
            raise ValidationError(error)
        values[key] = number

    if values['party_size'] > settings['max_party_size']:
        raise ValidationError(get_message('party_size_too_large', max=settings['max_party_size']))

    if not validate_date_format(values['reservation_date']):
        raise ValidationError(get_message('invalid_date', field='date'))
    reservation_time = normalize_time(values['reservation_time'])
    if not reservation_time:
        raise ValidationError(get_message('invalid_time', field='time'))
    values['reservation_time'] = reservation_time

    if values['source'] not in RESERVATION_SOURCES:
        raise ValidationError(get_message('invalid_source', choices=', '.join(RESERVATION_SOURCES)))

    if values['customer_email'] and not validate_email(values['customer_email']):
        raise ValidationError(get_message('invalid_email'))
    if values['customer_phone'] and not validate_phone(values['customer_phone']):
        raise ValidationError(get_message('invalid_phone'))

    if values['table_id'] and values['table_link_id']:
        raise ValidationError(get_message('table_and_link'))


def _check_placement(cursor, restaurant_id: int, values: dict, exclude_reservation_id: int = None):
    """
    Verify the table or link of a reservation can be held in its context.

    Runs inside the caller's transaction.

    Raises:
        NotFoundError: If the table or link does not exist for this tenant
        ValidationError: If the table is inactive or the link belongs to another context
        ConflictError: If the table or link is already held
    """
    table_id = values['table_id']
    link_id = values['table_link_id']
    if not table_id and not link_id:
        return

    context = (restaurant_id, values['reservation_date'], values['service_id'], values['shift_id'])
    reservations = get_context_reservations(
        *context, exclude_reservation_id=exclude_reservation_id, cursor=cursor
    )

    if table_id:
        cursor.execute('SELECT * FROM tables WHERE id = ? AND restaurant_id = ?',
                       (table_id, restaurant_id))
        table = cursor.fetchone()
        if not table:
            raise NotFoundError(get_message('table_not_found'))
        if not table['is_active']:
            raise ValidationError(get_message('table_inactive', number=table['table_number']))

        if any(r['table_id'] == table_id for r in reservations):
            logger.warning(f"Reservation rejected: table {table['table_number']} is reserved")
            raise ConflictError(get_message('table_occupied', number=table['table_number']))

        links = get_context_links(*context, cursor=cursor)
        if any(table_id in (l['primary_table_id'], l['secondary_table_id']) for l in links):
            logger.warning(f"Reservation rejected: table {table['table_number']} is linked")
            raise ConflictError(get_message('table_linked', number=table['table_number']))
        return

    cursor.execute('SELECT * FROM table_links WHERE id = ? AND restaurant_id = ?',
                   (link_id, restaurant_id))
    link = cursor.fetchone()
    if not link:
        raise NotFoundError(get_message('link_not_found'))

    # A link without a shift covers every shift of its service
    if (link['link_date'] != values['reservation_date']
            or link['service_id'] != values['service_id']
            or link['shift_id'] not in (None, values['shift_id'])):
        raise ValidationError(get_message('link_context_mismatch'))

    if any(r['table_link_id'] == link_id for r in reservations):
        logger.warning(f'Reservation rejected: link {link_id} is reserved')
        raise ConflictError(get_message('link_occupied'))


def _placement_conflict_message(values: dict) -> str:
    if values.get('table_link_id'):
        return get_message('link_occupied')
    return get_message('table_occupied', number=values.get('table_id'))
