"""
Reservation status management functions.
Handles the status lifecycle, transitions and history.
"""

import logging

from database import get_db
from database.schema import RELEASING_STATUSES
from utils.errors import InvalidStatusTransitionError, NotFoundError, ValidationError
from utils.messages import get_message

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

RESERVATION_STATUSES = ('confirmed', 'seated', 'completed', 'cancelled', 'no_show')

INITIAL_STATUS = 'confirmed'

VALID_TRANSITIONS = {
    'confirmed': {'seated', 'cancelled', 'no_show'},
    'seated': {'completed', 'cancelled'},
    'completed': set(),
    'cancelled': set(),
    'no_show': set(),
}


# =============================================================================
# TRANSITION RULES
# =============================================================================

def get_valid_transitions(status: str) -> list:
    """
    Get the statuses reachable from `status`.

    Args:
        status: Current status

    Returns:
        list: Sorted reachable statuses (empty for terminal statuses)
    """
    return sorted(VALID_TRANSITIONS.get(status, set()))


def is_releasing_status(status: str) -> bool:
    """True if a reservation in this status no longer holds its table."""
    return status in RELEASING_STATUSES


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Check a status change against the transition table.

    Args:
        current_status: Status stored on the reservation
        new_status: Requested status

    Returns:
        bool: True if the status changes, False if it is already `new_status`

    Raises:
        ValidationError: If `new_status` is not a known status
        InvalidStatusTransitionError: If the transition is not allowed
    """
    if new_status not in RESERVATION_STATUSES:
        raise ValidationError(
            get_message('invalid_status', choices=', '.join(RESERVATION_STATUSES))
        )

    if current_status == new_status:
        return False

    if new_status not in VALID_TRANSITIONS.get(current_status, set()):
        raise InvalidStatusTransitionError(current_status, new_status)

    return True


# =============================================================================
# STATUS CHANGES
# =============================================================================

def change_reservation_status(
    reservation_id: int,
    new_status: str,
    changed_by: str = None,
    notes: str = '',
    restaurant_id: int = None
) -> dict:
    """
    Move a reservation to a new status.

    Args:
        reservation_id: Reservation ID
        new_status: Target status
        changed_by: Acting staff ID
        notes: Optional history note
        restaurant_id: Tenant scope of the caller (None for unrestricted)

    Returns:
        dict: Updated reservation

    Raises:
        NotFoundError: If the reservation does not exist for this tenant
        ValidationError: If the status is unknown
        InvalidStatusTransitionError: If the transition is not allowed
    """
    from models.reservation_crud import get_reservation_by_id

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        current_status = _fetch_status(cursor, reservation_id, restaurant_id)

        if validate_status_transition(current_status, new_status):
            cursor.execute('''
                UPDATE reservations
                SET status = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
            ''', (new_status, reservation_id))

            record_status_history(cursor, reservation_id, current_status, new_status,
                                  changed_by, notes)

        db.commit()

    except Exception:
        db.rollback()
        raise

    if current_status != new_status:
        logger.info(f'Reservation {reservation_id}: {current_status} -> {new_status}')

    return get_reservation_by_id(reservation_id)


def cancel_reservation(reservation_id: int, cancelled_by: str = None, notes: str = '',
                       restaurant_id: int = None) -> dict:
    """
    Cancel a reservation. Cancelling twice is a no-op success.

    The table or link it held is released; a link itself stays in place.

    Raises:
        NotFoundError: If the reservation does not exist for this tenant
        InvalidStatusTransitionError: If the reservation is completed or a no-show
    """
    return change_reservation_status(
        reservation_id, 'cancelled', changed_by=cancelled_by, notes=notes,
        restaurant_id=restaurant_id
    )


# =============================================================================
# HISTORY
# =============================================================================

def record_status_history(cursor, reservation_id: int, old_status: str, new_status: str,
                          changed_by: str = None, notes: str = ''):
    """Append a history row inside the caller's transaction."""
    cursor.execute('''
        INSERT INTO reservation_status_history
        (reservation_id, old_status, new_status, changed_by, notes, created_at)
        VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ''', (reservation_id, old_status, new_status, changed_by, notes or None))


def get_status_history(reservation_id: int) -> list:
    """
    Get status change history for reservation.

    Args:
        reservation_id: Reservation ID

    Returns:
        list: History entries, oldest first
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY created_at, id
    ''', (reservation_id,))
    return [dict(r) for r in cursor.fetchall()]


def _fetch_status(cursor, reservation_id: int, restaurant_id: int = None) -> str:
    query = 'SELECT status FROM reservations WHERE id = ?'
    params = [reservation_id]
    if restaurant_id is not None:
        query += ' AND restaurant_id = ?'
        params.append(restaurant_id)

    cursor.execute(query, params)
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(get_message('reservation_not_found'))
    return row['status']
