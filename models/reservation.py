"""
Reservation data access functions.
Handles reservation CRUD operations, status management and listing.

This module re-exports the functions of the split modules:
- reservation_state.py: Status lifecycle, transitions and history
- reservation_crud.py: Create, read, update, delete operations
- reservation_queries.py: Listing and filtering
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# Status management
from .reservation_state import (
    # Constants
    RESERVATION_STATUSES,
    VALID_TRANSITIONS,
    # Transitions
    get_valid_transitions,
    validate_status_transition,
    change_reservation_status,
    cancel_reservation,
    # History
    get_status_history,
)

# CRUD operations
from .reservation_crud import (
    RESERVATION_SOURCES,
    # Create
    create_reservation,
    # Read
    get_reservation_by_id,
    # Update
    update_reservation,
    # Delete
    delete_reservation,
)

# Query operations
from .reservation_queries import (
    get_reservations,
)


__all__ = [
    'RESERVATION_STATUSES',
    'VALID_TRANSITIONS',
    'RESERVATION_SOURCES',
    'get_valid_transitions',
    'validate_status_transition',
    'change_reservation_status',
    'cancel_reservation',
    'get_status_history',
    'create_reservation',
    'get_reservation_by_id',
    'update_reservation',
    'delete_reservation',
    'get_reservations',
]
