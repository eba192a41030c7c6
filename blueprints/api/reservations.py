"""
Reservation API routes.
Create, list, update, cancel and inspect reservations.
"""

from flask import request
from flask_login import current_user

from blueprints.api.params import (
    date_param, int_param, json_body, require_params, restaurant_param
)
from models.reservation import (
    cancel_reservation, change_reservation_status, create_reservation,
    delete_reservation, get_reservation_by_id, get_reservations,
    get_status_history, get_valid_transitions, update_reservation
)
from utils.api_response import api_success
from utils.decorators import login_required
from utils.messages import get_message
from utils.permissions import actor_scope, ensure_visible

# Request body keys -> reservation columns
BODY_FIELDS = {
    'date': 'reservation_date',
    'serviceId': 'service_id',
    'shiftId': 'shift_id',
    'time': 'reservation_time',
    'partySize': 'party_size',
    'customerName': 'customer_name',
    'phone': 'customer_phone',
    'email': 'customer_email',
    'notes': 'notes',
    'internalNotes': 'internal_notes',
    'source': 'source',
    'tableId': 'table_id',
    'tableLinkId': 'table_link_id',
    'durationMinutes': 'duration_minutes',
    'status': 'status',
}

REQUIRED_FIELDS = ['restaurantId', 'date', 'serviceId', 'time', 'partySize', 'customerName']


def map_body_fields(data: dict) -> dict:
    """
    Translate a request body to reservation columns.
    Both camelCase keys and column names are accepted; unknown keys are dropped.
    """
    columns = set(BODY_FIELDS.values())
    fields = {}
    for key, value in data.items():
        if key in BODY_FIELDS:
            fields[BODY_FIELDS[key]] = value
        elif key in columns:
            fields[key] = value
    return fields


def register_routes(bp):
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['GET'])
    @login_required
    def list_reservations():
        """
        List reservations ordered by time.

        Query params:
            restaurantId: Required
            date, serviceId, shiftId, status: Optional exact filters
        """
        args = request.args
        require_params(args, ['restaurantId'])
        restaurant_id = restaurant_param(args)

        date = args.get('date')
        if date:
            date_param(date)

        reservations = get_reservations(
            restaurant_id,
            reservation_date=date,
            service_id=int_param(args.get('serviceId'), 'serviceId', required=False),
            shift_id=int_param(args.get('shiftId'), 'shiftId', required=False),
            status=args.get('status') or None,
        )
        return api_success(reservations=reservations)

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def add_reservation():
        """
        Create a confirmed reservation.

        Request body:
            restaurantId, date, serviceId, time, partySize, customerName: Required
            shiftId, phone, email, notes, internalNotes, source,
            tableId | tableLinkId, durationMinutes: Optional

        Returns:
            201 {"success": true, "reservation": {...}}
        """
        data = json_body()
        require_params(data, REQUIRED_FIELDS, 'missing_fields')
        restaurant_id = restaurant_param(data)

        fields = map_body_fields(data)
        fields.pop('status', None)

        reservation = create_reservation(
            restaurant_id,
            created_by=current_user.get_id(),
            **fields
        )
        return api_success(
            reservation=reservation,
            message=get_message('reservation_created'),
            status=201
        )

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    @login_required
    def reservation_detail(reservation_id):
        """Get a reservation with its valid next statuses."""
        reservation = ensure_visible(
            get_reservation_by_id(reservation_id), 'reservation_not_found'
        )
        return api_success(
            reservation=reservation,
            validTransitions=get_valid_transitions(reservation['status'])
        )

    @bp.route('/reservations/<int:reservation_id>', methods=['PATCH'])
    @login_required
    def edit_reservation(reservation_id):
        """
        Update a reservation with a partial field set.
        id, restaurant_id, created_at and created_by are ignored.
        """
        fields = map_body_fields(json_body())

        reservation = update_reservation(
            reservation_id, fields,
            changed_by=current_user.get_id(),
            restaurant_id=actor_scope()
        )
        return api_success(reservation=reservation, message=get_message('reservation_updated'))

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    def remove_reservation(reservation_id):
        """Hard delete a reservation."""
        delete_reservation(reservation_id, restaurant_id=actor_scope())
        return api_success(message=get_message('reservation_deleted'))

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    @login_required
    def cancel(reservation_id):
        """Cancel a reservation. Cancelling twice succeeds."""
        data = json_body()
        reservation = cancel_reservation(
            reservation_id,
            cancelled_by=current_user.get_id(),
            notes=data.get('notes', ''),
            restaurant_id=actor_scope()
        )
        return api_success(reservation=reservation, message=get_message('reservation_cancelled'))

    @bp.route('/reservations/<int:reservation_id>/status', methods=['POST'])
    @login_required
    def change_status(reservation_id):
        """
        Move a reservation to a new status.

        Request body:
            status: Target status
            notes: Optional history note
        """
        data = json_body()
        require_params(data, ['status'], 'missing_fields')

        reservation = change_reservation_status(
            reservation_id, data['status'],
            changed_by=current_user.get_id(),
            notes=data.get('notes', ''),
            restaurant_id=actor_scope()
        )
        return api_success(reservation=reservation)

    @bp.route('/reservations/<int:reservation_id>/history', methods=['GET'])
    @login_required
    def history(reservation_id):
        """Status history, oldest first."""
        ensure_visible(get_reservation_by_id(reservation_id), 'reservation_not_found')
        return api_success(history=get_status_history(reservation_id))
