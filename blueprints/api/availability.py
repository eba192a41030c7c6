"""
Availability and floor plan API routes.
Read-only views of a context (restaurant, date, service, optional shift).
"""

from flask import request

from blueprints.api.params import date_param, int_param, require_params, restaurant_param
from blueprints.api.serializers import serialize_option, serialize_plan_table
from models.availability import compute_availability
from models.floor_plan import project_floor_plan
from utils.api_response import api_success
from utils.decorators import login_required


def register_routes(bp):
    """Register availability and plan routes on the blueprint."""

    @bp.route('/availability', methods=['GET'])
    @login_required
    def get_availability():
        """
        Seating options for a party.

        Query params:
            restaurantId, date, serviceId: Required context
            shiftId: Optional shift
            partySize: Number of guests (default 2)

        Response JSON:
        {
            "success": true,
            "date": "2025-06-01",
            "serviceId": 2,
            "shiftId": null,
            "partySize": 4,
            "availableOptions": [
                {"type": "single", "tableId": 3, "tableNumber": "3",
                 "capacity": {"min": 2, "max": 4}, "recommendation": "tight"},
                ...
            ],
            "totalAvailable": 1
        }
        """
        args = request.args
        require_params(args, ['restaurantId', 'date', 'serviceId'])

        restaurant_id = restaurant_param(args)
        date = date_param(args.get('date'))
        service_id = int_param(args.get('serviceId'), 'serviceId')
        shift_id = int_param(args.get('shiftId'), 'shiftId', required=False)
        party_size = int_param(args.get('partySize', 2), 'partySize')

        result = compute_availability(restaurant_id, date, service_id, shift_id, party_size)

        return api_success(
            date=date,
            serviceId=service_id,
            shiftId=shift_id,
            partySize=party_size,
            availableOptions=[serialize_option(o) for o in result['options']],
            totalAvailable=result['total_available'],
        )

    @bp.route('/plan', methods=['GET'])
    @login_required
    def get_plan():
        """
        Per-table status of a context.

        Query params:
            restaurantId, date, serviceId: Required context
            shiftId: Optional shift

        Response JSON:
        {
            "success": true,
            "tables": [{..., "status": "reserved", "reservation": {...},
                        "isLinked": false, "linkInfo": null}],
            "links": [...],
            "reservations": [...],
            "context": {"date": "...", "serviceId": 2, "shiftId": null}
        }
        """
        args = request.args
        require_params(args, ['restaurantId', 'date', 'serviceId'])

        restaurant_id = restaurant_param(args)
        date = date_param(args.get('date'))
        service_id = int_param(args.get('serviceId'), 'serviceId')
        shift_id = int_param(args.get('shiftId'), 'shiftId', required=False)

        plan = project_floor_plan(restaurant_id, date, service_id, shift_id)

        return api_success(
            tables=[serialize_plan_table(t) for t in plan['tables']],
            links=plan['links'],
            reservations=plan['reservations'],
            context={
                'date': plan['context']['date'],
                'serviceId': plan['context']['service_id'],
                'shiftId': plan['context']['shift_id'],
            },
        )
