"""
Restaurant API routes.
Tenants, their settings record, services and shifts.
"""

from flask import request
from flask_login import current_user

from blueprints.api.params import int_param, json_body, require_params, restaurant_param
from models.restaurant import (
    create_restaurant, get_all_restaurants, get_restaurant_settings,
    update_restaurant_settings
)
from models.service import create_shift, get_service_by_id, get_services
from utils.api_response import api_success
from utils.decorators import login_required, role_required
from utils.messages import get_message
from utils.permissions import ensure_restaurant_access, ensure_visible

# Request body keys -> settings columns
SETTINGS_FIELDS = {
    'moduleDashboard': 'module_dashboard',
    'moduleFloorPlan': 'module_floor_plan',
    'modulePlanning': 'module_planning',
    'moduleReservations': 'module_reservations',
    'enableTableMerge': 'enable_table_merge',
    'linkRequiresMergeRule': 'link_requires_merge_rule',
    'defaultReservationDuration': 'default_reservation_duration',
    'maxPartySize': 'max_party_size',
}


def map_settings_fields(data: dict) -> dict:
    columns = set(SETTINGS_FIELDS.values())
    fields = {}
    for key, value in data.items():
        if key in SETTINGS_FIELDS:
            fields[SETTINGS_FIELDS[key]] = value
        elif key in columns:
            fields[key] = value
    return fields


def register_routes(bp):
    """Register restaurant, settings, service and shift routes on the blueprint."""

    @bp.route('/restaurants', methods=['GET'])
    @login_required
    def list_restaurants():
        """All restaurants for super admins, otherwise the actor's own."""
        restaurants = get_all_restaurants()
        if not current_user.is_super_admin:
            restaurants = [r for r in restaurants if r['id'] == current_user.restaurant_id]
        return api_success(restaurants=restaurants)

    @bp.route('/restaurants', methods=['POST'])
    @login_required
    @role_required('super_admin')
    def add_restaurant():
        """
        Create a restaurant with default settings and services.

        Request body:
            name, slug: Required
            logoUrl: Optional
            settings: Optional settings overrides
        """
        data = json_body()
        require_params(data, ['name', 'slug'], 'missing_fields')

        restaurant = create_restaurant(
            data['name'],
            data['slug'],
            logo_url=data.get('logoUrl'),
            settings=map_settings_fields(data.get('settings') or {})
        )
        return api_success(
            restaurant=restaurant,
            message=get_message('restaurant_created'),
            status=201
        )

    @bp.route('/restaurants/<int:restaurant_id>/settings', methods=['GET'])
    @login_required
    def get_settings(restaurant_id):
        """Settings record read by the allocation engine."""
        ensure_restaurant_access(restaurant_id)
        return api_success(settings=get_restaurant_settings(restaurant_id))

    @bp.route('/restaurants/<int:restaurant_id>/settings', methods=['PATCH'])
    @login_required
    @role_required('restaurant_admin')
    def update_settings(restaurant_id):
        """Update module toggles, merge policy, default duration or max party size."""
        ensure_restaurant_access(restaurant_id)
        settings = update_restaurant_settings(restaurant_id, **map_settings_fields(json_body()))
        return api_success(settings=settings, message=get_message('settings_updated'))

    @bp.route('/services', methods=['GET'])
    @login_required
    def list_services():
        """
        Active services of a restaurant with their shifts.

        Query params:
            restaurantId: Required
        """
        require_params(request.args, ['restaurantId'])
        restaurant_id = restaurant_param(request.args)
        return api_success(services=get_services(restaurant_id))

    @bp.route('/services/<int:service_id>/shifts', methods=['POST'])
    @login_required
    @role_required('restaurant_admin')
    def add_shift(service_id):
        """
        Create a shift inside a service.

        Request body:
            name, startTime, endTime: Required
            maxCovers, sortOrder: Optional
        """
        ensure_visible(get_service_by_id(service_id), 'service_not_found')

        data = json_body()
        require_params(data, ['name', 'startTime', 'endTime'], 'missing_fields')

        sort_order = data.get('sortOrder') or 0
        if sort_order:
            sort_order = int_param(sort_order, 'sortOrder')

        shift = create_shift(
            service_id,
            data['name'],
            data['startTime'],
            data['endTime'],
            max_covers=int_param(data.get('maxCovers'), 'maxCovers', required=False),
            sort_order=sort_order
        )
        return api_success(shift=shift, status=201)
