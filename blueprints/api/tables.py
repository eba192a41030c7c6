"""
Table API routes.
Table registry, merge rules and per-context table links.
"""

from flask import request
from flask_login import current_user

from blueprints.api.params import (
    bool_param, date_param, int_param, json_body, require_params, restaurant_param
)
from models.merge_rule import (
    create_merge_rule, delete_merge_rule, get_merge_rule_by_id, get_merge_rules
)
from models.table import create_table, delete_table, get_all_tables, get_table_by_id, update_table
from models.table_link import create_table_link, delete_table_link
from utils.api_response import api_success
from utils.decorators import login_required, role_required
from utils.messages import get_message
from utils.permissions import actor_scope, ensure_visible

# Request body keys -> table columns
TABLE_FIELDS = {
    'tableNumber': 'table_number',
    'minCapacity': 'min_capacity',
    'maxCapacity': 'max_capacity',
    'positionX': 'position_x',
    'positionY': 'position_y',
    'width': 'width',
    'height': 'height',
    'shape': 'shape',
    'isActive': 'is_active',
}


def map_table_fields(data: dict) -> dict:
    """Translate camelCase (or column) keys of a table body."""
    columns = set(TABLE_FIELDS.values())
    fields = {}
    for key, value in data.items():
        if key in TABLE_FIELDS:
            fields[TABLE_FIELDS[key]] = value
        elif key in columns:
            fields[key] = value
    return fields


def register_routes(bp):
    """Register table, merge rule and link routes on the blueprint."""

    # -------------------------------------------------------------------------
    # Table registry
    # -------------------------------------------------------------------------

    @bp.route('/tables', methods=['GET'])
    @login_required
    def list_tables():
        """
        List tables of a restaurant.

        Query params:
            restaurantId: Required
            includeInactive: Also return deactivated tables
        """
        require_params(request.args, ['restaurantId'])
        restaurant_id = restaurant_param(request.args)
        include_inactive = bool_param(request.args.get('includeInactive', 'false'))

        tables = get_all_tables(restaurant_id, active_only=not include_inactive)
        return api_success(tables=tables)

    @bp.route('/tables', methods=['POST'])
    @login_required
    @role_required('restaurant_admin')
    def add_table():
        """
        Create a table.

        Request body:
            restaurantId, tableNumber: Required
            minCapacity, maxCapacity, shape, positionX, positionY, width, height: Optional
        """
        data = json_body()
        require_params(data, ['restaurantId', 'tableNumber'], 'missing_fields')
        restaurant_id = restaurant_param(data)

        fields = map_table_fields(data)
        fields.pop('is_active', None)

        table = create_table(restaurant_id, **fields)
        return api_success(table=table, message=get_message('table_created'), status=201)

    @bp.route('/tables/<int:table_id>', methods=['PATCH'])
    @login_required
    @role_required('restaurant_admin')
    def edit_table(table_id):
        """Update capacity, position, shape, number or active flag."""
        ensure_visible(get_table_by_id(table_id), 'table_not_found')

        table = update_table(table_id, **map_table_fields(json_body()))
        return api_success(table=table, message=get_message('table_updated'))

    @bp.route('/tables', methods=['DELETE'])
    @login_required
    @role_required('restaurant_admin')
    def remove_table():
        """
        Delete a table. Answers 409 while reservations or links reference it.

        Query params:
            id: Table ID
        """
        require_params(request.args, ['id'])
        table_id = int_param(request.args.get('id'), 'id')
        ensure_visible(get_table_by_id(table_id), 'table_not_found')

        delete_table(table_id)
        return api_success(message=get_message('table_deleted'))

    # -------------------------------------------------------------------------
    # Merge rules
    # -------------------------------------------------------------------------

    @bp.route('/tables/merge-rules', methods=['GET'])
    @login_required
    def list_merge_rules():
        """List the declared mergeable pairs of a restaurant."""
        require_params(request.args, ['restaurantId'])
        restaurant_id = restaurant_param(request.args)
        return api_success(mergeRules=get_merge_rules(restaurant_id))

    @bp.route('/tables/merge-rules', methods=['POST'])
    @login_required
    @role_required('restaurant_admin')
    def create_rule():
        """
        Declare two tables as mergeable.

        Request body:
            restaurantId, tableIdA, tableIdB: Required
        """
        data = json_body()
        require_params(data, ['restaurantId', 'tableIdA', 'tableIdB'], 'missing_fields')
        restaurant_id = restaurant_param(data)

        rule = create_merge_rule(
            restaurant_id,
            int_param(data['tableIdA'], 'tableIdA'),
            int_param(data['tableIdB'], 'tableIdB')
        )
        return api_success(mergeRule=rule, message=get_message('merge_rule_created'), status=201)

    @bp.route('/tables/merge-rules/<int:rule_id>', methods=['DELETE'])
    @login_required
    @role_required('restaurant_admin')
    def delete_rule(rule_id):
        """Delete a merge rule. Existing links stay in place."""
        ensure_visible(get_merge_rule_by_id(rule_id), 'merge_rule_not_found')
        delete_merge_rule(rule_id)
        return api_success(message=get_message('merge_rule_deleted'))

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    @bp.route('/tables/link', methods=['POST'])
    @login_required
    def link():
        """
        Link two tables for one context.

        Request body:
            tableIdA, tableIdB, date, serviceId: Required
            shiftId: Optional

        Returns:
            201 {"success": true, "link": {...}}
        """
        data = json_body()
        require_params(data, ['tableIdA', 'tableIdB', 'date', 'serviceId'], 'missing_fields')

        table_link = create_table_link(
            int_param(data['tableIdA'], 'tableIdA'),
            int_param(data['tableIdB'], 'tableIdB'),
            date_param(data['date']),
            int_param(data['serviceId'], 'serviceId'),
            shift_id=int_param(data.get('shiftId'), 'shiftId', required=False),
            created_by=current_user.get_id(),
            restaurant_id=actor_scope()
        )
        message = get_message(
            'tables_linked',
            a=table_link['primary_table_number'],
            b=table_link['secondary_table_number']
        )
        return api_success(link=table_link, message=message, status=201)

    @bp.route('/tables/unlink', methods=['POST'])
    @login_required
    def unlink():
        """
        Remove a link. Reservations on it keep existing without a table.

        Request body:
            linkId: Required
        """
        data = json_body()
        require_params(data, ['linkId'], 'missing_fields')

        delete_table_link(int_param(data['linkId'], 'linkId'), restaurant_id=actor_scope())
        return api_success(message=get_message('tables_unlinked'))
