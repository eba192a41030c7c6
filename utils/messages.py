"""
Centralized API messages.
All user-facing error and status text lives here for consistency.
"""

MESSAGES = {
    # Success messages
    'restaurant_created': 'Restaurant created',
    'settings_updated': 'Settings updated',
    'table_created': 'Table created',
    'table_updated': 'Table updated',
    'table_deleted': 'Table deleted',
    'merge_rule_created': 'Merge rule created',
    'merge_rule_deleted': 'Merge rule deleted',
    'tables_linked': 'Tables {a} + {b} linked',
    'tables_unlinked': 'Tables unlinked',
    'reservation_created': 'Reservation created',
    'reservation_updated': 'Reservation updated',
    'reservation_cancelled': 'Reservation cancelled',
    'reservation_deleted': 'Reservation deleted',

    # Validation messages
    'missing_fields': 'Missing required fields: {fields}',
    'missing_params': 'Missing required params: {fields}',
    'invalid_integer': '{field} must be a positive integer',
    'invalid_date': '{field} must be a date in YYYY-MM-DD format',
    'invalid_time': '{field} must be a time in HH:MM format',
    'invalid_email': 'Invalid email format',
    'invalid_phone': 'Invalid phone format',
    'invalid_capacity': 'Capacities must be positive and min_capacity <= max_capacity',
    'invalid_source': 'source must be one of: {choices}',
    'invalid_status': 'status must be one of: {choices}',
    'invalid_shape': 'shape must be one of: {choices}',
    'party_size_too_large': 'Party size exceeds the maximum of {max}',
    'table_and_link': 'A reservation can reference a table or a table link, not both',
    'same_table': 'A table cannot be linked with itself',
    'cross_tenant_tables': 'Tables must belong to the same restaurant',
    'merge_disabled': 'Table merging is disabled for this restaurant',
    'merge_rule_required': 'Tables {a} and {b} have no merge rule',
    'link_context_mismatch': 'Table link does not match the reservation context',
    'shift_not_in_service': 'Shift does not belong to the selected service',
    'shift_times_reversed': 'end_time must be after start_time',
    'table_inactive': 'Table {number} is not active',
    'no_fields': 'No updatable fields provided',

    # Conflict messages
    'slug_exists': 'Slug already exists',
    'table_number_exists': 'Table number {number} already exists',
    'merge_rule_exists': 'A merge rule already exists for these tables',
    'table_occupied': 'Table {number} is already reserved for this service',
    'table_linked': 'Table {number} is already linked for this service',
    'link_occupied': 'Table link is already reserved for this service',
    'table_in_use': 'Table {number} is still referenced by reservations or links',

    # Not found messages
    'restaurant_not_found': 'Restaurant not found',
    'service_not_found': 'Service not found',
    'shift_not_found': 'Shift not found',
    'table_not_found': 'Table not found',
    'tables_not_found': 'One or both tables not found',
    'link_not_found': 'Table link not found',
    'merge_rule_not_found': 'Merge rule not found',
    'reservation_not_found': 'Reservation not found',

    # Access messages
    'forbidden': 'You do not have access to this restaurant',
    'role_required': 'This action requires the {role} role',
    'internal_error': 'Internal server error',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
