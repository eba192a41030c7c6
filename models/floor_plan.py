"""
Floor plan projection.
Derives the occupancy status of every active table for a context.
"""

from models.context import get_context_links, get_context_reservations
from models.restaurant import get_restaurant_settings
from models.service import validate_context
from models.table import get_active_tables


def table_status(reservation: dict) -> str:
    """
    Status of a table given the reservation holding it.

    Returns:
        str: 'occupied' if the party is seated, 'reserved' for any other
            live reservation, 'available' if there is none
    """
    if not reservation:
        return 'available'
    if reservation['status'] == 'seated':
        return 'occupied'
    return 'reserved'


def project_table_statuses(tables: list, reservations: list, links: list) -> list:
    """
    Attach status, reservation and link information to each table.

    A table is matched to a reservation on the table itself, or on the link it
    belongs to. A link without a reservation does not make its tables busy.

    Args:
        tables: Active tables
        reservations: Live reservations of the context
        links: Links active in the context

    Returns:
        list: Table dicts extended with 'status', 'reservation', 'is_linked', 'link_info'
    """
    by_table = {}
    by_link = {}
    for reservation in reservations:
        if reservation.get('table_id'):
            by_table.setdefault(reservation['table_id'], reservation)
        if reservation.get('table_link_id'):
            by_link.setdefault(reservation['table_link_id'], reservation)

    link_by_table = {}
    for link in links:
        link_by_table.setdefault(link['primary_table_id'], link)
        link_by_table.setdefault(link['secondary_table_id'], link)

    projected = []
    for table in tables:
        link = link_by_table.get(table['id'])
        reservation = by_table.get(table['id'])
        if reservation is None and link is not None:
            reservation = by_link.get(link['id'])

        projected.append({
            **table,
            'status': table_status(reservation),
            'reservation': reservation,
            'is_linked': link is not None,
            'link_info': link,
        })

    return projected


def project_floor_plan(restaurant_id: int, date: str, service_id: int, shift_id: int = None) -> dict:
    """
    Build the floor plan view of a context.

    Args:
        restaurant_id: Restaurant ID
        date: Date (YYYY-MM-DD)
        service_id: Service ID
        shift_id: Optional shift ID

    Returns:
        dict: {
            'tables': [table with status],
            'links': [link],
            'reservations': [reservation],
            'context': {'date', 'service_id', 'shift_id'}
        }

    Raises:
        NotFoundError: If the restaurant, service or shift does not exist
    """
    get_restaurant_settings(restaurant_id)
    validate_context(restaurant_id, service_id, shift_id)

    tables = get_active_tables(restaurant_id)
    reservations = get_context_reservations(restaurant_id, date, service_id, shift_id)
    links = get_context_links(restaurant_id, date, service_id, shift_id)

    return {
        'tables': project_table_statuses(tables, reservations, links),
        'links': links,
        'reservations': reservations,
        'context': {
            'date': date,
            'service_id': service_id,
            'shift_id': shift_id,
        },
    }
