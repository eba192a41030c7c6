"""
Occupancy queries scoped to a context (restaurant, date, service, optional shift).

A row without a shift occupies the whole service. A query without a shift
sees every row of the service; a query for shift S sees rows of shift S and
rows without a shift.
"""

from database import get_db
from database.schema import RELEASING_STATUSES


def shift_overlap_clause(column: str, shift_id: int = None) -> tuple:
    """
    Build the SQL fragment matching rows whose shift overlaps `shift_id`.

    Args:
        column: Qualified shift column (e.g. 'r.shift_id')
        shift_id: Requested shift, or None for the whole service

    Returns:
        tuple: (sql_fragment, params) - empty fragment when no shift is given
    """
    if shift_id is None:
        return '', []
    return f' AND ({column} = ? OR {column} IS NULL)', [shift_id]


def get_context_reservations(
    restaurant_id: int,
    date: str,
    service_id: int,
    shift_id: int = None,
    exclude_reservation_id: int = None,
    cursor=None
) -> list:
    """
    Get reservations that hold a table or link in the context.
    Cancelled and no-show reservations release their table and are excluded.

    Args:
        restaurant_id: Restaurant ID
        date: Date (YYYY-MM-DD)
        service_id: Service ID
        shift_id: Optional shift ID
        exclude_reservation_id: Reservation to ignore (for updates)
        cursor: Active transaction cursor

    Returns:
        list: Reservation dicts with table_number
    """
    cur = cursor or get_db().cursor()

    placeholders = ','.join('?' * len(RELEASING_STATUSES))
    query = f'''
        SELECT r.*, t.table_number
        FROM reservations r
        LEFT JOIN tables t ON r.table_id = t.id
        WHERE r.restaurant_id = ?
          AND r.reservation_date = ?
          AND r.service_id = ?
          AND r.status NOT IN ({placeholders})
    '''
    params = [restaurant_id, date, service_id] + list(RELEASING_STATUSES)

    shift_sql, shift_params = shift_overlap_clause('r.shift_id', shift_id)
    query += shift_sql
    params.extend(shift_params)

    if exclude_reservation_id:
        query += ' AND r.id != ?'
        params.append(exclude_reservation_id)

    query += ' ORDER BY r.reservation_time, r.id'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def get_context_links(
    restaurant_id: int,
    date: str,
    service_id: int,
    shift_id: int = None,
    cursor=None
) -> list:
    """
    Get table links active in the context.

    Args:
        restaurant_id: Restaurant ID
        date: Date (YYYY-MM-DD)
        service_id: Service ID
        shift_id: Optional shift ID
        cursor: Active transaction cursor

    Returns:
        list: Link dicts with primary_table_number and secondary_table_number
    """
    cur = cursor or get_db().cursor()

    query = '''
        SELECT l.*,
               tp.table_number as primary_table_number,
               ts.table_number as secondary_table_number
        FROM table_links l
        JOIN tables tp ON l.primary_table_id = tp.id
        JOIN tables ts ON l.secondary_table_id = ts.id
        WHERE l.restaurant_id = ?
          AND l.link_date = ?
          AND l.service_id = ?
    '''
    params = [restaurant_id, date, service_id]

    shift_sql, shift_params = shift_overlap_clause('l.shift_id', shift_id)
    query += shift_sql
    params.extend(shift_params)

    query += ' ORDER BY l.id'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def occupied_table_ids(reservations: list) -> set:
    """Tables directly held by a reservation."""
    return {r['table_id'] for r in reservations if r.get('table_id')}


def linked_table_ids(links: list) -> set:
    """Both endpoints of every link."""
    ids = set()
    for link in links:
        ids.add(link['primary_table_id'])
        ids.add(link['secondary_table_id'])
    return ids


def booked_link_ids(reservations: list) -> set:
    """Links held by a reservation."""
    return {r['table_link_id'] for r in reservations if r.get('table_link_id')}
