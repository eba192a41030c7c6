"""
Reservation listing queries.
"""

from database import get_db


def get_reservations(restaurant_id: int, reservation_date: str = None, service_id: int = None,
                     shift_id: int = None, status: str = None) -> list:
    """
    List reservations of a restaurant, optionally filtered.

    Filters are exact matches; the shift filter does not widen to
    reservations without a shift.

    Args:
        restaurant_id: Restaurant ID
        reservation_date: Optional date (YYYY-MM-DD)
        service_id: Optional service ID
        shift_id: Optional shift ID
        status: Optional status

    Returns:
        list: Reservation dicts ordered by reservation_time
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
        WHERE r.restaurant_id = ?
    '''
    params = [restaurant_id]

    if reservation_date:
        query += ' AND r.reservation_date = ?'
        params.append(reservation_date)

    if service_id:
        query += ' AND r.service_id = ?'
        params.append(service_id)

    if shift_id:
        query += ' AND r.shift_id = ?'
        params.append(shift_id)

    if status:
        query += ' AND r.status = ?'
        params.append(status)

    query += ' ORDER BY r.reservation_time ASC, r.id ASC'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]
