"""
Table registry data access functions.
Handles physical table definitions per restaurant.
"""

import logging
import sqlite3

from database import get_db
from database.schema import RELEASING_STATUSES
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.messages import get_message

logger = logging.getLogger(__name__)

TABLE_SHAPES = ('rectangle', 'circle', 'square')


def get_active_tables(restaurant_id: int) -> list:
    """
    Get active tables of a restaurant.

    Args:
        restaurant_id: Restaurant ID

    Returns:
        List of table dicts ordered by table_number
    """
    return get_all_tables(restaurant_id, active_only=True)


def get_all_tables(restaurant_id: int, active_only: bool = False) -> list:
    """
    Get tables of a restaurant.

    Args:
        restaurant_id: Restaurant ID
        active_only: If True, only return active tables

    Returns:
        List of table dicts ordered by table_number
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM tables WHERE restaurant_id = ?'
    if active_only:
        query += ' AND is_active = 1'
    query += ' ORDER BY table_number'

    cursor.execute(query, (restaurant_id,))
    return [_row_to_table(row) for row in cursor.fetchall()]


def get_table_by_id(table_id: int, restaurant_id: int = None) -> dict:
    """
    Get table by ID.

    Args:
        table_id: Table ID
        restaurant_id: If given, only return the table when it belongs to this restaurant

    Returns:
        Table dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM tables WHERE id = ?'
    params = [table_id]
    if restaurant_id is not None:
        query += ' AND restaurant_id = ?'
        params.append(restaurant_id)

    cursor.execute(query, params)
    row = cursor.fetchone()
    return _row_to_table(row) if row else None


def create_table(restaurant_id: int, table_number: str, min_capacity: int = 1,
                 max_capacity: int = 4, shape: str = 'rectangle',
                 position_x: float = 100, position_y: float = 100, **kwargs) -> dict:
    """
    Create a table.

    Args:
        restaurant_id: Owning restaurant
        table_number: Number/label, unique per restaurant (active or not)
        min_capacity: Smallest party the table accepts
        max_capacity: Largest party the table accepts
        shape: 'rectangle', 'circle' or 'square'
        position_x: X coordinate for the floor plan
        position_y: Y coordinate for the floor plan
        **kwargs: Optional width, height

    Returns:
        dict: Created table

    Raises:
        ValidationError: If the number is missing, capacities or shape are invalid
        NotFoundError: If the restaurant does not exist
        ConflictError: If the table number already exists for this restaurant
    """
    table_number = str(table_number or '').strip()
    if not table_number:
        raise ValidationError(get_message('missing_fields', fields='tableNumber'))

    min_capacity, max_capacity = _validate_capacity(min_capacity, max_capacity)
    _validate_shape(shape)

    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT id FROM restaurants WHERE id = ?', (restaurant_id,))
    if not cursor.fetchone():
        raise NotFoundError(get_message('restaurant_not_found'))

    cursor.execute('''
        SELECT id FROM tables WHERE restaurant_id = ? AND table_number = ?
    ''', (restaurant_id, table_number))
    if cursor.fetchone():
        raise ConflictError(get_message('table_number_exists', number=table_number))

    try:
        cursor.execute('''
            INSERT INTO tables
            (restaurant_id, table_number, min_capacity, max_capacity,
             position_x, position_y, width, height, shape, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1)
        ''', (restaurant_id, table_number, min_capacity, max_capacity,
              position_x, position_y, kwargs.get('width', 80), kwargs.get('height', 80), shape))
        db.commit()
    except sqlite3.IntegrityError as e:
        db.rollback()
        raise ConflictError(get_message('table_number_exists', number=table_number)) from e

    logger.info(f'Table {table_number} created for restaurant {restaurant_id}')
    return get_table_by_id(cursor.lastrowid)


def update_table(table_id: int, **kwargs) -> dict:
    """
    Update table fields.

    Args:
        table_id: Table ID to update
        **kwargs: Fields to update (unknown fields are ignored)

    Returns:
        dict: Updated table

    Raises:
        NotFoundError: If the table does not exist
        ValidationError: If no field is given or values are invalid
        ConflictError: If the new number collides with another table
    """
    table = get_table_by_id(table_id)
    if not table:
        raise NotFoundError(get_message('table_not_found'))

    allowed_fields = ['table_number', 'min_capacity', 'max_capacity', 'position_x',
                      'position_y', 'width', 'height', 'shape', 'is_active']
    values = {field: kwargs[field] for field in allowed_fields if field in kwargs}
    if not values:
        raise ValidationError(get_message('no_fields'))

    if 'min_capacity' in values or 'max_capacity' in values:
        values['min_capacity'], values['max_capacity'] = _validate_capacity(
            values.get('min_capacity', table['min_capacity']),
            values.get('max_capacity', table['max_capacity'])
        )
    if 'shape' in values:
        _validate_shape(values['shape'])
    if 'is_active' in values:
        values['is_active'] = 1 if values['is_active'] else 0
    if 'table_number' in values:
        if values['table_number'] is None:
            raise ValidationError(get_message('missing_fields', fields='table_number'))
        values['table_number'] = str(values['table_number']).strip()
        if not values['table_number']:
            raise ValidationError(get_message('missing_fields', fields='table_number'))

    db = get_db()
    updates = [f'{field} = ?' for field in values]
    updates.append('updated_at = CURRENT_TIMESTAMP')

    try:
        db.execute(
            f'UPDATE tables SET {", ".join(updates)} WHERE id = ?',
            list(values.values()) + [table_id]
        )
        db.commit()
    except sqlite3.IntegrityError as e:
        db.rollback()
        raise ConflictError(
            get_message('table_number_exists', number=values.get('table_number'))
        ) from e

    return get_table_by_id(table_id)


def deactivate_table(table_id: int) -> dict:
    """Soft-disable a table; it disappears from availability and floor plan."""
    return update_table(table_id, is_active=False)


def delete_table(table_id: int) -> bool:
    """
    Delete a table that nothing references any more.

    Args:
        table_id: Table ID

    Returns:
        bool: True when deleted

    Raises:
        NotFoundError: If the table does not exist
        ConflictError: If a live reservation or a link still references the table
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT * FROM tables WHERE id = ?', (table_id,))
        table = cursor.fetchone()
        if not table:
            raise NotFoundError(get_message('table_not_found'))

        placeholders = ','.join('?' * len(RELEASING_STATUSES))
        cursor.execute(f'''
            SELECT COUNT(*) as total FROM reservations
            WHERE table_id = ? AND status NOT IN ({placeholders})
        ''', [table_id] + list(RELEASING_STATUSES))
        reservation_count = cursor.fetchone()['total']

        cursor.execute('''
            SELECT COUNT(*) as total FROM table_links
            WHERE primary_table_id = ? OR secondary_table_id = ?
        ''', (table_id, table_id))
        link_count = cursor.fetchone()['total']

        if reservation_count or link_count:
            raise ConflictError(
                get_message('table_in_use', number=table['table_number']),
                reservations=reservation_count,
                links=link_count
            )

        cursor.execute('DELETE FROM tables WHERE id = ?', (table_id,))
        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(f"Table {table['table_number']} deleted (id={table_id})")
    return True


def _validate_capacity(min_capacity, max_capacity) -> tuple:
    try:
        min_capacity = int(min_capacity)
        max_capacity = int(max_capacity)
    except (TypeError, ValueError) as e:
        raise ValidationError(get_message('invalid_capacity')) from e

    if min_capacity <= 0 or max_capacity <= 0 or min_capacity > max_capacity:
        raise ValidationError(get_message('invalid_capacity'))
    return min_capacity, max_capacity


def _validate_shape(shape: str):
    if shape not in TABLE_SHAPES:
        raise ValidationError(get_message('invalid_shape', choices=', '.join(TABLE_SHAPES)))


def _row_to_table(row) -> dict:
    table = dict(row)
    table['is_active'] = bool(table['is_active'])
    return table
