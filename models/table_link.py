"""
Table link ledger.
A link joins two tables into one bookable unit for a single
(date, service, shift) context.
"""

import logging
import sqlite3

from database import get_db
from database.schema import RELEASING_STATUSES
from models.context import get_context_links, get_context_reservations
from models.merge_rule import find_merge_rule
from models.restaurant import get_restaurant_settings
from models.service import validate_context
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format

logger = logging.getLogger(__name__)


def get_table_link_by_id(link_id: int, restaurant_id: int = None) -> dict:
    """
    Get link by ID.

    Args:
        link_id: Link ID
        restaurant_id: If given, only return the link when it belongs to this restaurant

    Returns:
        Link dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT l.*,
               tp.table_number as primary_table_number,
               ts.table_number as secondary_table_number
        FROM table_links l
        JOIN tables tp ON l.primary_table_id = tp.id
        JOIN tables ts ON l.secondary_table_id = ts.id
        WHERE l.id = ?
    '''
    params = [link_id]
    if restaurant_id is not None:
        query += ' AND l.restaurant_id = ?'
        params.append(restaurant_id)

    cursor.execute(query, params)
    row = cursor.fetchone()
    return dict(row) if row else None


def create_table_link(
    table_a_id: int,
    table_b_id: int,
    link_date: str,
    service_id: int,
    shift_id: int = None,
    created_by: str = None,
    restaurant_id: int = None
) -> dict:
    """
    Link two tables for one context.

    Preconditions, first failure wins:
    1. Both tables exist and belong to the same restaurant.
    2. The context is valid and the restaurant's merge policy allows the pair.
    3. Neither table is reserved or already linked in an overlapping context.

    Args:
        table_a_id: Primary table
        table_b_id: Secondary table
        link_date: Date (YYYY-MM-DD)
        service_id: Service ID
        shift_id: Optional shift ID
        created_by: Acting staff ID
        restaurant_id: Tenant scope of the caller (None for unrestricted)

    Returns:
        dict: Created link

    Raises:
        ValidationError: Same table twice, tables of different restaurants,
            bad date, merging disabled, or no merge rule when one is required
        NotFoundError: If a table, service or shift does not exist
        ConflictError: If a table is reserved or already linked in the context
    """
    if table_a_id == table_b_id:
        raise ValidationError(get_message('same_table'))
    if not validate_date_format(link_date):
        raise ValidationError(get_message('invalid_date', field='date'))

    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT * FROM tables WHERE id IN (?, ?)', (table_a_id, table_b_id))
    tables = {row['id']: dict(row) for row in cursor.fetchall()}

    if len(tables) != 2:
        raise NotFoundError(get_message('tables_not_found'))

    table_a = tables[table_a_id]
    table_b = tables[table_b_id]

    if restaurant_id is not None and restaurant_id not in (
        table_a['restaurant_id'], table_b['restaurant_id']
    ):
        raise NotFoundError(get_message('tables_not_found'))

    if table_a['restaurant_id'] != table_b['restaurant_id']:
        raise ValidationError(get_message('cross_tenant_tables'))

    owner_id = table_a['restaurant_id']

    for table in (table_a, table_b):
        if not table['is_active']:
            raise ValidationError(get_message('table_inactive', number=table['table_number']))

    validate_context(owner_id, service_id, shift_id)

    settings = get_restaurant_settings(owner_id)
    if not settings['enable_table_merge']:
        raise ValidationError(get_message('merge_disabled'))
    if settings['link_requires_merge_rule'] and not find_merge_rule(table_a_id, table_b_id):
        raise ValidationError(get_message(
            'merge_rule_required', a=table_a['table_number'], b=table_b['table_number']
        ))

    try:
        cursor.execute('BEGIN IMMEDIATE')

        _ensure_tables_free(cursor, owner_id, link_date, service_id, shift_id, (table_a, table_b))

        combined_capacity = table_a['max_capacity'] + table_b['max_capacity']

        cursor.execute('''
            INSERT INTO table_links
            (restaurant_id, primary_table_id, secondary_table_id, link_date,
             service_id, shift_id, combined_capacity, created_by)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (owner_id, table_a_id, table_b_id, link_date,
              service_id, shift_id, combined_capacity, created_by))
        link_id = cursor.lastrowid

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        logger.warning(f'Link {table_a_id}+{table_b_id} rejected by unique index: {e}')
        raise ConflictError(get_message('table_linked', number=table_a['table_number'])) from e
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Tables {table_a['table_number']} + {table_b['table_number']} linked "
        f"for {link_date} service={service_id} shift={shift_id} (link={link_id})"
    )
    return get_table_link_by_id(link_id)


def delete_table_link(link_id: int, restaurant_id: int = None) -> bool:
    """
    Remove a link. Reservations bound to it are kept and lose their table assignment.

    Args:
        link_id: Link ID
        restaurant_id: Tenant scope of the caller (None for unrestricted)

    Returns:
        bool: True when deleted

    Raises:
        NotFoundError: If the link does not exist for this tenant
    """
    link = get_table_link_by_id(link_id, restaurant_id)
    if not link:
        raise NotFoundError(get_message('link_not_found'))

    db = get_db()
    cursor = db.cursor()

    try:
        placeholders = ','.join('?' * len(RELEASING_STATUSES))
        cursor.execute(f'''
            SELECT COUNT(*) as total FROM reservations
            WHERE table_link_id = ? AND status NOT IN ({placeholders})
        ''', [link_id] + list(RELEASING_STATUSES))
        bound = cursor.fetchone()['total']

        cursor.execute('DELETE FROM table_links WHERE id = ?', (link_id,))
        db.commit()

    except Exception:
        db.rollback()
        raise

    if bound:
        logger.warning(f'Link {link_id} removed while {bound} reservation(s) referenced it')
    logger.info(f'Link {link_id} removed')
    return True


def _ensure_tables_free(cursor, restaurant_id, link_date, service_id, shift_id, tables):
    """Raise ConflictError if any table is reserved or linked in the context."""
    reservations = get_context_reservations(
        restaurant_id, link_date, service_id, shift_id, cursor=cursor
    )
    links = get_context_links(restaurant_id, link_date, service_id, shift_id, cursor=cursor)

    for table in tables:
        if any(r['table_id'] == table['id'] for r in reservations):
            logger.warning(f"Link rejected: table {table['table_number']} is reserved")
            raise ConflictError(get_message('table_occupied', number=table['table_number']))

        if any(table['id'] in (l['primary_table_id'], l['secondary_table_id']) for l in links):
            logger.warning(f"Link rejected: table {table['table_number']} is already linked")
            raise ConflictError(get_message('table_linked', number=table['table_number']))
