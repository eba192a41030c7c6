"""
Merge rule data access functions.
A merge rule declares that two tables of the same restaurant may be linked.
"""

import sqlite3

from database import get_db
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.messages import get_message


def get_merge_rules(restaurant_id: int) -> list:
    """
    Get merge rules of a restaurant.

    Args:
        restaurant_id: Restaurant ID

    Returns:
        List of rule dicts with both table numbers
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT m.*,
               ta.table_number as table_a_number,
               tb.table_number as table_b_number
        FROM table_merge_rules m
        JOIN tables ta ON m.table_a_id = ta.id
        JOIN tables tb ON m.table_b_id = tb.id
        WHERE m.restaurant_id = ?
        ORDER BY m.id
    ''', (restaurant_id,))
    return [dict(row) for row in cursor.fetchall()]


def get_merge_rule_by_id(rule_id: int) -> dict:
    """Get a merge rule by ID, or None."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM table_merge_rules WHERE id = ?', (rule_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def find_merge_rule(table_a_id: int, table_b_id: int, cursor=None) -> dict:
    """
    Find the rule for an unordered pair of tables.

    Args:
        table_a_id: First table
        table_b_id: Second table
        cursor: Active transaction cursor

    Returns:
        Rule dict or None
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT * FROM table_merge_rules
        WHERE (table_a_id = ? AND table_b_id = ?)
           OR (table_a_id = ? AND table_b_id = ?)
    ''', (table_a_id, table_b_id, table_b_id, table_a_id))
    row = cur.fetchone()
    return dict(row) if row else None


def create_merge_rule(restaurant_id: int, table_a_id: int, table_b_id: int) -> dict:
    """
    Declare that two tables may be linked.

    Args:
        restaurant_id: Restaurant ID
        table_a_id: First table
        table_b_id: Second table

    Returns:
        dict: Created rule

    Raises:
        ValidationError: If both IDs are the same table
        NotFoundError: If a table does not exist in this restaurant
        ConflictError: If a rule for the pair already exists
    """
    if table_a_id == table_b_id:
        raise ValidationError(get_message('same_table'))

    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT id FROM tables WHERE id IN (?, ?) AND restaurant_id = ?
    ''', (table_a_id, table_b_id, restaurant_id))
    if len(cursor.fetchall()) != 2:
        raise NotFoundError(get_message('tables_not_found'))

    if find_merge_rule(table_a_id, table_b_id, cursor):
        raise ConflictError(get_message('merge_rule_exists'))

    try:
        cursor.execute('''
            INSERT INTO table_merge_rules (restaurant_id, table_a_id, table_b_id)
            VALUES (?, ?, ?)
        ''', (restaurant_id, table_a_id, table_b_id))
        db.commit()
    except sqlite3.IntegrityError as e:
        db.rollback()
        raise ConflictError(get_message('merge_rule_exists')) from e

    return get_merge_rule_by_id(cursor.lastrowid)


def delete_merge_rule(rule_id: int) -> bool:
    """
    Delete a merge rule. Existing links are left in place.

    Raises:
        NotFoundError: If the rule does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM table_merge_rules WHERE id = ?', (rule_id,))
    db.commit()

    if cursor.rowcount == 0:
        raise NotFoundError(get_message('merge_rule_not_found'))
    return True
