"""
Restaurant (tenant) data access functions.
Handles tenant creation, default services and the per-tenant settings record.
"""

import logging
import re
import sqlite3

from flask import current_app

from database import get_db
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.messages import get_message

logger = logging.getLogger(__name__)

SETTINGS_BOOLEAN_FIELDS = (
    'module_dashboard',
    'module_floor_plan',
    'module_planning',
    'module_reservations',
    'enable_table_merge',
    'link_requires_merge_rule',
)

SETTINGS_INTEGER_FIELDS = (
    'default_reservation_duration',
    'max_party_size',
)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')


def get_all_restaurants() -> list:
    """
    Get all restaurants with their settings.

    Returns:
        List of restaurant dicts ordered by name, each with a 'settings' key
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM restaurants ORDER BY name')
    restaurants = [dict(row) for row in cursor.fetchall()]

    for restaurant in restaurants:
        restaurant['settings'] = _fetch_settings(cursor, restaurant['id'])

    return restaurants


def get_restaurant_by_id(restaurant_id: int) -> dict:
    """
    Get restaurant by ID.

    Args:
        restaurant_id: Restaurant ID

    Returns:
        Restaurant dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM restaurants WHERE id = ?', (restaurant_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_restaurant(name: str, slug: str, logo_url: str = None, settings: dict = None) -> dict:
    """
    Create a restaurant with its settings row and default services.

    Args:
        name: Display name
        slug: URL slug, unique across tenants
        logo_url: Optional logo URL
        settings: Optional overrides for the settings record

    Returns:
        dict: Created restaurant with 'settings' and 'services'

    Raises:
        ValidationError: If name or slug is missing or malformed
        ConflictError: If the slug is already taken
    """
    name = (name or '').strip()
    slug = (slug or '').strip().lower()

    if not name or not slug:
        raise ValidationError(get_message('missing_fields', fields='name, slug'))
    if not SLUG_PATTERN.match(slug):
        raise ValidationError('slug may only contain lowercase letters, digits and dashes')

    overrides = _clean_settings(settings or {})
    config = current_app.config

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT id FROM restaurants WHERE slug = ?', (slug,))
        if cursor.fetchone():
            raise ConflictError(get_message('slug_exists'))

        cursor.execute('''
            INSERT INTO restaurants (name, slug, logo_url)
            VALUES (?, ?, ?)
        ''', (name, slug, logo_url))
        restaurant_id = cursor.lastrowid

        values = {
            'enable_table_merge': int(config.get('DEFAULT_ENABLE_TABLE_MERGE', True)),
            'link_requires_merge_rule': int(config.get('DEFAULT_LINK_REQUIRES_MERGE_RULE', True)),
            'default_reservation_duration': config.get('DEFAULT_RESERVATION_DURATION', 90),
            'max_party_size': config.get('DEFAULT_MAX_PARTY_SIZE', 20),
        }
        values.update(overrides)

        columns = ', '.join(['restaurant_id'] + list(values))
        placeholders = ', '.join('?' * (len(values) + 1))
        cursor.execute(
            f'INSERT INTO restaurant_settings ({columns}) VALUES ({placeholders})',
            [restaurant_id] + list(values.values())
        )

        for service_name, service_type, start_time, end_time in config.get('DEFAULT_SERVICES', ()):
            cursor.execute('''
                INSERT INTO services (restaurant_id, name, type, start_time, end_time)
                VALUES (?, ?, ?, ?, ?)
            ''', (restaurant_id, service_name, service_type, start_time, end_time))

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        raise ConflictError(get_message('slug_exists')) from e
    except Exception:
        db.rollback()
        raise

    logger.info(f'Restaurant {slug} created (id={restaurant_id})')

    restaurant = get_restaurant_by_id(restaurant_id)
    restaurant['settings'] = get_restaurant_settings(restaurant_id)
    from models.service import get_services
    restaurant['services'] = get_services(restaurant_id)
    return restaurant


# =============================================================================
# SETTINGS
# =============================================================================

def get_restaurant_settings(restaurant_id: int) -> dict:
    """
    Get the configuration record the core reads for a tenant.

    Args:
        restaurant_id: Restaurant ID

    Returns:
        dict: Settings with boolean toggles as bool

    Raises:
        NotFoundError: If the restaurant does not exist
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT id FROM restaurants WHERE id = ?', (restaurant_id,))
    if not cursor.fetchone():
        raise NotFoundError(get_message('restaurant_not_found'))

    settings = _fetch_settings(cursor, restaurant_id)
    if settings is None:
        # Tenants created outside create_restaurant fall back to app defaults
        config = current_app.config
        settings = {
            'restaurant_id': restaurant_id,
            'module_dashboard': True,
            'module_floor_plan': True,
            'module_planning': True,
            'module_reservations': True,
            'enable_table_merge': bool(config.get('DEFAULT_ENABLE_TABLE_MERGE', True)),
            'link_requires_merge_rule': bool(config.get('DEFAULT_LINK_REQUIRES_MERGE_RULE', True)),
            'default_reservation_duration': config.get('DEFAULT_RESERVATION_DURATION', 90),
            'max_party_size': config.get('DEFAULT_MAX_PARTY_SIZE', 20),
        }
    return settings


def update_restaurant_settings(restaurant_id: int, **fields) -> dict:
    """
    Update settings fields. Unknown fields are ignored.

    Args:
        restaurant_id: Restaurant ID
        **fields: Settings to change

    Returns:
        dict: Updated settings

    Raises:
        NotFoundError: If the restaurant does not exist
        ValidationError: If no known field is given or a value is invalid
    """
    get_restaurant_settings(restaurant_id)

    values = _clean_settings(fields)
    if not values:
        raise ValidationError(get_message('no_fields'))

    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT id FROM restaurant_settings WHERE restaurant_id = ?', (restaurant_id,))
    if not cursor.fetchone():
        cursor.execute('INSERT INTO restaurant_settings (restaurant_id) VALUES (?)', (restaurant_id,))

    updates = [f'{field} = ?' for field in values]
    updates.append('updated_at = CURRENT_TIMESTAMP')
    cursor.execute(
        f'UPDATE restaurant_settings SET {", ".join(updates)} WHERE restaurant_id = ?',
        list(values.values()) + [restaurant_id]
    )
    db.commit()

    return get_restaurant_settings(restaurant_id)


def _clean_settings(fields: dict) -> dict:
    """Keep known settings fields and coerce their types."""
    values = {}
    for field in SETTINGS_BOOLEAN_FIELDS:
        if field in fields and fields[field] is not None:
            values[field] = 1 if fields[field] in (True, 1, '1', 'true', 'True') else 0

    for field in SETTINGS_INTEGER_FIELDS:
        if field in fields and fields[field] is not None:
            try:
                number = int(fields[field])
            except (TypeError, ValueError):
                number = 0
            if number <= 0:
                raise ValidationError(get_message('invalid_integer', field=field))
            values[field] = number

    return values


def _fetch_settings(cursor, restaurant_id: int) -> dict:
    cursor.execute('SELECT * FROM restaurant_settings WHERE restaurant_id = ?', (restaurant_id,))
    row = cursor.fetchone()
    if not row:
        return None

    settings = dict(row)
    for field in SETTINGS_BOOLEAN_FIELDS:
        settings[field] = bool(settings[field])
    return settings
