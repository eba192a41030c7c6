"""
Availability engine.
Computes which free tables, or declared pairs of free tables, can host a party
in a context, tags each with a fit recommendation and orders them.

The option builder is pure; compute_availability() loads its inputs.
"""

from models.context import (
    get_context_links, get_context_reservations,
    linked_table_ids, occupied_table_ids
)
from models.merge_rule import get_merge_rules
from models.restaurant import get_restaurant_settings
from models.service import validate_context
from models.table import get_active_tables
from utils.errors import ValidationError
from utils.messages import get_message


# =============================================================================
# CONSTANTS
# =============================================================================

# party_size / max_capacity above this is a tight fit
TIGHT_RATIO = 0.9

# party_size / max_capacity below this wastes seats
SPACIOUS_RATIO = 0.5

RECOMMENDATION_RANK = {
    'optimal': 0,
    'tight': 1,
    'spacious': 2,
}


# =============================================================================
# PURE COMPUTATION
# =============================================================================

def classify_fit(party_size: int, max_capacity: int) -> str:
    """
    Tag how well a party fills a single table.

    Args:
        party_size: Number of guests
        max_capacity: Table maximum

    Returns:
        str: 'tight', 'spacious' or 'optimal'
    """
    ratio = party_size / max_capacity
    if ratio > TIGHT_RATIO:
        return 'tight'
    if ratio < SPACIOUS_RATIO:
        return 'spacious'
    return 'optimal'


def option_sort_key(option: dict) -> tuple:
    """Rank first, then the smallest table that still fits."""
    return RECOMMENDATION_RANK[option['recommendation']], option['capacity']['max']


def build_availability_options(
    tables: list,
    reservations: list,
    links: list,
    merge_rules: list,
    party_size: int,
    allow_merge: bool = True
) -> list:
    """
    Build the ordered list of seating options for a party.

    Args:
        tables: Active tables of the restaurant
        reservations: Reservations holding tables in the context
        links: Links active in the context
        merge_rules: Declared mergeable pairs
        party_size: Number of guests (> 0)
        allow_merge: Whether merged options may be offered

    Returns:
        list: Option dicts
            {
                'type': 'single' | 'merged',
                'table_id': int (single only),
                'table_ids': [int, int] (merged only),
                'table_number': str,
                'capacity': {'min': int, 'max': int},
                'recommendation': 'optimal' | 'tight' | 'spacious'
            }
    """
    unavailable = occupied_table_ids(reservations) | linked_table_ids(links)
    free_tables = {t['id']: t for t in tables if t['id'] not in unavailable}

    options = []

    for table in free_tables.values():
        if table['min_capacity'] <= party_size <= table['max_capacity']:
            options.append({
                'type': 'single',
                'table_id': table['id'],
                'table_number': table['table_number'],
                'capacity': {'min': table['min_capacity'], 'max': table['max_capacity']},
                'recommendation': classify_fit(party_size, table['max_capacity']),
            })

    if allow_merge:
        for rule in merge_rules:
            table_a = free_tables.get(rule['table_a_id'])
            table_b = free_tables.get(rule['table_b_id'])
            if not table_a or not table_b:
                continue

            combined_min = table_a['min_capacity'] + table_b['min_capacity']
            combined_max = table_a['max_capacity'] + table_b['max_capacity']

            if combined_min <= party_size <= combined_max:
                # Merges are always presented as optimal
                options.append({
                    'type': 'merged',
                    'table_ids': [table_a['id'], table_b['id']],
                    'table_number': f"{table_a['table_number']} + {table_b['table_number']}",
                    'capacity': {'min': combined_min, 'max': combined_max},
                    'recommendation': 'optimal',
                })

    options.sort(key=option_sort_key)
    return options


# =============================================================================
# DATABASE ENTRY POINT
# =============================================================================

def compute_availability(
    restaurant_id: int,
    date: str,
    service_id: int,
    shift_id: int = None,
    party_size: int = 2
) -> dict:
    """
    Compute seating options for a party in a context.

    Args:
        restaurant_id: Restaurant ID
        date: Date (YYYY-MM-DD)
        service_id: Service ID
        shift_id: Optional shift ID
        party_size: Number of guests

    Returns:
        dict: {'options': [...], 'total_available': int}

    Raises:
        NotFoundError: If the restaurant, service or shift does not exist
        ValidationError: If the party exceeds the restaurant's maximum
    """
    settings = get_restaurant_settings(restaurant_id)
    validate_context(restaurant_id, service_id, shift_id)

    if party_size > settings['max_party_size']:
        raise ValidationError(get_message('party_size_too_large', max=settings['max_party_size']))

    tables = get_active_tables(restaurant_id)
    if not tables:
        return {'options': [], 'total_available': 0}

    reservations = get_context_reservations(restaurant_id, date, service_id, shift_id)
    links = get_context_links(restaurant_id, date, service_id, shift_id)
    merge_rules = get_merge_rules(restaurant_id) if settings['enable_table_merge'] else []

    options = build_availability_options(
        tables, reservations, links, merge_rules, party_size,
        allow_merge=settings['enable_table_merge']
    )

    return {
        'options': options,
        'total_available': len(options),
    }
