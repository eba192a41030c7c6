"""
Tenant scoping helpers.
Every read and write is filtered by the restaurant the current actor may access.
"""

from flask import abort
from flask_login import current_user

from utils.errors import NotFoundError
from utils.messages import get_message


def ensure_restaurant_access(restaurant_id: int) -> int:
    """
    Abort with 403 when the current actor may not act on the restaurant.

    Args:
        restaurant_id: Restaurant named by the request

    Returns:
        The same restaurant ID, for chaining
    """
    if not current_user.can_access_restaurant(restaurant_id):
        abort(403, description=get_message('forbidden'))
    return restaurant_id


def actor_scope() -> int:
    """
    Restaurant filter for by-id lookups.

    Returns:
        The actor's restaurant ID, or None for super admins (no filter)
    """
    if current_user.is_super_admin:
        return None
    return current_user.restaurant_id


def ensure_visible(entity: dict, message_key: str) -> dict:
    """
    Hide rows of other tenants behind a 404.

    Args:
        entity: Row dict with a restaurant_id key, or None
        message_key: Message used for the NotFoundError

    Returns:
        The entity when visible

    Raises:
        NotFoundError: If the entity is absent or belongs to another tenant
    """
    if not entity or not current_user.can_access_restaurant(entity['restaurant_id']):
        raise NotFoundError(get_message(message_key))
    return entity
