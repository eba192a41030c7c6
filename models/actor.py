"""
Actor model for Flask-Login integration.
Staff identity is managed by the upstream authentication gateway; this module
only wraps the forwarded identity headers.
"""

ROLES = ('super_admin', 'restaurant_admin', 'staff')

ROLE_RANK = {
    'staff': 1,
    'restaurant_admin': 2,
    'super_admin': 3,
}


class Actor:
    """
    Actor class for Flask-Login integration.
    Wraps the identity forwarded by the gateway with required Flask-Login properties.
    """

    def __init__(self, actor_id: str, role: str = 'staff', restaurant_id: int = None):
        """
        Initialize Actor from gateway headers.

        Args:
            actor_id: Opaque staff identifier
            role: One of ROLES
            restaurant_id: Tenant the actor belongs to (None for super admins)
        """
        self.id = actor_id
        self.role = role
        self.restaurant_id = restaurant_id

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_super_admin(self) -> bool:
        return self.role == 'super_admin'

    def get_id(self):
        """Required by Flask-Login. Returns actor ID as string."""
        return str(self.id)

    def has_role(self, role: str) -> bool:
        """True if the actor's role is at least `role`."""
        return ROLE_RANK.get(self.role, 0) >= ROLE_RANK.get(role, 0)

    def can_access_restaurant(self, restaurant_id: int) -> bool:
        """Super admins see every tenant; everyone else only their own."""
        if self.is_super_admin:
            return True
        return self.restaurant_id is not None and self.restaurant_id == restaurant_id


def actor_from_headers(headers, config) -> Actor:
    """
    Build an Actor from gateway headers.

    Args:
        headers: Request headers mapping
        config: Flask config (header names)

    Returns:
        Actor or None if the headers are missing or malformed
    """
    actor_id = (headers.get(config['ACTOR_ID_HEADER']) or '').strip()
    if not actor_id:
        return None

    role = (headers.get(config['ACTOR_ROLE_HEADER']) or 'staff').strip()
    if role not in ROLES:
        return None

    restaurant_id = None
    raw_restaurant = (headers.get(config['ACTOR_RESTAURANT_HEADER']) or '').strip()
    if raw_restaurant:
        try:
            restaurant_id = int(raw_restaurant)
        except ValueError:
            return None

    # Non super admins are always bound to a tenant
    if role != 'super_admin' and restaurant_id is None:
        return None

    return Actor(actor_id, role=role, restaurant_id=restaurant_id)
