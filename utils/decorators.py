"""
Route decorators for authentication and authorization.
Provides role-based access control for routes.
"""

from functools import wraps
from flask import abort
from flask_login import login_required, current_user

from utils.messages import get_message


def role_required(role: str):
    """
    Decorator to require a minimum actor role for a route.

    Usage:
        @bp.route('/tables', methods=['POST'])
        @login_required
        @role_required('restaurant_admin')
        def create_table():
            ...

    Args:
        role: Minimum role required ('staff', 'restaurant_admin', 'super_admin')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.has_role(role):
                abort(403, description=get_message('role_required', role=role))

            return func(*args, **kwargs)
        return wrapper
    return decorator


# Re-export login_required for convenience
__all__ = ['login_required', 'role_required']
