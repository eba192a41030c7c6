"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask import current_app, request
from flask_login import LoginManager

from utils.api_response import api_error

# Initialize Flask-Login
login_manager = LoginManager()


@login_manager.request_loader
def load_actor_from_request(req):
    """
    Load the acting staff member from gateway headers for Flask-Login.

    Args:
        req: The current request

    Returns:
        Actor object or None if headers are absent or invalid
    """
    from models.actor import actor_from_headers

    return actor_from_headers(req.headers, current_app.config)


@login_manager.unauthorized_handler
def unauthorized():
    """Answer JSON instead of redirecting to a login page."""
    current_app.logger.debug(f'Unauthenticated request to {request.path}')
    return api_error('Authentication required', 401)
