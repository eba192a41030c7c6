"""
API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import availability
from blueprints.api import reservations
from blueprints.api import restaurants
from blueprints.api import tables

# Register all route functions on the blueprint
availability.register_routes(api_bp)
reservations.register_routes(api_bp)
restaurants.register_routes(api_bp)
tables.register_routes(api_bp)
