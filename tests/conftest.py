"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

from flask import g
from flask.testing import FlaskClient

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'tablekeeper_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

TEST_DATE = '2025-06-01'


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


class ActorClient(FlaskClient):
    """
    Test client that re-reads the identity headers on every request.

    Requests reuse the fixture's app context, so the actor Flask-Login caches
    on `g` must be dropped before each call.
    """

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


@pytest.fixture
def client(app):
    """Create test client."""
    app.test_client_class = ActorClient
    return app.test_client()


# =============================================================================
# IDENTITY HEADERS
# =============================================================================

def actor_headers(restaurant_id=None, role='staff', actor_id='staff-1'):
    """Headers the authentication gateway forwards for an actor."""
    headers = {'X-Actor-Id': actor_id, 'X-Actor-Role': role}
    if restaurant_id is not None:
        headers['X-Restaurant-Id'] = str(restaurant_id)
    return headers


@pytest.fixture
def staff_headers(bistro):
    return actor_headers(bistro['restaurant_id'])


@pytest.fixture
def admin_headers(bistro):
    return actor_headers(bistro['restaurant_id'], role='restaurant_admin', actor_id='admin-1')


@pytest.fixture
def super_headers():
    return actor_headers(role='super_admin', actor_id='root')


# =============================================================================
# DATA FACTORIES
# =============================================================================

@pytest.fixture
def bistro(app):
    """
    Restaurant "Bistro" with Table A (2-4) and Table B (4-6), no merge rule.

    Returns:
        dict with restaurant_id, lunch_id, dinner_id, table_a, table_b
    """
    from models.restaurant import create_restaurant
    from models.table import create_table

    restaurant = create_restaurant('Bistro', 'bistro')
    services = {s['type']: s['id'] for s in restaurant['services']}

    table_a = create_table(restaurant['id'], 'A', min_capacity=2, max_capacity=4)
    table_b = create_table(restaurant['id'], 'B', min_capacity=4, max_capacity=6)

    return {
        'restaurant_id': restaurant['id'],
        'lunch_id': services['lunch'],
        'dinner_id': services['dinner'],
        'table_a': table_a,
        'table_b': table_b,
    }


@pytest.fixture
def dinner_shifts(bistro):
    """Two dinner shifts for the Bistro."""
    from models.service import create_shift

    first = create_shift(bistro['dinner_id'], 'First seating', '19:00', '20:45', sort_order=1)
    second = create_shift(bistro['dinner_id'], 'Second seating', '21:00', '22:30', sort_order=2)
    return {'first': first, 'second': second}


@pytest.fixture
def other_restaurant(app):
    """A second tenant with one table."""
    from models.restaurant import create_restaurant
    from models.table import create_table

    restaurant = create_restaurant('Other Place', 'other-place')
    services = {s['type']: s['id'] for s in restaurant['services']}
    table = create_table(restaurant['id'], '1', min_capacity=1, max_capacity=4)

    return {
        'restaurant_id': restaurant['id'],
        'dinner_id': services['dinner'],
        'table': table,
    }


def make_reservation(bistro, **overrides):
    """Create a dinner reservation in the Bistro for TEST_DATE."""
    from models.reservation import create_reservation

    values = {
        'reservation_date': TEST_DATE,
        'service_id': bistro['dinner_id'],
        'reservation_time': '20:00',
        'party_size': 2,
        'customer_name': 'Ada Lovelace',
    }
    values.update(overrides)
    return create_reservation(bistro['restaurant_id'], **values)
