"""
Test application factory and configuration.
"""

import pytest
from app import create_app
from config import ProductionConfig


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app.config['TESTING'] is True

    def test_app_has_blueprints(self):
        app = create_app('test')
        assert list(app.blueprints.keys()) == ['api']

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')
        assert hasattr(app, 'login_manager')

    def test_api_routes_registered(self):
        app = create_app('test')
        rules = {rule.rule for rule in app.url_map.iter_rules()}

        assert {'/api/availability', '/api/plan', '/api/reservations',
                '/api/tables/link', '/api/tables/unlink', '/health'} <= rules


class TestAppConfiguration:
    """Test application configuration."""

    def test_defaults(self):
        app = create_app('test')

        assert app.config['APP_NAME'] == 'TableKeeper'
        assert app.config['DEFAULT_MAX_PARTY_SIZE'] == 20
        assert app.config['DEFAULT_RESERVATION_DURATION'] == 90
        assert app.config['ACTOR_ID_HEADER'] == 'X-Actor-Id'

    def test_production_requires_secret_key(self, monkeypatch):
        monkeypatch.delenv('SECRET_KEY', raising=False)

        with pytest.raises(ValueError, match='SECRET_KEY'):
            ProductionConfig.validate()

    def test_production_rejects_short_secret_key(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'short')

        with pytest.raises(ValueError, match='32 characters'):
            ProductionConfig.validate()

    def test_production_requires_database_path(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'x' * 40)
        monkeypatch.delenv('DATABASE_PATH', raising=False)

        with pytest.raises(ValueError, match='DATABASE_PATH'):
            ProductionConfig.validate()


class TestHealth:

    def test_health_needs_no_identity(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok', 'version': '1.0.0'}


class TestCLICommands:
    """Test CLI commands."""

    def test_cli_commands_registered(self):
        app = create_app('test')
        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'create-restaurant' in commands

    def test_create_restaurant(self, app):
        from models.restaurant import get_all_restaurants

        result = app.test_cli_runner().invoke(args=['create-restaurant', 'Le Test', 'le-test'])

        assert result.exit_code == 0
        assert 'Restaurant created successfully' in result.output
        assert 'le-test' in [r['slug'] for r in get_all_restaurants()]

    def test_create_restaurant_duplicate_slug(self, app):
        runner = app.test_cli_runner()
        runner.invoke(args=['create-restaurant', 'First', 'dup'])

        result = runner.invoke(args=['create-restaurant', 'Second', 'dup'])

        assert result.exit_code == 1

    def test_init_db_without_seed(self, app):
        from models.restaurant import get_all_restaurants

        result = app.test_cli_runner().invoke(args=['init-db', '--no-seed'])

        assert result.exit_code == 0
        assert 'Database initialized successfully' in result.output
        assert get_all_restaurants() == []
