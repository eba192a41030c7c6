"""
TableKeeper - Restaurant table allocation service
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager

# Import database functions
from database import close_db, init_db

from utils.api_response import api_error
from utils.errors import AppError
from utils.messages import get_message


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()
    app.config.from_object(config_class)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/health')
    def health():
        """Liveness probe."""
        return {'status': 'ok', 'version': app.config.get('APP_VERSION')}


def _rollback():
    db = g.get('db')
    if db:
        db.rollback()


def register_error_handlers(app):
    """Register error handlers. Every error answers the JSON envelope."""

    @app.errorhandler(AppError)
    def app_error(error):
        """Handle errors raised by the models."""
        _rollback()
        if error.status_code >= 500:
            app.logger.error(f'{type(error).__name__}: {error.message}')
        return api_error(error.message, error.status_code, **error.details)

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle 403/404/405 and other HTTP errors."""
        return api_error(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def internal_error(error):
        """Handle unexpected errors; the message is surfaced for diagnostics."""
        _rollback()
        app.logger.error(f'Unhandled error: {error}', exc_info=True)
        return api_error(str(error) or get_message('internal_error'), 500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    @click.option('--no-seed', is_flag=True, help='Create the schema without the demo restaurant.')
    def init_db_command(no_seed):
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db(seed=not no_seed)
        click.echo('Database initialized successfully!')

    @app.cli.command('create-restaurant')
    @click.argument('name')
    @click.argument('slug')
    def create_restaurant_command(name, slug):
        """Create a restaurant with default settings and services."""
        from models.restaurant import create_restaurant

        with app.app_context():
            try:
                restaurant = create_restaurant(name, slug)
                click.echo(f"Restaurant created successfully! ID: {restaurant['id']}")
            except AppError as e:
                click.echo(f'Error creating restaurant: {e.message}', err=True)
                raise SystemExit(1)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        log_dir = app.config.get('LOG_DIR', 'logs')
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(os.path.join(log_dir, 'tablekeeper.log'))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Model loggers (models.*) write to the same file
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('TableKeeper startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)
        logging.getLogger('models').setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
