import os
from flask import Flask

from codevance.extensions import init_extensions
from codevance.errors import register_error_handlers
from codevance.logger import setup_logging

def create_app(test_config=None):
    """Application factory function."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration; a test mapping overrides the class config
    from codevance.config import get_config
    config_name = os.environ.get('FLASK_ENV', 'default')
    app.config.from_object(get_config('testing' if test_config and test_config.get('TESTING') else config_name))
    if test_config is not None:
        app.config.from_mapping(test_config)

    # Ensure the instance folder exists
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass

    setup_logging(app)

    # Initialize extensions
    init_extensions(app)

    # Register error handlers
    register_error_handlers(app)

    register_blueprints(app)

    from codevance.commands import register_commands
    register_commands(app)

    from codevance.services.container import init_container
    init_container(app)

    # Background executor and periodic sync jobs
    from codevance.tasks import init_tasks
    init_tasks(app)

    return app

def register_blueprints(app):
    """Register all blueprints with the application."""
    from codevance.web.auth import auth_bp
    from codevance.web.accounts import accounts_bp
    from codevance.web.problems import problems_bp
    from codevance.web.notifications import notifications_bp
    from codevance.web.health import health_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(accounts_bp, url_prefix='/api')
    app.register_blueprint(problems_bp, url_prefix='/api')
    app.register_blueprint(notifications_bp, url_prefix='/api')
    app.register_blueprint(health_bp, url_prefix='/health')
