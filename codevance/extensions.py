"""
Initialize Flask extensions for the application.

These extensions are instantiated here and initialized in the application factory.
"""

from flask import jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_caching import Cache
from flask_apscheduler import APScheduler

# SQLAlchemy for database ORM
db = SQLAlchemy()

# Flask-Login for user authentication
login_manager = LoginManager()

# Rate limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"]
)

# Cache
cache = Cache()

# Scheduler
scheduler = APScheduler()

def init_extensions(app):
    """Initialize all Flask extensions."""
    db.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)

    cache.init_app(app, config={
        'CACHE_TYPE': app.config.get('CACHE_TYPE', 'SimpleCache'),
        'CACHE_DEFAULT_TIMEOUT': app.config.get('CACHE_DEFAULT_TIMEOUT', 300)
    })

    scheduler.init_app(app)

    # Load user for Flask-Login
    from codevance.models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentication required"}), 401
