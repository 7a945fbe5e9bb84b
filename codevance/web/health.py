import logging
import platform
from datetime import datetime

import psutil
from flask import Blueprint, current_app, jsonify
from sqlalchemy.sql import text

from codevance.extensions import db, scheduler

health_bp = Blueprint('health', __name__)
log = logging.getLogger(__name__)
start_time = datetime.utcnow()

@health_bp.route('')
def health():
    """Return system health information as JSON."""
    db_ok = _check_db_connection()
    status = {
        'status': 'healthy' if db_ok else 'unhealthy',
        'version': current_app.config.get('VERSION', '1.0.0'),
        'timestamp': datetime.utcnow().isoformat(),
        'uptime': str(datetime.utcnow() - start_time).split('.')[0],
        'database': 'connected' if db_ok else 'disconnected',
        'scheduler': 'running' if scheduler.running else 'stopped',
        'system': _get_system_resources(),
    }
    return jsonify(status), 200 if db_ok else 503

def _check_db_connection():
    """Check if database connection is working."""
    try:
        db.session.execute(text('SELECT 1'))
        return True
    except Exception as e:
        log.error(f"Database connection check failed: {str(e)}")
        return False

def _get_system_resources():
    """Get system resource usage."""
    try:
        memory = psutil.virtual_memory()
        return {
            'python_version': platform.python_version(),
            'cpu_percent': psutil.cpu_percent(interval=None),
            'memory_percent': memory.percent,
        }
    except Exception as e:
        log.error(f"Error getting system resources: {str(e)}")
        return {}
