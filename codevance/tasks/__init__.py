"""Background task processing."""

import atexit
import logging

log = logging.getLogger("tasks")

def init_tasks(app):
    """Initialize the task system with the Flask app."""
    from codevance.extensions import scheduler
    from codevance.tasks.executor import get_executor, shutdown
    from codevance.tasks.sync_tasks import setup_sync_jobs

    get_executor(app.config.get('SYNC_MAX_WORKERS'))
    atexit.register(shutdown, wait=False)

    if not app.config.get('SYNC_SCHEDULER_ENABLED'):
        log.info("Scheduled sync disabled")
        return

    setup_sync_jobs(app)
    if not scheduler.running:
        scheduler.start()
        atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)
    log.info("Task scheduler started")
