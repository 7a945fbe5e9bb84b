"""Scheduled tasks for linked account synchronization."""

import logging
from codevance.extensions import scheduler
from codevance.platforms import syncable_platform_names
from codevance.services.container import container

log = logging.getLogger(__name__)

SCHEDULED_SYNC_JOB_ID = 'scheduled_sync'

def start_account_sync(account, on_complete=None):
    """Start a background sync for one linked account.

    Returns:
        Future for the sync, or None if it was not started
    """
    orchestrator = container().build_orchestrator(account.user_id)
    return orchestrator.start_sync(account, on_complete=on_complete)

def run_scheduled_sync(app=None):
    """Start a sync for every active, sync-capable linked account.

    Returns:
        dict: Counts of started and skipped syncs
    """
    app = app or scheduler.app
    with app.app_context():
        accounts = container().get('linked_account_repository').list_active(syncable_platform_names())
        log.info(f"Running scheduled sync for {len(accounts)} linked accounts")

        started = 0
        for account in accounts:
            try:
                if start_account_sync(account) is not None:
                    started += 1
            except Exception as e:
                log.error(f"Could not start scheduled sync for account {account.id}: {str(e)}", exc_info=True)

        skipped = len(accounts) - started
        log.info(f"Scheduled sync stats: {started} started, {skipped} skipped")
        return {'started': started, 'skipped': skipped}

def sync_account_now(account_id):
    """Run a sync for one account on the calling thread.

    Returns:
        SyncReport, or None if the account does not exist or is already syncing
    """
    account = container().get('linked_account_repository').get_by_id(account_id)
    if account is None:
        log.error(f"Account {account_id} not found")
        return None

    future = start_account_sync(account)
    if future is None:
        return None
    return future.result()

def setup_sync_jobs(app):
    """Register synchronization jobs with the scheduler."""
    interval = app.config.get('SYNC_INTERVAL_MINUTES', 360)
    scheduler.add_job(
        id=SCHEDULED_SYNC_JOB_ID,
        func=run_scheduled_sync,
        kwargs={'app': app},
        trigger='interval',
        minutes=interval,
        replace_existing=True
    )
    app.logger.info(f"Scheduled sync job registered every {interval} minutes")
