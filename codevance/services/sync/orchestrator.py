"""
Drives one platform sync from start to finish.

``start_sync`` is the fire-and-forget entry point used by the web layer and
the scheduler. It enforces at most one running sync per platform and hands the
work to an executor; ``run_sync`` is the procedure that runs there:

    resolve user -> drop old synced records -> fetch -> classify
        -> reconcile -> record last sync -> notify

Every attempt ends with exactly one terminal notification and always releases
its SyncState entry, whatever happens in between.
"""

import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from codevance.errors import SyncError
from codevance.services.sync.outcomes import SyncOutcomeKind, classify_fetch_result, describe_outcome
from codevance.services.sync.ports import AccountStore, Notifier, PlatformFetcher, ProblemStore
from codevance.services.sync.reconciler import Reconciler
from codevance.services.sync.state import SyncState
from codevance.tasks.executor import get_executor

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class SyncTarget:
    """Plain copy of the linked account fields a sync needs.

    Taken on the calling thread so the worker never touches an ORM instance
    bound to another thread's session.
    """

    id: str
    user_id: str
    platform: str
    username: str

    @classmethod
    def from_account(cls, account) -> 'SyncTarget':
        if isinstance(account, cls):
            return account
        if isinstance(account, dict):
            return cls(str(account['id']), str(account['user_id']), account['platform'], account['username'])
        return cls(str(account.id), str(account.user_id), account.platform, account.username)

@dataclass
class SyncReport:
    """Result of one sync attempt. ``outcome`` is None when the sync failed fatally."""

    outcome: Optional[SyncOutcomeKind]
    synced_count: int = 0
    elapsed: float = 0.0
    speed: float = 0.0
    error: Optional[str] = None

class SyncOrchestrator:
    """Runs platform syncs for linked accounts."""

    def __init__(self, sync_state: SyncState, fetchers: Dict[str, PlatformFetcher],
                 problem_store: ProblemStore, account_store: AccountStore, notifier: Notifier,
                 user_resolver: Callable[[str], Any], reconciler: Optional[Reconciler] = None,
                 executor=None, on_problems_update: Optional[Callable[[], None]] = None,
                 on_sync_settled: Optional[Callable[[str], None]] = None):
        """
        Args:
            sync_state: Registry of running syncs shared with observers
            fetchers: Platform name -> fetcher
            problem_store: Where problem records live
            account_store: Records the last sync time of an account
            notifier: Receives user-facing status messages
            user_resolver: Returns the user for an ID, or None
            reconciler: Defaults to a Reconciler over ``problem_store``
            executor: Anything with ``submit(fn, *args)``; defaults to the
                shared task pool
            on_problems_update: Called whenever stored problems changed
            on_sync_settled: Called with the platform name once a sync has
                released its state entry
        """
        self.sync_state = sync_state
        self.fetchers = dict(fetchers)
        self.problem_store = problem_store
        self.account_store = account_store
        self.notifier = notifier
        self.user_resolver = user_resolver
        self.reconciler = reconciler or Reconciler(problem_store, sync_state=sync_state)
        self.executor = executor or get_executor()
        self.on_problems_update = on_problems_update
        self.on_sync_settled = on_sync_settled

    def start_sync(self, account, on_complete: Optional[Callable[[SyncReport], None]] = None) -> Optional[Future]:
        """Start syncing ``account`` in the background.

        Returns:
            Future resolving to a SyncReport, or None if the sync was not started
        """
        target = SyncTarget.from_account(account)
        platform = target.platform

        if platform not in self.fetchers:
            log.info(f"Sync requested for unsupported platform {platform} (account {target.id})")
            self._notify(Notifier.INFO, "Sync Not Available", f"Sync is not available for {platform} yet.")
            return None

        future = self.sync_state.try_start(
            platform,
            lambda: self.executor.submit(self.run_sync, target, on_complete),
        )
        if future is None:
            log.info(f"{platform} sync already running, ignoring request for account {target.id}")
            self._notify(Notifier.INFO, "Sync Already Running",
                         f"A {platform} sync is already in progress. Please wait for it to finish.")
            return None

        log.info(f"Started {platform} sync for account {target.id} ({target.username})")
        return future

    def run_sync(self, account, on_complete: Optional[Callable[[SyncReport], None]] = None) -> SyncReport:
        """Sync one account. Never raises; failures end in a "Sync Failed" notice."""
        target = SyncTarget.from_account(account)
        platform = target.platform
        start_time = time.monotonic()
        notified = False

        try:
            user = self.user_resolver(target.user_id)
            if user is None:
                raise SyncError(f"User {target.user_id} not found for account {target.id}")

            self.sync_state.set_progress(platform, 5)
            try:
                removed = self.problem_store.delete_by_platform(target.user_id, platform, synced_only=True)
                log.info(f"Removed {removed} previously synced {platform} problems for user {target.user_id}")
            except Exception as e:
                log.error(f"Failed to clear synced {platform} problems for user {target.user_id}: {e}")

            self.sync_state.set_progress(platform, 15)
            self._call_hook(self.on_problems_update)

            fetcher = self.fetchers.get(platform)
            if fetcher is None:
                raise SyncError(f"{platform} sync not implemented")

            self.sync_state.set_progress(platform, 25)
            try:
                result = fetcher.fetch(target.username)
            except Exception as e:
                log.warning(f"Fetching {platform} problems for {target.username} failed: {e}")
                outcome = classify_fetch_result(error=e)
            else:
                outcome = classify_fetch_result(result=result)

            if outcome.kind is not SyncOutcomeKind.SUCCESS:
                log.info(f"{platform} sync for account {target.id} ended with {outcome.kind.value}: {outcome.message}")
                self.account_store.update_last_sync(target.id, datetime.utcnow())
                notice = describe_outcome(outcome, platform)
                notified = True
                self._notify(notice['kind'], notice['title'], notice['message'])
                report = SyncReport(outcome.kind, elapsed=time.monotonic() - start_time)
                self._call_hook(on_complete, report)
                return report

            # The account may have been unlinked while the fetch was running
            if not self.account_store.account_exists(target.id):
                raise SyncError(f"{platform} account {target.username} was unlinked during the sync")

            self.sync_state.set_progress(platform, 50)
            synced_count = self.reconciler.process(
                outcome.problems,
                target.user_id,
                target.id,
                platform,
                start_time,
                on_partial_progress=self.on_problems_update,
            )
            self.account_store.update_last_sync(target.id, datetime.utcnow())

            elapsed = time.monotonic() - start_time
            speed = round(synced_count / elapsed, 2) if elapsed > 0 else 0.0
            self.sync_state.set_throughput(platform, speed, 0)
            self.sync_state.set_progress(platform, 100)

            log.info(f"{platform} sync for account {target.id} inserted {synced_count} problems in {elapsed:.2f}s")
            notified = True
            self._notify(
                Notifier.SUCCESS,
                "Sync Complete",
                f"Successfully synced {synced_count} problems from {platform} "
                f"in {elapsed:.1f}s ({speed:.1f} problems/sec)",
            )
            report = SyncReport(SyncOutcomeKind.SUCCESS, synced_count, elapsed, speed)
            self._call_hook(on_complete, report)
            return report

        except Exception as e:
            log.error(f"{platform} sync failed for account {target.id}: {e}", exc_info=True)
            if not notified:
                message = getattr(e, 'message', None) or str(e)
                self._notify(Notifier.ERROR, "Sync Failed", f"Failed to sync {platform}: {message}")
            return SyncReport(None, elapsed=time.monotonic() - start_time, error=str(e))

        finally:
            self.sync_state.finish(platform)
            self._call_hook(self.on_sync_settled, platform)

    def _notify(self, kind: str, title: str, message: str) -> None:
        try:
            self.notifier.notify(kind, title, message)
        except Exception as e:
            log.error(f"Failed to deliver '{title}' notification: {e}")

    @staticmethod
    def _call_hook(hook, *args) -> None:
        if hook is None:
            return
        try:
            hook(*args)
        except Exception as e:
            log.error(f"Sync hook {getattr(hook, '__name__', hook)!r} failed: {e}")
