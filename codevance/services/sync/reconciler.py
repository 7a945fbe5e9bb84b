"""
Reconciles a platform's raw solved-problem list with the problem store.

Records are written in fixed-size batches. Inside a batch every record is
checked and inserted concurrently on a thread pool, so at most ``batch_size``
writes are outstanding at any time.
"""

import html
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from codevance.services.sync.ports import ProblemStore
from codevance.services.sync.state import SyncState

log = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_PROGRESS_EVERY = 2
MAX_DESCRIPTION_LENGTH = 500
ELLIPSIS = '...'

# Share of the progress bar owned by reconciliation
RECONCILE_PROGRESS_START = 50
RECONCILE_PROGRESS_END = 95

_TAG_RE = re.compile(r'<[^>]*>')

def strip_markup(text: str) -> str:
    """Remove HTML tags and decode entities."""
    return html.unescape(_TAG_RE.sub('', text or '')).strip()

def parse_solved_date(timestamp: Any, default: Optional[datetime] = None) -> datetime:
    """Convert a numeric-seconds timestamp (int or string) to a naive UTC datetime."""
    fallback = default or datetime.utcnow()
    if timestamp in (None, ''):
        return fallback
    try:
        seconds = int(float(timestamp))
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
    except (TypeError, ValueError, OverflowError, OSError):
        log.warning(f"Ignoring unparseable timestamp {timestamp!r}")
        return fallback

def build_problem_record(raw: Dict[str, Any], platform: str, user_id: str,
                         now: Optional[datetime] = None) -> Dict[str, Any]:
    """Map a raw platform problem onto problem store fields."""
    title = raw.get('title') or str(raw.get('platform_problem_id'))
    description = strip_markup(raw.get('content') or title)
    if len(description) > MAX_DESCRIPTION_LENGTH:
        description = description[:MAX_DESCRIPTION_LENGTH] + ELLIPSIS

    topics = raw.get('topics')
    if isinstance(topics, str):
        topic = topics or None
    elif topics:
        topic = topics[0]
    else:
        topic = None

    return {
        'name': title,
        'description': description,
        'platform': platform,
        'topic': topic,
        'language': raw.get('language') or None,
        'difficulty': raw.get('difficulty') or None,
        'completed': True,
        'url': raw.get('url'),
        'platform_problem_id': str(raw['platform_problem_id']),
        'synced_from_platform': True,
        'platform_url': raw.get('url'),
        'solved_date': parse_solved_date(raw.get('timestamp'), now),
        'user_id': user_id,
    }

class Reconciler:
    """Inserts the problems a store does not have yet, batch by batch."""

    def __init__(self, problem_store: ProblemStore, batch_size: int = DEFAULT_BATCH_SIZE,
                 progress_every: int = DEFAULT_PROGRESS_EVERY, max_workers: Optional[int] = None,
                 sync_state: Optional[SyncState] = None):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.problem_store = problem_store
        self.batch_size = batch_size
        self.progress_every = max(1, progress_every)
        self.max_workers = min(max_workers or batch_size, batch_size)
        self.sync_state = sync_state

    def process(self, raw_problems: List[Dict[str, Any]], user_id: str, account_id: str,
                platform: str, start_time: float,
                on_partial_progress: Optional[Callable[[], None]] = None) -> int:
        """Insert every raw problem the store does not already hold.

        Args:
            raw_problems: Problems as returned by the platform fetcher
            user_id: Owner of the new records
            account_id: Linked account being synced (used for logging)
            platform: Platform name, part of the natural key
            start_time: ``time.monotonic()`` reading taken when the sync began
            on_partial_progress: Called after every ``progress_every`` batches
                and once after the last one

        Returns:
            int: Number of records inserted
        """
        problems = self._unique_problems(raw_problems)
        total = len(problems)
        log.info(f"Processing {total} {platform} problems for account {account_id} in batches of {self.batch_size}")

        synced_count = 0
        processed = 0
        now = datetime.utcnow()

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix=f"reconcile-{platform}") as pool:
            for batch_index, offset in enumerate(range(0, total, self.batch_size)):
                batch = problems[offset:offset + self.batch_size]
                results = list(pool.map(
                    lambda raw: self._process_one(raw, user_id, platform, now),
                    batch,
                ))
                synced_count += sum(1 for inserted in results if inserted)
                processed += len(batch)

                self._report_progress(platform, processed, total, synced_count, start_time)

                is_last = processed >= total
                if on_partial_progress and not is_last and (batch_index + 1) % self.progress_every == 0:
                    self._notify(on_partial_progress)

        if on_partial_progress:
            self._notify(on_partial_progress)

        log.info(f"Sync completed: {synced_count} problems inserted out of {total} total for account {account_id}")
        return synced_count

    def _unique_problems(self, raw_problems) -> List[Dict[str, Any]]:
        seen = set()
        unique = []
        for raw in raw_problems or []:
            if not isinstance(raw, dict) or raw.get('platform_problem_id') in (None, ''):
                log.warning(f"Skipping problem without platform_problem_id: {raw!r}")
                continue
            key = str(raw['platform_problem_id'])
            if key in seen:
                continue
            seen.add(key)
            unique.append(raw)
        return unique

    def _process_one(self, raw: Dict[str, Any], user_id: str, platform: str, now: datetime) -> bool:
        platform_problem_id = str(raw['platform_problem_id'])
        try:
            if self.problem_store.exists_by_natural_key(platform_problem_id, platform, user_id):
                return False
            self.problem_store.insert(build_problem_record(raw, platform, user_id, now))
            return True
        except Exception as e:
            log.error(f"Error processing {platform} problem {platform_problem_id}: {e}")
            return False

    def _report_progress(self, platform: str, processed: int, total: int,
                         synced_count: int, start_time: float) -> None:
        if self.sync_state is None or total == 0:
            return

        span = RECONCILE_PROGRESS_END - RECONCILE_PROGRESS_START
        self.sync_state.set_progress(platform, RECONCILE_PROGRESS_START + int(span * processed / total))

        elapsed = max(time.monotonic() - start_time, 1e-6)
        rate = processed / elapsed
        eta = (total - processed) / rate if rate > 0 else None
        self.sync_state.set_throughput(platform, round(synced_count / elapsed, 2), eta)

    @staticmethod
    def _notify(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            log.error(f"Progress callback failed: {e}")
