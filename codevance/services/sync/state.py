"""
Shared registry of in-flight platform syncs.

One SyncState is visible to every observer of a sync scope (the web layer uses
one per user). It answers "is platform X syncing" in O(1), exposes progress,
throughput and ETA per platform, and guarantees at most one active sync per
platform. All mutations go through a re-entrant lock since syncs run on a
thread pool while request threads read the state.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)

Listener = Callable[[str, Optional[Dict[str, Any]]], None]

class SyncState:
    """Per-platform status of running syncs."""

    def __init__(self):
        self._lock = threading.RLock()
        self.syncing_platforms = set()
        self.sync_progress: Dict[str, int] = {}
        self.sync_speed: Dict[str, float] = {}
        self.active_syncs: Dict[str, Any] = {}
        self.estimated_time_remaining: Dict[str, float] = {}
        self._listeners: List[Listener] = []

    def is_syncing(self, platform: str) -> bool:
        with self._lock:
            return platform in self.active_syncs or platform in self.syncing_platforms

    def try_start(self, platform: str, launch: Callable[[], Any]) -> Optional[Any]:
        """Register a sync for ``platform`` unless one is already active.

        ``launch`` is called while the lock is held and must return the
        operation handle; holding the lock means the operation cannot settle
        (and clear its entry) before the handle has been recorded.

        Returns:
            The handle returned by ``launch``, or None if the platform is busy
        """
        with self._lock:
            if platform in self.active_syncs or platform in self.syncing_platforms:
                return None

            self.syncing_platforms.add(platform)
            self.sync_progress[platform] = 0
            self.sync_speed[platform] = 0
            self._emit(platform)
            try:
                handle = launch()
            except Exception:
                self._clear(platform)
                self._emit(platform)
                raise
            # An inline executor may already have settled the operation
            if platform in self.syncing_platforms:
                self.active_syncs[platform] = handle
            return handle

    def set_progress(self, platform: str, percent: int) -> None:
        """Raise the progress of a running sync. Lower values are ignored."""
        with self._lock:
            if platform not in self.syncing_platforms:
                return
            percent = max(0, min(100, int(percent)))
            if percent < self.sync_progress.get(platform, 0):
                return
            self.sync_progress[platform] = percent
            self._emit(platform)

    def set_throughput(self, platform: str, speed: float, eta: Optional[float] = None) -> None:
        with self._lock:
            if platform not in self.syncing_platforms:
                return
            self.sync_speed[platform] = speed
            if eta is None:
                self.estimated_time_remaining.pop(platform, None)
            else:
                self.estimated_time_remaining[platform] = eta
            self._emit(platform)

    def finish(self, platform: str) -> None:
        """Drop every trace of a platform's sync. Safe to call repeatedly."""
        with self._lock:
            self._clear(platform)
            self._emit(platform)

    def _clear(self, platform: str) -> None:
        self.syncing_platforms.discard(platform)
        self.sync_progress.pop(platform, None)
        self.sync_speed.pop(platform, None)
        self.estimated_time_remaining.pop(platform, None)
        self.active_syncs.pop(platform, None)

    def entry(self, platform: str) -> Optional[Dict[str, Any]]:
        """Status of one platform, or None when it is not syncing."""
        with self._lock:
            if platform not in self.syncing_platforms:
                return None
            return {
                'progress': self.sync_progress.get(platform, 0),
                'speed': self.sync_speed.get(platform, 0),
                'eta': self.estimated_time_remaining.get(platform),
            }

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Consistent copy of all running syncs, for polling observers."""
        with self._lock:
            return {platform: self.entry(platform) for platform in sorted(self.syncing_platforms)}

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(platform, entry)`` after every change."""
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, platform: str) -> None:
        entry = self.entry(platform)
        for listener in list(self._listeners):
            try:
                listener(platform, entry)
            except Exception as e:
                log.error(f"Sync state listener failed for {platform}: {e}")

class SyncStateRegistry:
    """Hands out one SyncState per scope (for example a user ID)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._states: Dict[Any, SyncState] = {}

    def state_for(self, scope) -> SyncState:
        with self._lock:
            state = self._states.get(scope)
            if state is None:
                state = self._states[scope] = SyncState()
            return state

    def clear(self) -> None:
        with self._lock:
            self._states.clear()

# Process-wide registry shared by the web layer and scheduled jobs
sync_states = SyncStateRegistry()
