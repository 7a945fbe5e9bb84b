"""Task executor for background processing."""

import concurrent.futures
import logging
import threading

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 5

_lock = threading.Lock()
_executor = None

def get_executor(max_workers=None):
    """Return the shared thread pool, creating it on first use.

    ``max_workers`` only has an effect on the call that creates the pool.
    """
    global _executor
    with _lock:
        if _executor is None:
            _executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=max_workers or DEFAULT_MAX_WORKERS,
                thread_name_prefix='codevance-task'
            )
        return _executor

def shutdown(wait=True):
    """Shutdown the executor gracefully."""
    global _executor
    with _lock:
        if _executor is None:
            return
        logger.info("Shutting down task executor")
        _executor.shutdown(wait=wait)
        _executor = None
