"""Platform API clients used by the problem sync."""

from codevance.clients.codeforces import CodeforcesFetcher
from codevance.clients.geeksforgeeks import GeeksforGeeksFetcher
from codevance.clients.leetcode import LeetCodeFetcher

def build_fetchers(config):
    """Create one fetcher per sync-capable platform.

    Args:
        config: Flask config mapping

    Returns:
        dict: Platform name -> PlatformFetcher
    """
    timeout = config.get('PLATFORM_REQUEST_TIMEOUT', 10)
    fetchers = [
        LeetCodeFetcher(timeout=timeout, submission_limit=config.get('LEETCODE_SUBMISSION_LIMIT', 200)),
        CodeforcesFetcher(timeout=timeout, submission_count=config.get('CODEFORCES_SUBMISSION_COUNT', 1000)),
        GeeksforGeeksFetcher(timeout=timeout),
    ]
    return {fetcher.platform: fetcher for fetcher in fetchers}

__all__ = ['CodeforcesFetcher', 'GeeksforGeeksFetcher', 'LeetCodeFetcher', 'build_fetchers']
