"""Service for problem statistics."""

import logging
from collections import Counter
from typing import Any, Dict

from codevance.extensions import cache
from codevance.platforms import PLATFORMS

log = logging.getLogger(__name__)

PLATFORM_STATS_CACHE_KEY = 'platform_stats'

class StatsService:
    """Per-user progress numbers and site-wide totals."""

    def __init__(self, problem_repository, user_repository, cache_timeout=300):
        self.problem_repository = problem_repository
        self.user_repository = user_repository
        self.cache_timeout = cache_timeout

    def user_stats(self, user_id: str) -> Dict[str, Any]:
        """Totals for one user's problems.

        Returns:
            dict: total, completed and synced counts plus breakdowns by
                difficulty, platform and topic (completed problems only)
        """
        problems = self.problem_repository.list_for_user(user_id)
        completed = [p for p in problems if p.completed]

        return {
            'total': len(problems),
            'completed': len(completed),
            'synced': sum(1 for p in problems if p.synced_from_platform),
            'by_difficulty': dict(Counter(p.difficulty or 'Unknown' for p in completed)),
            'by_platform': dict(Counter(p.platform or 'Other' for p in completed)),
            'by_topic': dict(Counter(p.topic or 'Uncategorized' for p in completed)),
        }

    def platform_stats(self) -> Dict[str, int]:
        """Site-wide totals, cached."""
        stats = cache.get(PLATFORM_STATS_CACHE_KEY)
        if stats is not None:
            return stats

        stats = {
            'total_users': self.user_repository.count(),
            'total_problems': self.problem_repository.count(),
            'total_platforms': len(PLATFORMS),
        }
        cache.set(PLATFORM_STATS_CACHE_KEY, stats, timeout=self.cache_timeout)
        return stats

    def invalidate_platform_stats(self) -> None:
        cache.delete(PLATFORM_STATS_CACHE_KEY)
        log.debug("Platform stats cache invalidated")
