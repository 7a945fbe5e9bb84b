import pytest
from unittest.mock import MagicMock

from codevance.models.problem import Problem
from codevance.platforms import PLATFORMS
from codevance.services.stats_service import StatsService

@pytest.fixture
def repositories():
    return MagicMock(), MagicMock()

@pytest.fixture
def stats_service(repositories):
    problem_repository, user_repository = repositories
    return StatsService(problem_repository, user_repository)

def test_user_stats_breakdowns_count_completed_only(stats_service, repositories):
    problem_repository, _ = repositories
    problem_repository.list_for_user.return_value = [
        Problem(name='a', platform='LeetCode', difficulty='Easy', topic='Array', completed=True, synced_from_platform=True),
        Problem(name='b', platform='LeetCode', difficulty='Hard', topic='Graph', completed=True, synced_from_platform=True),
        Problem(name='c', platform='Codeforces', difficulty='Easy', topic=None, completed=True, synced_from_platform=True),
        Problem(name='d', platform=None, difficulty=None, topic='Array', completed=False, synced_from_platform=False),
    ]

    stats = stats_service.user_stats('user-1')

    assert stats['total'] == 4
    assert stats['completed'] == 3
    assert stats['synced'] == 3
    assert stats['by_difficulty'] == {'Easy': 2, 'Hard': 1}
    assert stats['by_platform'] == {'LeetCode': 2, 'Codeforces': 1}
    assert stats['by_topic'] == {'Array': 1, 'Graph': 1, 'Uncategorized': 1}

def test_platform_stats_are_cached_until_invalidated(app, stats_service, repositories):
    problem_repository, user_repository = repositories
    problem_repository.count.return_value = 40
    user_repository.count.return_value = 3

    with app.app_context():
        first = stats_service.platform_stats()
        problem_repository.count.return_value = 41
        second = stats_service.platform_stats()

        assert first == second == {'total_users': 3, 'total_problems': 40, 'total_platforms': len(PLATFORMS)}
        assert problem_repository.count.call_count == 1

        stats_service.invalidate_platform_stats()

        assert stats_service.platform_stats()['total_problems'] == 41
