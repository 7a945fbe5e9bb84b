"""Client for LeetCode's public GraphQL API."""

import logging
from typing import Any, Dict

from codevance.clients.api_client import APIError, PlatformClient
from codevance.platforms import LEETCODE
from codevance.services.sync.ports import PlatformFetchError, PlatformFetcher

log = logging.getLogger(__name__)

RECENT_AC_QUERY = """
query recentAcSubmissions($username: String!, $limit: Int!) {
  matchedUser(username: $username) {
    username
  }
  recentAcSubmissionList(username: $username, limit: $limit) {
    id
    title
    titleSlug
    timestamp
    lang
  }
}
"""

class LeetCodeFetcher(PlatformClient, PlatformFetcher):
    """Fetches recently accepted LeetCode submissions."""

    platform = LEETCODE

    def __init__(self, timeout=10, submission_limit=200, **kwargs):
        """Initialize LeetCodeFetcher.

        Args:
            timeout: Request timeout in seconds
            submission_limit: How many recent accepted submissions to ask for
        """
        super().__init__("https://leetcode.com", timeout=timeout, **kwargs)
        self.submission_limit = submission_limit

    def fetch(self, username: str) -> Dict[str, Any]:
        try:
            payload = self.post(
                "/graphql",
                headers={'Content-Type': 'application/json', 'Referer': 'https://leetcode.com'},
                json={'query': RECENT_AC_QUERY, 'variables': {'username': username, 'limit': self.submission_limit}},
            )
        except APIError as e:
            raise PlatformFetchError(f"LeetCode request failed: {e.message}", status_code=e.status_code)

        data = (payload or {}).get('data') or {}
        if not data.get('matchedUser'):
            return {'error': f"User '{username}' not found"}

        problems = []
        seen = set()
        for submission in data.get('recentAcSubmissionList') or []:
            slug = submission.get('titleSlug')
            if not slug or slug in seen:
                continue
            seen.add(slug)
            problems.append({
                'platform_problem_id': slug,
                'title': submission.get('title') or slug,
                'url': f"https://leetcode.com/problems/{slug}/",
                'language': submission.get('lang'),
                'timestamp': submission.get('timestamp'),
            })

        log.info(f"LeetCode returned {len(problems)} accepted problems for {username}")
        return {'problems': problems}
