"""Client for the GeeksforGeeks practice API."""

import logging
from typing import Any, Dict

from codevance.clients.api_client import APIError, PlatformClient
from codevance.platforms import GEEKSFORGEEKS
from codevance.services.sync.ports import PlatformFetchError, PlatformFetcher

log = logging.getLogger(__name__)

# GeeksforGeeks groups submissions under its own difficulty labels
DIFFICULTY_MAP = {
    'school': 'Easy',
    'basic': 'Easy',
    'easy': 'Easy',
    'medium': 'Medium',
    'hard': 'Hard',
}

class GeeksforGeeksFetcher(PlatformClient, PlatformFetcher):
    """Fetches solved GeeksforGeeks practice problems."""

    platform = GEEKSFORGEEKS

    def __init__(self, timeout=10, **kwargs):
        super().__init__("https://practiceapi.geeksforgeeks.org/api/v1", timeout=timeout, **kwargs)

    def fetch(self, username: str) -> Dict[str, Any]:
        try:
            payload = self.post(
                "/user/problems/submissions/",
                json={'handle': username, 'requestType': '', 'year': '', 'month': ''},
            )
        except APIError as e:
            raise PlatformFetchError(f"GeeksforGeeks request failed: {e.message}", status_code=e.status_code)

        payload = payload or {}
        if payload.get('status') != 'success':
            return {'error': payload.get('message') or f"User '{username}' not found"}

        problems = []
        seen = set()
        for label, group in (payload.get('result') or {}).items():
            if not isinstance(group, dict):
                continue
            difficulty = DIFFICULTY_MAP.get(str(label).lower(), str(label).title())
            for problem_id, problem in group.items():
                slug = problem.get('slug') or str(problem_id)
                if slug in seen:
                    continue
                seen.add(slug)
                problems.append({
                    'platform_problem_id': slug,
                    'title': problem.get('pname') or slug,
                    'url': f"https://www.geeksforgeeks.org/problems/{slug}/1",
                    'difficulty': difficulty,
                    'language': problem.get('lang'),
                })

        log.info(f"GeeksforGeeks returned {len(problems)} solved problems for {username}")
        return {'problems': problems}
