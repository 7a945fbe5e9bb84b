"""Client for the Codeforces REST API."""

import logging
from typing import Any, Dict, Optional

from codevance.clients.api_client import APIError, PlatformClient
from codevance.platforms import CODEFORCES
from codevance.services.sync.ports import PlatformFetchError, PlatformFetcher

log = logging.getLogger(__name__)

# Contest IDs at or above this belong to the gym
GYM_CONTEST_ID = 100000

def rating_to_difficulty(rating: Optional[int]) -> str:
    if rating is None:
        return 'Medium'
    if rating <= 1200:
        return 'Easy'
    if rating <= 1600:
        return 'Medium'
    return 'Hard'

def problem_url(contest_id: int, index: str) -> str:
    if contest_id >= GYM_CONTEST_ID:
        return f"https://codeforces.com/gym/{contest_id}/problem/{index}"
    return f"https://codeforces.com/problemset/problem/{contest_id}/{index}"

class CodeforcesFetcher(PlatformClient, PlatformFetcher):
    """Fetches accepted Codeforces submissions."""

    platform = CODEFORCES

    def __init__(self, timeout=10, submission_count=1000, **kwargs):
        super().__init__("https://codeforces.com/api", timeout=timeout, **kwargs)
        self.submission_count = submission_count

    def fetch(self, username: str) -> Dict[str, Any]:
        try:
            payload = self.get(
                "/user.status",
                params={'handle': username, 'from': 1, 'count': self.submission_count},
            )
        except APIError as e:
            # Bad handles come back as HTTP 400 with a FAILED body
            body = e.payload()
            if isinstance(body, dict) and body.get('status') == 'FAILED':
                return {'error': body.get('comment') or 'Codeforces request failed'}
            raise PlatformFetchError(f"Codeforces request failed: {e.message}", status_code=e.status_code)

        payload = payload or {}
        if payload.get('status') != 'OK':
            return {'error': payload.get('comment') or 'Codeforces request failed'}

        problems = []
        seen = set()
        for submission in payload.get('result') or []:
            if submission.get('verdict') != 'OK':
                continue
            problem = submission.get('problem') or {}
            contest_id = problem.get('contestId')
            index = problem.get('index')
            if contest_id is None or not index:
                continue

            key = f"{contest_id}{index}"
            if key in seen:
                continue
            seen.add(key)

            rating = problem.get('rating')
            content = f"Problem from contest {contest_id}, index {index}."
            if rating is not None:
                content += f" Rating: {rating}"

            problems.append({
                'platform_problem_id': key,
                'title': problem.get('name') or key,
                'url': problem_url(contest_id, index),
                'difficulty': rating_to_difficulty(rating),
                'topics': problem.get('tags') or ['Math'],
                'content': content,
                'language': submission.get('programmingLanguage'),
                'timestamp': submission.get('creationTimeSeconds'),
            })

        log.info(f"Codeforces returned {len(problems)} accepted problems for {username}")
        return {'problems': problems}
