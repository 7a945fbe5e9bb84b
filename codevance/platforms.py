"""Catalogue of the coding platforms an account can be linked to."""

from dataclasses import dataclass
from typing import List, Optional

@dataclass(frozen=True)
class Platform:
    name: str
    description: str
    has_sync: bool

LEETCODE = 'LeetCode'
CODEFORCES = 'Codeforces'
GEEKSFORGEEKS = 'GeeksforGeeks'
CODECHEF = 'CodeChef'
HACKERRANK = 'HackerRank'

PLATFORMS: List[Platform] = [
    Platform(LEETCODE, 'LeetCode accepted submissions', True),
    Platform(CODEFORCES, 'Codeforces accepted submissions', True),
    Platform(GEEKSFORGEEKS, 'GeeksforGeeks practice submissions', True),
    Platform(CODECHEF, 'CodeChef platform linking', False),
    Platform(HACKERRANK, 'HackerRank platform linking', False),
]

def get_platform(name: str) -> Optional[Platform]:
    """Look up a platform by its display name."""
    return next((p for p in PLATFORMS if p.name == name), None)

def platform_names() -> List[str]:
    return [p.name for p in PLATFORMS]

def syncable_platform_names() -> List[str]:
    return [p.name for p in PLATFORMS if p.has_sync]
