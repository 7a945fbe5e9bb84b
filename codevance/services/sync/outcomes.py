"""Classification of platform fetch results into sync outcomes."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

class SyncOutcomeKind(Enum):
    SUCCESS = "success"
    USER_NOT_FOUND = "user_not_found"
    NO_PROBLEMS_FOUND = "no_problems_found"
    TRANSIENT_FAILURE = "transient_failure"

# Transport errors only count as a missing user when they say so explicitly
USER_NOT_FOUND_PATTERN = re.compile(
    r"user\b.*\bnot found|handle\b.*\bnot found|user does not exist|no such user|profile not found",
    re.IGNORECASE,
)

# Errors embedded in a successful response are matched more loosely
EMBEDDED_NOT_FOUND_PATTERN = re.compile(r"not found|does not exist", re.IGNORECASE)

@dataclass
class SyncOutcome:
    kind: SyncOutcomeKind
    problems: List[Dict[str, Any]] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.kind in (SyncOutcomeKind.USER_NOT_FOUND, SyncOutcomeKind.TRANSIENT_FAILURE)

def _error_text(error: Any) -> str:
    if error is None:
        return ''
    if isinstance(error, BaseException):
        return getattr(error, 'message', None) or str(error)
    return str(error)

def classify_fetch_result(result: Optional[Dict[str, Any]] = None,
                          error: Optional[BaseException] = None) -> SyncOutcome:
    """Turn a fetcher response (or the error it raised) into a SyncOutcome.

    Args:
        result: Mapping returned by ``PlatformFetcher.fetch``
        error: Exception raised by the fetch, if any

    Returns:
        SyncOutcome: exactly one of the four outcome kinds
    """
    if error is not None:
        message = _error_text(error)
        if USER_NOT_FOUND_PATTERN.search(message):
            return SyncOutcome(SyncOutcomeKind.USER_NOT_FOUND, message=message)
        return SyncOutcome(SyncOutcomeKind.TRANSIENT_FAILURE, message=message)

    if isinstance(result, dict) and result.get('error'):
        message = _error_text(result['error'])
        if EMBEDDED_NOT_FOUND_PATTERN.search(message):
            return SyncOutcome(SyncOutcomeKind.USER_NOT_FOUND, message=message)
        return SyncOutcome(SyncOutcomeKind.NO_PROBLEMS_FOUND, message=message)

    problems = result.get('problems') if isinstance(result, dict) else None
    if not isinstance(problems, list) or not problems:
        return SyncOutcome(SyncOutcomeKind.NO_PROBLEMS_FOUND)

    return SyncOutcome(SyncOutcomeKind.SUCCESS, problems=problems)

def describe_outcome(outcome: SyncOutcome, platform: str) -> Dict[str, str]:
    """User-facing notification for a non-success outcome.

    Returns:
        dict with ``kind``, ``title`` and ``message`` keys
    """
    if outcome.kind is SyncOutcomeKind.USER_NOT_FOUND:
        return {
            'kind': 'error',
            'title': 'User Not Found',
            'message': f"No {platform} user matches this username. Please check the username and try again.",
        }
    if outcome.kind is SyncOutcomeKind.TRANSIENT_FAILURE:
        detail = f" ({outcome.message})" if outcome.message else ''
        return {
            'kind': 'error',
            'title': 'Sync Failed',
            'message': f"Could not reach {platform} right now{detail}. Please try again later.",
        }
    if outcome.kind is SyncOutcomeKind.NO_PROBLEMS_FOUND:
        return {
            'kind': 'success',
            'title': 'Sync Complete',
            'message': f"No solved problems found yet on {platform}. Sync again after you've solved some problems.",
        }
    raise ValueError(f"No fixed description for outcome {outcome.kind}")
