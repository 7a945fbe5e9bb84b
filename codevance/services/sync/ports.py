"""
Interfaces the sync pipeline depends on.

Implementations:
- PlatformFetcher: codevance.clients (LeetCode, Codeforces, GeeksforGeeks)
- ProblemStore: codevance.models.problem_repository.SqlAlchemyProblemRepository
- AccountStore: codevance.models.linked_account_repository.SqlAlchemyLinkedAccountRepository
- Notifier: codevance.utils.notifications.DatabaseNotifier
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from codevance.errors import AppError

class PlatformFetchError(AppError):
    """Hard failure while fetching a platform's solved problems.

    Raised for transport errors and non-2xx responses; the message is what the
    orchestrator inspects to tell an unknown user apart from an outage.
    """

    def __init__(self, message=None, details=None, status_code=None):
        super().__init__(
            message=message or "Platform request failed",
            details=details,
            status_code=status_code or 502
        )

class PlatformFetcher(ABC):
    """Fetches the solved-problem list for a platform username.

    ``fetch`` returns either ``{"problems": [...]}`` where each entry is a raw
    problem mapping (``platform_problem_id``, ``title``, ``url`` and optionally
    ``difficulty``, ``topics``, ``content``, ``language``, ``timestamp``), or
    ``{"error": "..."}`` for a soft failure reported by the platform.
    """

    platform: str = ''

    @abstractmethod
    def fetch(self, username: str) -> Dict[str, Any]:
        """Fetch solved problems, raising PlatformFetchError on hard failure."""

class ProblemStore(ABC):

    @abstractmethod
    def exists_by_natural_key(self, platform_problem_id: str, platform: str, user_id: str) -> bool:
        ...

    @abstractmethod
    def insert(self, record: Dict[str, Any]) -> Any:
        ...

    @abstractmethod
    def delete_by_platform(self, user_id: str, platform: str, synced_only: bool = True) -> int:
        ...

class AccountStore(ABC):

    @abstractmethod
    def account_exists(self, account_id: str) -> bool:
        """False once the account has been unlinked."""

    @abstractmethod
    def update_last_sync(self, account_id: str, timestamp: Optional[datetime] = None) -> bool:
        ...

class Notifier(ABC):
    """Surfaces status messages to a user. Fire-and-forget."""

    SUCCESS = 'success'
    ERROR = 'error'
    INFO = 'info'

    @abstractmethod
    def notify(self, kind: str, title: str, message: str) -> None:
        ...
