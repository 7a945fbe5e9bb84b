"""
Service for linked account management.

Linking validates the platform against the catalogue and refuses duplicates;
unlinking also removes the problems that were synced from that platform.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError

from codevance.errors import ConflictError, ResourceNotFoundError, ValidationError
from codevance.models.linked_account import LinkedAccount
from codevance.platforms import get_platform
from codevance.services.sync import sync_states as default_sync_states

log = logging.getLogger(__name__)

class AccountService:
    """Manages the platform accounts a user has linked."""

    def __init__(self, account_repository, problem_repository, sync_states=None):
        """Initialize AccountService.

        Args:
            account_repository: Repository for linked accounts
            problem_repository: Repository for problems, used for unlink cleanup
            sync_states: Registry of running syncs, defaults to the shared one
        """
        self.account_repository = account_repository
        self.problem_repository = problem_repository
        self.sync_states = sync_states or default_sync_states

    def list_accounts(self, user_id: str) -> List[LinkedAccount]:
        return self.account_repository.list_for_user(user_id)

    def get_account(self, user_id: str, account_id: str) -> LinkedAccount:
        """Get one of a user's accounts.

        Raises:
            ResourceNotFoundError: if the account does not exist or belongs to someone else
        """
        account = self.account_repository.get_for_user(account_id, user_id)
        if account is None:
            raise ResourceNotFoundError("Linked account not found")
        return account

    def link_account(self, user_id: str, platform: str, username: str) -> LinkedAccount:
        """Link a platform username to a user.

        Raises:
            ValidationError: unknown platform or empty username
            ConflictError: the same account is already linked
        """
        username = (username or '').strip()
        if get_platform(platform) is None:
            raise ValidationError(f"Unsupported platform: {platform}")
        if not username:
            raise ValidationError("Username is required")

        if self.account_repository.exists(user_id, platform, username):
            raise ConflictError(f"{platform} account '{username}' is already linked")

        account = LinkedAccount(user_id=user_id, platform=platform, username=username)
        try:
            self.account_repository.save(account)
        except IntegrityError:
            raise ConflictError(f"{platform} account '{username}' is already linked")

        log.info(f"User {user_id} linked {platform} account {username}")
        return account

    def unlink_account(self, user_id: str, account_id: str) -> int:
        """Remove a linked account and its synced problems.

        Returns:
            int: Number of synced problems removed

        Raises:
            ConflictError: a sync for the account's platform is still running
        """
        account = self.get_account(user_id, account_id)
        platform = account.platform

        if self.sync_states.state_for(user_id).is_syncing(platform):
            raise ConflictError(f"A {platform} sync is in progress; unlink the account once it has finished")

        removed = self.problem_repository.delete_by_platform(user_id, platform, synced_only=True)
        self.account_repository.delete(account)

        log.info(f"User {user_id} unlinked {platform} account {account_id}, removed {removed} synced problems")
        return removed
