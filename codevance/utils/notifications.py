"""Delivery of sync notices to a user's notification feed."""

import logging

from codevance.services.sync.ports import Notifier

log = logging.getLogger(__name__)

class DatabaseNotifier(Notifier):
    """Stores sync notices in a user's notification feed.

    The repository pushes its own application context, so notices can be sent
    from the sync worker threads.
    """

    def __init__(self, user_id: str, notification_repository):
        self.user_id = user_id
        self.notification_repository = notification_repository

    def notify(self, kind: str, title: str, message: str) -> None:
        if self.notification_repository.create(self.user_id, title, message, type=kind) is None:
            log.warning(f"'{title}' notice for user {self.user_id} was not stored")
