import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from codevance.models.base_repository import BaseRepository
from codevance.models.linked_account import LinkedAccount
from codevance.services.sync.ports import AccountStore

log = logging.getLogger(__name__)

class SqlAlchemyLinkedAccountRepository(BaseRepository, AccountStore):
    """Repository for linked platform accounts using SQLAlchemy."""

    model_class = LinkedAccount

    def get_for_user(self, account_id: str, user_id: str) -> Optional[LinkedAccount]:
        with self.session_scope() as session:
            return session.query(LinkedAccount).filter_by(id=account_id, user_id=user_id).first()

    def list_for_user(self, user_id: str) -> List[LinkedAccount]:
        """Get a user's linked accounts, most recently linked first."""
        with self.session_scope() as session:
            return (
                session.query(LinkedAccount)
                .filter_by(user_id=user_id)
                .order_by(LinkedAccount.created_at.desc())
                .all()
            )

    def list_active(self, platforms=None) -> List[LinkedAccount]:
        """Get all active accounts, optionally limited to some platforms."""
        with self.session_scope() as session:
            query = session.query(LinkedAccount).filter_by(is_active=True)
            if platforms is not None:
                query = query.filter(LinkedAccount.platform.in_(list(platforms)))
            return query.all()

    def exists(self, user_id: str, platform: str, username: str) -> bool:
        with self.session_scope() as session:
            found = (
                session.query(LinkedAccount.id)
                .filter_by(user_id=user_id, platform=platform, username=username)
                .first()
            )
            return found is not None

    def account_exists(self, account_id: str) -> bool:
        with self.session_scope() as session:
            return session.query(LinkedAccount.id).filter_by(id=account_id).first() is not None

    def update_last_sync(self, account_id: str, timestamp: Optional[datetime] = None) -> bool:
        """Record when an account was last synced.

        Returns:
            bool: True if the account exists and was updated
        """
        with self.session_scope() as session:
            try:
                updated = (
                    session.query(LinkedAccount)
                    .filter_by(id=account_id)
                    .update({'last_sync': timestamp or datetime.utcnow()}, synchronize_session=False)
                )
                session.commit()
                return updated > 0
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error updating last sync for account {account_id}: {e}")
                raise
