"""Repository for the in-app notification feed."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from codevance.models.base_repository import BaseRepository
from codevance.models.notification import UserNotification

log = logging.getLogger(__name__)

class SqlAlchemyNotificationRepository(BaseRepository):
    """SQLAlchemy implementation of the notification feed."""

    model_class = UserNotification

    def create(self, user_id: str, title: str, message: str, type: str = "info") -> Optional[UserNotification]:
        """Store a notification. Returns None if it could not be written."""
        with self.session_scope() as session:
            try:
                notification = UserNotification(user_id=user_id, title=title, message=message, type=type)
                session.add(notification)
                session.commit()
                log.info(f"Notification sent to user {user_id}: {title}")
                return notification
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Failed to send notification to user {user_id}: {e}")
                return None

    def list_for_user(self, user_id: str, limit: int = 10, unread_only: bool = False) -> List[UserNotification]:
        """Get a user's notifications, newest first."""
        with self.session_scope() as session:
            query = session.query(UserNotification).filter_by(user_id=user_id)
            if unread_only:
                query = query.filter_by(is_read=False)
            return query.order_by(UserNotification.created_at.desc()).limit(limit).all()

    def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        """Mark one of a user's notifications as read.

        Returns:
            bool: False if the notification does not exist or belongs to someone else
        """
        with self.session_scope() as session:
            notification = (
                session.query(UserNotification)
                .filter_by(id=notification_id, user_id=user_id)
                .first()
            )
            if notification is None:
                return False
            try:
                notification.mark_as_read()
                session.commit()
                return True
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error marking notification {notification_id} as read: {e}")
                raise

    def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of a user as read.

        Returns:
            int: Number of notifications updated
        """
        with self.session_scope() as session:
            try:
                count = (
                    session.query(UserNotification)
                    .filter_by(user_id=user_id, is_read=False)
                    .update({'is_read': True, 'read_at': datetime.utcnow()}, synchronize_session=False)
                )
                session.commit()
                return count
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error marking notifications as read for user {user_id}: {e}")
                raise
