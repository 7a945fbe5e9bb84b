"""Base repository for database operations."""

import logging
from contextlib import contextmanager
from flask import has_app_context
from codevance.extensions import db

logger = logging.getLogger(__name__)

class BaseRepository:
    """Base repository implementing common database operations."""

    model_class = None

    def __init__(self, db_instance=None, app=None):
        """Initialize the repository.

        Args:
            db_instance: SQLAlchemy database instance
            app: Flask application used to push a context when the repository
                is called from a worker thread
        """
        self.db = db_instance or db
        self._app = app

    @contextmanager
    def session_scope(self):
        """Yield a session, pushing an application context if none is active.

        Flask-SQLAlchemy scopes sessions to the application context, so every
        worker thread ends up with its own session that is removed when the
        pushed context is torn down.
        """
        if has_app_context():
            yield self.db.session
            return

        if self._app is None:
            raise RuntimeError(f"{type(self).__name__} used outside an application context")

        with self._app.app_context():
            yield self.db.session

    def get_by_id(self, id):
        """Get an entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity instance or None
        """
        if not self.model_class:
            raise NotImplementedError("Model class must be set in derived repository")

        with self.session_scope() as session:
            return session.get(self.model_class, id)

    def save(self, entity):
        """Save an entity.

        Args:
            entity: Entity instance to save

        Returns:
            Entity instance
        """
        with self.session_scope() as session:
            try:
                session.add(entity)
                session.commit()
                return entity
            except Exception as e:
                session.rollback()
                logger.error(f"Error saving entity: {str(e)}")
                raise

    def delete(self, entity):
        """Delete an entity.

        Args:
            entity: Entity instance to delete

        Returns:
            True if successful
        """
        with self.session_scope() as session:
            try:
                session.delete(entity)
                session.commit()
                return True
            except Exception as e:
                session.rollback()
                logger.error(f"Error deleting entity: {str(e)}")
                raise
