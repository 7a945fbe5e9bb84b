"""
Repository for problem records.

Implements the problem store used by the sync pipeline (existence check by
natural key, insert, bulk delete by platform) plus the listing and editing
operations behind the dashboard.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from codevance.models.base_repository import BaseRepository
from codevance.models.problem import Problem
from codevance.services.sync.ports import ProblemStore

log = logging.getLogger(__name__)

class SqlAlchemyProblemRepository(BaseRepository, ProblemStore):
    """SQLAlchemy implementation of the problem store."""

    model_class = Problem

    def exists_by_natural_key(self, platform_problem_id: str, platform: str, user_id: str) -> bool:
        """Check whether a record with this (platform id, platform, user) exists."""
        with self.session_scope() as session:
            found = (
                session.query(Problem.id)
                .filter_by(platform_problem_id=platform_problem_id, platform=platform, user_id=user_id)
                .first()
            )
            return found is not None

    def insert(self, record: Dict[str, Any]) -> int:
        """Insert a problem built from a field mapping.

        Returns:
            int: ID of the new row

        Raises:
            SQLAlchemyError: if the write fails (the session is rolled back)
        """
        with self.session_scope() as session:
            try:
                problem = Problem(**record)
                session.add(problem)
                session.commit()
                return problem.id
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error inserting problem {record.get('platform_problem_id') or record.get('name')}: {e}")
                raise

    def delete_by_platform(self, user_id: str, platform: str, synced_only: bool = True) -> int:
        """Delete a user's records for one platform.

        Args:
            user_id: Owner of the records
            platform: Platform name
            synced_only: Only remove records created by a platform sync

        Returns:
            int: Number of rows deleted
        """
        with self.session_scope() as session:
            try:
                query = session.query(Problem).filter_by(user_id=user_id, platform=platform)
                if synced_only:
                    query = query.filter_by(synced_from_platform=True)
                count = query.delete(synchronize_session=False)
                session.commit()
                return count
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error deleting {platform} problems for user {user_id}: {e}")
                raise

    def delete_all_for_user(self, user_id: str) -> int:
        """Delete every problem owned by a user."""
        with self.session_scope() as session:
            try:
                count = session.query(Problem).filter_by(user_id=user_id).delete(synchronize_session=False)
                session.commit()
                return count
            except SQLAlchemyError as e:
                session.rollback()
                log.error(f"Error resetting problems for user {user_id}: {e}")
                raise

    def list_for_user(self, user_id: str, platform: Optional[str] = None) -> List[Problem]:
        """Get a user's problems, newest first."""
        with self.session_scope() as session:
            query = session.query(Problem).filter_by(user_id=user_id)
            if platform:
                query = query.filter_by(platform=platform)
            return query.order_by(Problem.date_added.desc(), Problem.id.desc()).all()

    def get_for_user(self, problem_id: int, user_id: str) -> Optional[Problem]:
        with self.session_scope() as session:
            return session.query(Problem).filter_by(id=problem_id, user_id=user_id).first()

    def count(self) -> int:
        with self.session_scope() as session:
            return session.query(Problem).count()
