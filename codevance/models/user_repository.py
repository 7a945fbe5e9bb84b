from typing import Optional

from codevance.models.base_repository import BaseRepository
from codevance.models.user import User

class SqlAlchemyUserRepository(BaseRepository):
    """Repository for users using SQLAlchemy."""

    model_class = User

    def get_by_email(self, email: str) -> Optional[User]:
        with self.session_scope() as session:
            return session.query(User).filter_by(email=email.lower()).first()

    def get_by_username(self, username: str) -> Optional[User]:
        with self.session_scope() as session:
            return session.query(User).filter_by(username=username).first()

    def count(self) -> int:
        with self.session_scope() as session:
            return session.query(User).count()
