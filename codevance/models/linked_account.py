"""Linked third-party platform account."""

import uuid
from datetime import datetime
from codevance.extensions import db

class LinkedAccount(db.Model):
    """A user's handle on an external coding platform."""

    __tablename__ = 'linked_accounts'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'platform', 'username', name='uq_linked_account'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    platform = db.Column(db.String(32), nullable=False)
    username = db.Column(db.String(128), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_sync = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', backref=db.backref('linked_accounts', lazy=True))

    def __repr__(self):
        return f'<LinkedAccount {self.platform}:{self.username}>'

    def to_dict(self):
        """Convert account to dictionary."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'platform': self.platform,
            'username': self.username,
            'is_active': self.is_active,
            'last_sync': self.last_sync.isoformat() if self.last_sync else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
