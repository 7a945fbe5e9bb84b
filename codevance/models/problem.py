"""Problem model: a solved (or tracked) coding problem."""

from datetime import datetime
from codevance.extensions import db

class Problem(db.Model):
    """A problem record, either entered by hand or synced from a platform."""

    __tablename__ = 'problems'
    __table_args__ = (
        db.Index('ix_problems_natural_key', 'platform_problem_id', 'platform', 'user_id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    platform = db.Column(db.String(32), nullable=True)
    topic = db.Column(db.String(64), nullable=True)
    language = db.Column(db.String(64), nullable=True)
    difficulty = db.Column(db.String(16), nullable=True)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    url = db.Column(db.String(512), nullable=True)
    date_added = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Only set on records created by a platform sync
    platform_problem_id = db.Column(db.String(128), nullable=True)
    synced_from_platform = db.Column(db.Boolean, default=False, nullable=False)
    platform_url = db.Column(db.String(512), nullable=True)
    solved_date = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f'<Problem {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'platform': self.platform or '',
            'topic': self.topic or '',
            'language': self.language or '',
            'difficulty': self.difficulty or '',
            'completed': self.completed,
            'url': self.url or '',
            'date_added': self.date_added.date().isoformat() if self.date_added else '',
            'user_id': self.user_id,
            'platform_problem_id': self.platform_problem_id,
            'synced_from_platform': bool(self.synced_from_platform),
            'platform_url': self.platform_url,
            'solved_date': self.solved_date.isoformat() if self.solved_date else None,
        }
