from datetime import datetime, timezone

from starcatcher import db


def _utcnow():
    return datetime.now(timezone.utc)


class LeaderboardEntry(db.Model):
    __tablename__ = 'leaderboard_entry'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    level = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=_utcnow)

    @classmethod
    def ranked(cls):
        """Query over all entries, best score first, then best level."""
        return cls.query.order_by(cls.score.desc(), cls.level.desc(), cls.id.asc())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'level': self.level,
            'date': self.date.isoformat() if self.date else None,
        }


db.Index('ix_leaderboard_entry_score_level', LeaderboardEntry.score.desc(), LeaderboardEntry.level.desc())
