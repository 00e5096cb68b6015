from datetime import datetime, timezone
from cleaning_party import db


def _utcnow():
    return datetime.now(timezone.utc)


class GameRecord(db.Model):
    """One serialized game session, keyed by ``game:<room code>``.

    ``version`` is bumped on every write so the store can offer a
    compare-and-swap put on top of plain get/put.
    """
    __tablename__ = 'game_record'
    key = db.Column(db.String(128), primary_key=True)
    data = db.Column(db.Text, nullable=False)
    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'key': self.key,
            'version': self.version,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
