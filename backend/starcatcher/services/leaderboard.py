from datetime import datetime, timezone
from typing import List, Optional

from flask import current_app

from starcatcher import db, socketio
from starcatcher.models import LeaderboardEntry

LEADERBOARD_ROOM = 'leaderboard'


def list_entries() -> List[LeaderboardEntry]:
    return LeaderboardEntry.ranked().all()


def insert_entry(name: str, score: int, level: int) -> LeaderboardEntry:
    """Always adds a new row, even when the name already has one."""
    entry = LeaderboardEntry(name=name, score=score, level=level)
    db.session.add(entry)
    db.session.commit()
    current_app.logger.info(f"[lb-insert] id={entry.id} name={name} score={score} level={level}")
    broadcast_leaderboard()
    return entry


def upsert_entry(name: str, score: int, level: int) -> LeaderboardEntry:
    """Update the first row matching ``name`` exactly, creating it if absent.

    The row's date is reset to now either way.
    """
    entry = LeaderboardEntry.query.filter_by(name=name).order_by(LeaderboardEntry.id.asc()).first()
    created = entry is None
    if created:
        entry = LeaderboardEntry(name=name)
    entry.score = score
    entry.level = level
    entry.date = datetime.now(timezone.utc)
    db.session.add(entry)
    db.session.commit()
    current_app.logger.info(
        f"[lb-upsert] id={entry.id} name={name} score={score} level={level} created={created}"
    )
    broadcast_leaderboard()
    return entry


def delete_entry(name: str) -> Optional[dict]:
    """Delete one row by name. Returns its serialized form, or None if absent."""
    entry = LeaderboardEntry.query.filter_by(name=name).order_by(LeaderboardEntry.id.asc()).first()
    if not entry:
        return None
    deleted = entry.to_dict()
    db.session.delete(entry)
    db.session.commit()
    current_app.logger.info(f"[lb-delete] id={deleted['id']} name={name}")
    broadcast_leaderboard()
    return deleted


def clear_entries() -> int:
    count = LeaderboardEntry.query.delete()
    db.session.commit()
    current_app.logger.info(f"[lb-clear] removed={count}")
    broadcast_leaderboard()
    return count


def broadcast_leaderboard() -> None:
    """Push the current ranking to clients in the leaderboard room."""
    if not current_app.config.get('LEADERBOARD_BROADCAST', 1):
        return
    payload = {'entries': [e.to_dict() for e in list_entries()]}
    socketio.emit('leaderboard_update', payload, to=LEADERBOARD_ROOM, namespace='/ws')
