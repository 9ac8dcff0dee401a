from typing import List, Optional

from .scheduler import Scheduler, TimerHandle


class LeaderboardFeed:
    """Keeps a local copy of the ranking fresh by polling the client."""

    def __init__(self, client, scheduler: Scheduler, interval: float, key: str = 'leaderboard-poll'):
        self.client = client
        self.scheduler = scheduler
        self.interval = interval
        self.key = key
        self.entries: List[dict] = []
        self.loading = False
        self.last_refreshed: Optional[float] = None
        self._handle: Optional[TimerHandle] = None

    @property
    def polling(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def start(self) -> None:
        if self.polling:
            return
        self.refresh()
        self._handle = self.scheduler.call_every(self.interval, self.refresh, key=self.key)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def refresh(self) -> List[dict]:
        self.loading = True
        try:
            self.entries = self.client.list()
        finally:
            self.loading = False
        self.last_refreshed = self.scheduler.now
        return self.entries

    def find(self, name: str, score: int, level: int) -> Optional[int]:
        """Index of the first row matching all three fields, if any."""
        for idx, entry in enumerate(self.entries):
            if entry.get('name') == name and entry.get('score') == score and entry.get('level') == level:
                return idx
        return None
