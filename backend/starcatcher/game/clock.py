import logging
from typing import Callable, Optional

from .entities import EndCause, GameEvent, SessionContext
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

CLOCK_KEY = 'game-clock'


class GameClock:
    """Counts the level timer down once per second, apart from frames."""

    def __init__(self, ctx: SessionContext, scheduler: Scheduler,
                 on_expire: Optional[Callable[[EndCause], None]] = None,
                 interval: float = 1.0, key: str = CLOCK_KEY):
        self.ctx = ctx
        self.scheduler = scheduler
        self.on_expire = on_expire
        self.interval = interval
        self.key = key
        self._handle: Optional[TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def start(self) -> None:
        if self.running:
            return
        self._handle = self.scheduler.call_every(self.interval, self._tick, key=self.key)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        ctx = self.ctx
        if ctx.paused or ctx.game_over:
            return
        ctx.time_remaining = max(0, ctx.time_remaining - 1)
        if ctx.time_remaining > 0:
            return
        logger.info(f"[clock-expired] level={ctx.level} score={ctx.score} stars_left={len(ctx.stars)}")
        self.stop()
        ctx.emit(GameEvent.TIME_EXPIRED)
        ctx.end(EndCause.TIME_EXPIRED)
        if self.on_expire is not None:
            self.on_expire(EndCause.TIME_EXPIRED)
