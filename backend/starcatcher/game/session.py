"""Session state machine: idle -> playing <-> paused -> ended.

The controller owns the session context and the three scheduled callbacks
that act on it (frame, clock, leaderboard poll). Ending a session stops the
frame callback and the clock before the result is submitted, so no update
can land on a finished context.
"""
import logging
import random
from enum import Enum
from typing import Optional

from starcatcher.client import ClientResult
from starcatcher.validation import validate_name

from .clock import GameClock
from .entities import Controls, EndCause, SessionContext
from .feed import LeaderboardFeed
from .loop import Renderer, tick
from .scheduler import FrameHandle, Scheduler
from .spawner import spawn_level

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = 'idle'
    PLAYING = 'playing'
    PAUSED = 'paused'
    ENDED = 'ended'


class SessionError(Exception):
    pass


class InvalidTransition(SessionError):
    def __init__(self, action: str, state: SessionState):
        super().__init__(f'cannot {action} while {state.value}')
        self.action = action
        self.state = state


class SessionController:
    def __init__(self, client, scheduler: Scheduler, width: float = 720, height: float = 420,
                 renderer: Optional[Renderer] = None, rng: Optional[random.Random] = None,
                 live_poll_sec: float = 3.0):
        self.client = client
        self.scheduler = scheduler
        self.width = width
        self.height = height
        self.renderer = renderer
        self.rng = rng
        self.state = SessionState.IDLE
        self.context: Optional[SessionContext] = None
        self.controls = Controls()
        self.player_name = ''
        self.name_error = ''
        self.end_cause: Optional[EndCause] = None
        self.submit_result: Optional[ClientResult] = None
        self.player_rank: Optional[int] = None
        self.feed = LeaderboardFeed(client, scheduler, live_poll_sec, key='live-leaderboard')
        self._clock: Optional[GameClock] = None
        self._frame: Optional[FrameHandle] = None

    @property
    def leaderboard(self):
        return self.feed.entries

    # ---- transitions ----

    def start(self, name: str) -> bool:
        """Begin a fresh session. Returns False (and stays put) on a bad name."""
        if self.state in (SessionState.PLAYING, SessionState.PAUSED):
            raise InvalidTransition('start', self.state)
        error = validate_name(name)
        if error:
            self.name_error = error
            logger.info(f"[session-reject] name={name!r} error={error}")
            return False

        self.stop()
        self.name_error = ''
        self.player_name = name.strip()
        self.end_cause = None
        self.submit_result = None
        self.player_rank = None
        self.controls = Controls()

        ctx = SessionContext(width=self.width, height=self.height,
                             rng=self.rng if self.rng is not None else random.Random())
        spawn_level(ctx, 1)
        self.context = ctx
        self._clock = GameClock(ctx, self.scheduler, on_expire=self._finish)
        self.state = SessionState.PLAYING
        logger.info(f"[session-start] name={self.player_name} stars={len(ctx.stars)} obstacles={len(ctx.obstacles)}")

        self._arm()
        self.feed.start()
        return True

    def pause(self) -> None:
        if self.state is not SessionState.PLAYING:
            raise InvalidTransition('pause', self.state)
        self._disarm()
        self.context.paused = True
        self.state = SessionState.PAUSED
        logger.info(f"[session-pause] level={self.context.level} time={self.context.time_remaining}")

    def resume(self) -> None:
        if self.state is not SessionState.PAUSED:
            raise InvalidTransition('resume', self.state)
        self.context.paused = False
        self.state = SessionState.PLAYING
        self._arm()
        logger.info(f"[session-resume] level={self.context.level} time={self.context.time_remaining}")

    def toggle_pause(self) -> None:
        if self.state is SessionState.PAUSED:
            self.resume()
        else:
            self.pause()

    def stop(self) -> None:
        """Cancel every pending callback tied to the current session.

        A session stopped mid-play is abandoned without a submit and the
        controller drops back to idle.
        """
        self._disarm()
        self.feed.stop()
        if self.state in (SessionState.PLAYING, SessionState.PAUSED):
            logger.info(f"[session-stop] name={self.player_name} state={self.state.value}")
            self.state = SessionState.IDLE

    def set_controls(self, controls: Controls) -> None:
        self.controls = controls

    # ---- scheduling ----

    def _arm(self) -> None:
        if self._frame is None:
            self._frame = self.scheduler.request_frame(self._on_frame)
        self._clock.start()

    def _disarm(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None
        if self._clock is not None:
            self._clock.stop()

    def _on_frame(self, dt: float) -> None:
        self._frame = None
        if self.state is not SessionState.PLAYING:
            return
        ctx = self.context
        tick(ctx, self.controls, dt, self.renderer)
        if ctx.game_over:
            self._finish(ctx.end_cause)
            return
        self._frame = self.scheduler.request_frame(self._on_frame)

    # ---- ending ----

    def _finish(self, cause: EndCause) -> None:
        if self.state is SessionState.ENDED:
            return
        self._disarm()
        self.feed.stop()
        ctx = self.context
        ctx.end(cause)
        self.state = SessionState.ENDED
        self.end_cause = cause
        logger.info(f"[session-end] name={self.player_name} cause={cause.value} score={ctx.score} level={ctx.level}")

        self.submit_result = self.client.submit(self.player_name, ctx.score, ctx.level)
        if not self.submit_result.ok:
            logger.warning(f"[session-submit] failed name={self.player_name} error={self.submit_result.error}")
        self.feed.refresh()
        self.player_rank = self.feed.find(self.player_name, ctx.score, ctx.level)
