import heapq
import itertools
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class TimerHandle:
    __slots__ = ('due', 'interval', 'callback', 'args', 'key', 'cancelled', '_scheduler')

    def __init__(self, scheduler, due: float, interval: Optional[float], callback: Callable, args: tuple, key: Optional[str]):
        self._scheduler = scheduler
        self.due = due
        self.interval = interval
        self.callback = callback
        self.args = args
        self.key = key
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._scheduler._release(self)


class FrameHandle:
    __slots__ = ('callback', 'cancelled')

    def __init__(self, callback: Callable[[float], Any]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Cooperative single-threaded scheduler driven by ``advance(dt)``.

    - one-shot timers (``call_later``) and interval timers (``call_every``)
    - an optional key ensures a single pending timer per key
    - frame callbacks (``request_frame``) run once on the next advance and
      must re-request to keep running

    Whoever owns real time (the window loop) calls ``advance`` with the
    elapsed seconds; tests call it with synthetic values.
    """

    def __init__(self, start: float = 0.0):
        self.now = float(start)
        self._queue: List[tuple] = []
        self._seq = itertools.count()
        self._keys: Dict[str, TimerHandle] = {}
        self._frames: List[FrameHandle] = []

    def call_later(self, delay: float, callback: Callable, *args, key: Optional[str] = None) -> TimerHandle:
        return self._schedule(max(0.0, float(delay)), None, callback, args, key)

    def call_every(self, interval: float, callback: Callable, *args, key: Optional[str] = None) -> TimerHandle:
        if interval <= 0:
            raise ValueError('interval must be positive')
        return self._schedule(float(interval), float(interval), callback, args, key)

    def request_frame(self, callback: Callable[[float], Any]) -> FrameHandle:
        handle = FrameHandle(callback)
        self._frames.append(handle)
        return handle

    def pending(self, key: str) -> bool:
        return key in self._keys

    def cancel(self, key: str) -> bool:
        handle = self._keys.get(key)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        for _, _, handle in self._queue:
            handle.cancelled = True
        self._queue.clear()
        self._keys.clear()
        for frame in self._frames:
            frame.cancelled = True
        self._frames.clear()

    def advance(self, dt: float) -> None:
        """Move time forward by ``dt`` seconds, firing timers then frames."""
        target = self.now + max(0.0, float(dt))
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            if handle.interval is not None:
                handle.due = due + handle.interval
                heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
            else:
                self._release(handle)
            handle.callback(*handle.args)
        self.now = target

        frames, self._frames = self._frames, []
        for frame in frames:
            if not frame.cancelled:
                frame.callback(dt)

    def _schedule(self, delay: float, interval: Optional[float], callback: Callable, args: tuple, key: Optional[str]) -> TimerHandle:
        if key is not None and key in self._keys:
            logger.debug(f"[timer-skip] key={key} already scheduled")
            return self._keys[key]
        handle = TimerHandle(self, self.now + delay, interval, callback, args, key)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        if key is not None:
            self._keys[key] = handle
        logger.debug(f"[timer-set] key={key} due={handle.due:.3f} interval={interval}")
        return handle

    def _release(self, handle: TimerHandle) -> None:
        if handle.key is not None and self._keys.get(handle.key) is handle:
            del self._keys[handle.key]
