from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

BALL_RADIUS = 15.0
BALL_COLOR = '#FFB84D'
STAR_SIZE = 16.0
STAR_COLORS = ('#FFE066', '#FF9CEE', '#79FFEF', '#A3FF7A', '#CBA6FF', '#FFD27A')
OBSTACLE_WIDTH = 40.0
OBSTACLE_HEIGHT = 18.0
OBSTACLE_COLOR = '#D9534F'

UP_KEYS = frozenset({'up', 'w'})
DOWN_KEYS = frozenset({'down', 's'})
LEFT_KEYS = frozenset({'left', 'a'})
RIGHT_KEYS = frozenset({'right', 'd'})


class GameEvent(str, Enum):
    STAR_COLLECTED = 'star_collected'
    LEVEL_UP = 'level_up'
    HAZARD_HIT = 'hazard_hit'
    TIME_EXPIRED = 'time_expired'


class EndCause(str, Enum):
    HAZARD = 'hazard'
    TIME_EXPIRED = 'time_expired'


@dataclass
class Ball:
    x: float = 100.0
    y: float = 100.0
    radius: float = BALL_RADIUS
    color: str = BALL_COLOR


@dataclass
class Star:
    x: float
    y: float
    size: float = STAR_SIZE
    color: str = STAR_COLORS[0]


@dataclass
class Obstacle:
    x: float
    y: float
    dx: float
    w: float = OBSTACLE_WIDTH
    h: float = OBSTACLE_HEIGHT


@dataclass(frozen=True)
class Controls:
    """Snapshot of held directional input."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_keys(cls, keys: Iterable[str]) -> 'Controls':
        """Build from held key names (arrow names or WASD, any case)."""
        held = {k.lower() for k in keys}
        return cls(
            up=bool(held & UP_KEYS),
            down=bool(held & DOWN_KEYS),
            left=bool(held & LEFT_KEYS),
            right=bool(held & RIGHT_KEYS),
        )


@dataclass
class SessionContext:
    """All mutable state of one play-through.

    Owned by the session controller and handed to every update function.
    """

    width: float
    height: float
    rng: random.Random = field(default_factory=random.Random)
    ball: Ball = field(default_factory=Ball)
    stars: List[Star] = field(default_factory=list)
    obstacles: List[Obstacle] = field(default_factory=list)
    score: int = 0
    level: int = 1
    time_remaining: int = 30
    paused: bool = False
    invulnerable: bool = False
    invulnerable_remaining: float = 0.0
    level_up_triggered: bool = False
    level_up_remaining: Optional[float] = None
    game_over: bool = False
    end_cause: Optional[EndCause] = None
    events: List[GameEvent] = field(default_factory=list)

    def emit(self, event: GameEvent) -> None:
        self.events.append(event)

    def drain_events(self) -> List[GameEvent]:
        events, self.events = self.events, []
        return events

    def end(self, cause: EndCause) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.end_cause = cause
