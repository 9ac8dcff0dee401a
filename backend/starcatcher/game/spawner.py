import logging
import random
from typing import List

from .entities import (
    OBSTACLE_HEIGHT,
    OBSTACLE_WIDTH,
    STAR_COLORS,
    STAR_SIZE,
    Obstacle,
    SessionContext,
    Star,
)

logger = logging.getLogger(__name__)

LEVEL_DURATION = 30
INVULNERABLE_SEC = 0.7
MAX_STARS = 8
MAX_OBSTACLES = 6
STAR_MARGIN = 30.0
BALL_BOTTOM_OFFSET = 40
OBSTACLE_BASE_SPEED = 1.6
OBSTACLE_SPEED_PER_LEVEL = 0.9
OBSTACLE_SPEED_JITTER = 0.6


def star_count(level: int) -> int:
    return min(MAX_STARS, 3 + level + level // 2)


def obstacle_count(level: int) -> int:
    return min(MAX_OBSTACLES, level)


def spawn_stars(level: int, width: float, height: float, rng: random.Random) -> List[Star]:
    # Keep at least one star radius clear of every edge
    margin_x = max(STAR_SIZE, min(STAR_MARGIN, width / 2))
    margin_y = max(STAR_SIZE, min(STAR_MARGIN, height / 2))
    return [
        Star(
            x=rng.random() * (width - 2 * margin_x) + margin_x,
            y=rng.random() * (height - 2 * margin_y) + margin_y,
            size=STAR_SIZE,
            color=rng.choice(STAR_COLORS),
        )
        for _ in range(star_count(level))
    ]


def spawn_obstacles(level: int, width: float, height: float, rng: random.Random) -> List[Obstacle]:
    obstacles = []
    for _ in range(obstacle_count(level)):
        w, h = OBSTACLE_WIDTH, OBSTACLE_HEIGHT
        x = rng.random() * (width - 2 * w) + w
        y = rng.random() * (height - 2 * h) + h
        direction = 1 if rng.random() > 0.5 else -1
        speed = OBSTACLE_BASE_SPEED + level * OBSTACLE_SPEED_PER_LEVEL + rng.random() * OBSTACLE_SPEED_JITTER
        obstacles.append(Obstacle(x=x, y=y, dx=direction * speed, w=w, h=h))
    return obstacles


def spawn_level(ctx: SessionContext, level: int) -> None:
    """Replace the context's entities with a fresh layout for ``level``.

    Also recenters the ball near the bottom edge, refills the level timer
    and opens the invulnerability window.
    """
    if level < 1:
        raise ValueError(f'level must be >= 1, got {level}')
    ctx.level = level
    ctx.stars = spawn_stars(level, ctx.width, ctx.height, ctx.rng)
    ctx.obstacles = spawn_obstacles(level, ctx.width, ctx.height, ctx.rng)

    ctx.ball.x = round(ctx.width / 2)
    ctx.ball.y = round(ctx.height - BALL_BOTTOM_OFFSET)

    ctx.time_remaining = LEVEL_DURATION
    ctx.invulnerable = True
    ctx.invulnerable_remaining = INVULNERABLE_SEC
    ctx.level_up_triggered = False
    ctx.level_up_remaining = None
    logger.debug(f"[spawn] level={level} stars={len(ctx.stars)} obstacles={len(ctx.obstacles)}")
