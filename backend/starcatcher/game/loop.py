"""Per-frame update for a playing session.

``tick`` is the only entry point the session controller needs; the step
functions are public so tests can exercise them one at a time.
"""
import math
from typing import Optional, Protocol

from .entities import Controls, EndCause, GameEvent, SessionContext
from .spawner import spawn_level

# Speeds below are pixels per frame at this reference rate
REFERENCE_FPS = 60
STAR_POINTS = 10
LEVEL_UP_DELAY = 0.6
BALL_BASE_SPEED = 6.0
BALL_SPEED_PER_LEVEL = 1.2


class Renderer(Protocol):
    def render(self, ctx: SessionContext) -> None: ...


def ball_speed(level: int) -> float:
    return BALL_BASE_SPEED + level * BALL_SPEED_PER_LEVEL


def advance_timers(ctx: SessionContext, dt: float) -> None:
    """Run down the invulnerability window and any pending level-up."""
    if ctx.invulnerable:
        ctx.invulnerable_remaining -= dt
        if ctx.invulnerable_remaining <= 0:
            ctx.invulnerable = False
            ctx.invulnerable_remaining = 0.0

    if ctx.level_up_remaining is not None:
        ctx.level_up_remaining -= dt
        if ctx.level_up_remaining <= 0:
            advance_level(ctx)


def advance_level(ctx: SessionContext) -> None:
    spawn_level(ctx, ctx.level + 1)
    ctx.emit(GameEvent.LEVEL_UP)


def move_ball(ctx: SessionContext, controls: Controls, dt: float) -> None:
    ball = ctx.ball
    step = ball_speed(ctx.level) * dt * REFERENCE_FPS
    if controls.up:
        ball.y -= step
    if controls.down:
        ball.y += step
    if controls.left:
        ball.x -= step
    if controls.right:
        ball.x += step
    ball.x = max(ball.radius, min(ctx.width - ball.radius, ball.x))
    ball.y = max(ball.radius, min(ctx.height - ball.radius, ball.y))


def collect_stars(ctx: SessionContext) -> int:
    """Remove every star touching the ball. Returns how many were collected."""
    ball = ctx.ball
    collected = 0
    # Walk backwards so deleting does not skip the next star
    for i in range(len(ctx.stars) - 1, -1, -1):
        star = ctx.stars[i]
        if math.hypot(ball.x - star.x, ball.y - star.y) < ball.radius + star.size / 2:
            del ctx.stars[i]
            ctx.score += STAR_POINTS
            ctx.emit(GameEvent.STAR_COLLECTED)
            collected += 1
    return collected


def hits_obstacle(ctx: SessionContext, obstacle) -> bool:
    ball = ctx.ball
    closest_x = max(obstacle.x, min(ball.x, obstacle.x + obstacle.w))
    closest_y = max(obstacle.y, min(ball.y, obstacle.y + obstacle.h))
    return math.hypot(ball.x - closest_x, ball.y - closest_y) <= ball.radius


def update_obstacles(ctx: SessionContext, dt: float) -> bool:
    """Move and bounce obstacles. Returns True when one proved fatal."""
    for obstacle in ctx.obstacles:
        obstacle.x += obstacle.dx * dt * REFERENCE_FPS
        # Flip only while heading outward
        if (obstacle.x <= 0 and obstacle.dx < 0) or (obstacle.x + obstacle.w >= ctx.width and obstacle.dx > 0):
            obstacle.dx = -obstacle.dx
        if not ctx.invulnerable and hits_obstacle(ctx, obstacle):
            ctx.emit(GameEvent.HAZARD_HIT)
            ctx.end(EndCause.HAZARD)
            return True
    return False


def check_level_complete(ctx: SessionContext) -> bool:
    """Start the level-up countdown once per level when the sky is empty."""
    if ctx.stars or ctx.level_up_triggered:
        return False
    ctx.level_up_triggered = True
    ctx.level_up_remaining = LEVEL_UP_DELAY
    return True


def tick(ctx: SessionContext, controls: Controls, dt: float, renderer: Optional[Renderer] = None) -> None:
    if ctx.paused or ctx.game_over:
        return
    advance_timers(ctx, dt)
    move_ball(ctx, controls, dt)
    collect_stars(ctx)
    if update_obstacles(ctx, dt):
        return
    check_level_complete(ctx)
    if renderer is not None:
        renderer.render(ctx)
