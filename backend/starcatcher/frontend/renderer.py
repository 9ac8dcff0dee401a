from __future__ import annotations

import math
from typing import List, Optional

import pygame

from starcatcher.game.entities import OBSTACLE_COLOR, SessionContext, Star

COL_TEXT = (34, 34, 34)
COL_MUTED = (110, 110, 130)
COL_PANEL = (255, 255, 255)
COL_HIGHLIGHT = (255, 223, 0)
COL_ERROR = (220, 40, 40)


def _hsl(hue: float, sat: float, light: float) -> pygame.Color:
    color = pygame.Color(0, 0, 0)
    color.hsla = (hue % 360, sat, light, 100)
    return color


def star_points(star: Star) -> List[tuple]:
    """Vertices of a five-pointed star drawn as a single pentagram path.

    The tips sit on the same circle the ball has to reach to collect it.
    """
    reach = star.size / 2
    points = []
    for k in range(5):
        angle = (k * 4 * math.pi) / 5 - math.pi / 2
        points.append((star.x + reach * math.cos(angle), star.y + reach * math.sin(angle)))
    return points


class PygameRenderer:
    """Draws a session context onto a pygame surface."""

    def __init__(self, surface: pygame.Surface, origin: tuple = (0, 0)):
        self.surface = surface
        self.origin = origin
        self._shift = 0.0

    def _offset(self, x: float, y: float) -> tuple:
        return (x + self.origin[0], y + self.origin[1])

    def render(self, ctx: SessionContext) -> None:
        area = pygame.Rect(self.origin[0], self.origin[1], int(ctx.width), int(ctx.height))
        self.draw_background(ctx, area)
        self.draw_stars(ctx)
        self.draw_obstacles(ctx)
        self.draw_ball(ctx)

    def draw_background(self, ctx: SessionContext, area: pygame.Rect) -> None:
        # Slowly drifting two-stop vertical gradient
        self._shift += 0.008
        top = _hsl(200 + self._shift * 60, 85, 95)
        bottom = _hsl(260 + self._shift * 60, 85, 88)
        steps = max(1, area.height // 6)
        band = math.ceil(area.height / steps)
        for i in range(steps):
            t = i / max(1, steps - 1)
            self.surface.fill(top.lerp(bottom, t), pygame.Rect(area.x, area.y + i * band, area.width, band).clip(area))

    def draw_stars(self, ctx: SessionContext) -> None:
        for star in ctx.stars:
            points = [self._offset(x, y) for x, y in star_points(star)]
            pygame.draw.polygon(self.surface, pygame.Color(star.color), points)

    def draw_obstacles(self, ctx: SessionContext) -> None:
        color = pygame.Color(OBSTACLE_COLOR)
        for obstacle in ctx.obstacles:
            x, y = self._offset(obstacle.x, obstacle.y)
            pygame.draw.rect(self.surface, color, pygame.Rect(round(x), round(y), round(obstacle.w), round(obstacle.h)))

    def draw_ball(self, ctx: SessionContext) -> None:
        ball = ctx.ball
        color = pygame.Color(ball.color)
        if ctx.invulnerable:
            # Fade while the grace window is open
            color = color.lerp(pygame.Color(255, 255, 255), 0.5)
        pygame.draw.circle(self.surface, color, self._offset(ball.x, ball.y), ball.radius)


class HudRenderer:
    """Text panels around the play area: HUD strip and leaderboard table."""

    def __init__(self, surface: pygame.Surface, font: pygame.font.Font, small: pygame.font.Font):
        self.surface = surface
        self.font = font
        self.small = small

    def text(self, text: str, pos: tuple, color=COL_TEXT, font: Optional[pygame.font.Font] = None) -> pygame.Rect:
        rendered = (font or self.font).render(text, True, color)
        return self.surface.blit(rendered, pos)

    def centered(self, text: str, center: tuple, color=COL_TEXT, font: Optional[pygame.font.Font] = None) -> None:
        rendered = (font or self.font).render(text, True, color)
        self.surface.blit(rendered, rendered.get_rect(center=center))

    def hud(self, rect: pygame.Rect, name: str, ctx: SessionContext, paused: bool) -> None:
        self.surface.fill(COL_PANEL, rect)
        label = f"{name}   Score {ctx.score}   Level {ctx.level}   Time {ctx.time_remaining}s"
        self.text(label, (rect.x + 12, rect.y + 10))
        hint = 'P: resume' if paused else 'P: pause'
        rendered = self.small.render(hint, True, COL_MUTED)
        self.surface.blit(rendered, (rect.right - rendered.get_width() - 12, rect.y + 14))

    def leaderboard(self, rect: pygame.Rect, entries: List[dict], highlight: Optional[int] = None,
                    title: str = 'Leaderboard', limit: int = 12) -> None:
        self.surface.fill(COL_PANEL, rect)
        self.text(title, (rect.x + 12, rect.y + 10))
        y = rect.y + 44
        if not entries:
            self.text('No scores yet', (rect.x + 12, y), COL_MUTED, self.small)
            return
        self.text('#   Name              Score  Lvl', (rect.x + 12, y), COL_MUTED, self.small)
        y += 22
        for idx, entry in enumerate(entries[:limit]):
            row = pygame.Rect(rect.x + 6, y - 2, rect.width - 12, 20)
            if idx == highlight:
                self.surface.fill(COL_HIGHLIGHT, row)
            line = f"{idx + 1:<3} {str(entry.get('name') or 'Guest')[:16]:<17} {entry.get('score', 0):>5}  {entry.get('level', 1):>3}"
            self.text(line, (rect.x + 12, y), COL_TEXT, self.small)
            y += 20
