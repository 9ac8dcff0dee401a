"""pygame window: name entry, play, results and leaderboard browsing.

The window loop owns real time. Each frame it samples the keyboard, hands
the elapsed seconds to the scheduler (which runs the session's frame,
clock and poll callbacks) and then draws whatever is not the play area.
"""

from __future__ import annotations

import enum
import logging
import os
import random
from typing import Dict, Optional

import pygame

from config import GameConfig
from starcatcher.client import LeaderboardClient
from starcatcher.game.entities import Controls, EndCause, GameEvent
from starcatcher.game.feed import LeaderboardFeed
from starcatcher.game.scheduler import Scheduler
from starcatcher.game.session import SessionController, SessionState
from starcatcher.validation import NAME_MAX_LENGTH

from .renderer import COL_ERROR, COL_MUTED, COL_TEXT, HudRenderer, PygameRenderer

logger = logging.getLogger(__name__)

HUD_H = 44
SIDEBAR_W = 280
# Longest step handed to the scheduler after a stalled frame
MAX_FRAME_SEC = 0.05
COL_WINDOW = (247, 251, 255)
COL_OVERLAY = (0, 0, 0, 110)

_KEY_NAMES = {
    pygame.K_UP: 'up',
    pygame.K_DOWN: 'down',
    pygame.K_LEFT: 'left',
    pygame.K_RIGHT: 'right',
    pygame.K_w: 'w',
    pygame.K_s: 's',
    pygame.K_a: 'a',
    pygame.K_d: 'd',
}

_SOUND_FILES = {
    GameEvent.STAR_COLLECTED: 'star.mp3',
    GameEvent.LEVEL_UP: 'levelup.mp3',
    GameEvent.HAZARD_HIT: 'gameover.mp3',
    GameEvent.TIME_EXPIRED: 'gameover.mp3',
}


def frame_seconds(elapsed_ms: int) -> float:
    """Convert a pygame clock tick to seconds, capped at MAX_FRAME_SEC."""
    return min(max(0, elapsed_ms) / 1000.0, MAX_FRAME_SEC)


class _Screen(enum.Enum):
    NAME = 'name'
    PLAYING = 'playing'
    RESULTS = 'results'
    BROWSE = 'browse'


class StarCatcherApp:
    def __init__(self, client: LeaderboardClient, config=GameConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.width = config.CANVAS_WIDTH
        self.height = config.CANVAS_HEIGHT

        pygame.init()
        self._surf = pygame.display.set_mode((self.width + SIDEBAR_W, self.height + HUD_H))
        pygame.display.set_caption('Star Catcher')
        self._clock = pygame.time.Clock()
        self._f_big = pygame.font.SysFont('Helvetica', 34, bold=True)
        self._f_body = pygame.font.SysFont('Helvetica', 18)
        self._f_small = pygame.font.SysFont('Courier', 14)

        self.scheduler = Scheduler()
        self.renderer = PygameRenderer(self._surf, origin=(0, HUD_H))
        self.hud = HudRenderer(self._surf, self._f_body, self._f_small)
        self.session = SessionController(
            client, self.scheduler,
            width=self.width, height=self.height,
            renderer=self.renderer, rng=rng,
            live_poll_sec=config.LIVE_POLL_SEC,
        )
        self.browser = LeaderboardFeed(client, self.scheduler, config.BROWSE_POLL_SEC, key='browse-leaderboard')

        self._screen = _Screen.NAME
        self._return_to = _Screen.NAME
        self._name_input = ''
        self._running = True
        self._sounds = self._load_sounds(config.ASSETS_DIR)
        self.browser.refresh()

    # ── setup ───────────────────────────────────────────────────────────────

    @staticmethod
    def _load_sounds(assets_dir: str) -> Dict[GameEvent, pygame.mixer.Sound]:
        sounds: Dict[GameEvent, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            logger.info(f"[audio] disabled error={exc}")
            return sounds
        for event, filename in _SOUND_FILES.items():
            path = os.path.join(assets_dir, filename)
            if not os.path.exists(path):
                continue
            try:
                sounds[event] = pygame.mixer.Sound(path)
            except pygame.error as exc:
                logger.warning(f"[audio] could not load path={path} error={exc}")
        return sounds

    # ── main loop ───────────────────────────────────────────────────────────

    def run(self) -> None:
        try:
            while self._running:
                dt = frame_seconds(self._clock.tick(self.config.FPS))
                for event in pygame.event.get():
                    self._handle_event(event)
                if self.session.state is SessionState.PLAYING:
                    self.session.set_controls(self._read_controls())
                self.scheduler.advance(dt)
                self._play_feedback()
                self._sync_screen()
                self._draw()
                pygame.display.flip()
        finally:
            self.session.stop()
            self.scheduler.cancel_all()
            pygame.quit()

    @staticmethod
    def _read_controls() -> Controls:
        pressed = pygame.key.get_pressed()
        return Controls.from_keys(name for key, name in _KEY_NAMES.items() if pressed[key])

    def _play_feedback(self) -> None:
        ctx = self.session.context
        if ctx is None:
            return
        for event in ctx.drain_events():
            sound = self._sounds.get(event)
            if sound is not None:
                sound.play()

    def _sync_screen(self) -> None:
        if self._screen is _Screen.PLAYING and self.session.state is SessionState.ENDED:
            self._screen = _Screen.RESULTS

    # ── input ───────────────────────────────────────────────────────────────

    def _handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self._running = False
            return
        if self._screen is _Screen.NAME:
            self._handle_name_event(event)
        elif event.type != pygame.KEYDOWN:
            return
        elif self._screen is _Screen.PLAYING:
            if event.key in (pygame.K_p, pygame.K_SPACE):
                self.session.toggle_pause()
            elif event.key == pygame.K_ESCAPE:
                self._running = False
        elif self._screen is _Screen.RESULTS:
            if event.key in (pygame.K_r, pygame.K_RETURN):
                self._start(self.session.player_name)
            elif event.key == pygame.K_TAB:
                self._open_browser()
            elif event.key == pygame.K_ESCAPE:
                self._running = False
        elif self._screen is _Screen.BROWSE:
            if event.key == pygame.K_F5:
                self.browser.refresh()
            elif event.key in (pygame.K_ESCAPE, pygame.K_TAB, pygame.K_BACKSPACE):
                self.browser.stop()
                self._screen = self._return_to

    def _handle_name_event(self, event) -> None:
        if event.type == pygame.TEXTINPUT:
            if len(self._name_input) < NAME_MAX_LENGTH + 8:
                self._name_input += event.text
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_BACKSPACE:
                self._name_input = self._name_input[:-1]
            elif event.key == pygame.K_RETURN:
                self._start(self._name_input)
            elif event.key == pygame.K_TAB:
                self._open_browser()
            elif event.key == pygame.K_ESCAPE:
                self._running = False

    def _start(self, name: str) -> None:
        if self.session.start(name):
            self._screen = _Screen.PLAYING
        else:
            self._screen = _Screen.NAME

    def _open_browser(self) -> None:
        self._return_to = self._screen
        self._screen = _Screen.BROWSE
        self.browser.start()

    # ── drawing ─────────────────────────────────────────────────────────────

    @property
    def _play_rect(self) -> pygame.Rect:
        return pygame.Rect(0, HUD_H, self.width, self.height)

    @property
    def _sidebar_rect(self) -> pygame.Rect:
        return pygame.Rect(self.width, 0, SIDEBAR_W, self.height + HUD_H)

    def _draw(self) -> None:
        if self._screen is _Screen.NAME:
            self._draw_name_screen()
        elif self._screen is _Screen.PLAYING:
            self._draw_playing()
        elif self._screen is _Screen.RESULTS:
            self._draw_results()
        else:
            self._draw_browser()

    def _draw_name_screen(self) -> None:
        self._surf.fill(COL_WINDOW)
        cx = self.width // 2
        self.hud.centered('Star Catcher', (cx, 110), font=self._f_big)
        self.hud.centered('Catch every star, dodge the red bars.', (cx, 160), COL_MUTED)
        box = pygame.Rect(cx - 160, 200, 320, 40)
        pygame.draw.rect(self._surf, (255, 255, 255), box, border_radius=8)
        pygame.draw.rect(self._surf, COL_MUTED, box, width=1, border_radius=8)
        shown = self._name_input or 'Enter your name'
        self.hud.text(shown, (box.x + 10, box.y + 9), COL_TEXT if self._name_input else COL_MUTED)
        if self.session.name_error:
            self.hud.centered(self.session.name_error, (cx, 262), COL_ERROR)
        self.hud.centered('Enter: start    Tab: leaderboard    Esc: quit', (cx, 320), COL_MUTED, self._f_small)
        self.hud.leaderboard(self._sidebar_rect, self.session.leaderboard or self.browser.entries)

    def _draw_playing(self) -> None:
        ctx = self.session.context
        paused = self.session.state is SessionState.PAUSED
        self.hud.hud(pygame.Rect(0, 0, self.width, HUD_H), self.session.player_name, ctx, paused)
        if paused:
            self.renderer.render(ctx)
            overlay = pygame.Surface(self._play_rect.size, pygame.SRCALPHA)
            overlay.fill(COL_OVERLAY)
            self._surf.blit(overlay, self._play_rect.topleft)
            self.hud.centered('Paused', self._play_rect.center, (255, 255, 255), self._f_big)
        highlight = self.session.feed.find(self.session.player_name, ctx.score, ctx.level)
        self.hud.leaderboard(self._sidebar_rect, self.session.leaderboard, highlight, title='Live leaderboard')

    def _draw_results(self) -> None:
        ctx = self.session.context
        self._surf.fill(COL_WINDOW)
        cx, cy = self._play_rect.center
        title = "Time's up!" if self.session.end_cause is EndCause.TIME_EXPIRED else 'Game Over'
        self.hud.centered(title, (cx, cy - 60), font=self._f_big)
        self.hud.centered(f'Score: {ctx.score} | Level: {ctx.level}', (cx, cy))
        self.hud.centered('R: play again    Tab: leaderboard    Esc: quit', (cx, cy + 50), COL_MUTED, self._f_small)
        self.hud.leaderboard(self._sidebar_rect, self.session.leaderboard, self.session.player_rank)

    def _draw_browser(self) -> None:
        self._surf.fill(COL_WINDOW)
        rect = self._surf.get_rect().inflate(-40, -40)
        title = 'Leaderboard (refreshing...)' if self.browser.loading else 'Leaderboard'
        self.hud.leaderboard(rect, self.browser.entries, title=title, limit=20)
        if self.browser.last_refreshed is not None:
            age = self.scheduler.now - self.browser.last_refreshed
            self.hud.text(f'Updated {age:.0f}s ago', (rect.right - 150, rect.y + 14), COL_MUTED, self._f_small)
        self.hud.text('F5: refresh    Tab/Esc: back', (rect.x + 12, rect.bottom - 28), COL_MUTED, self._f_small)


def main(config=GameConfig, rng: Optional[random.Random] = None) -> None:
    client = LeaderboardClient(config.LEADERBOARD_URL, timeout=config.LEADERBOARD_TIMEOUT_SEC)
    StarCatcherApp(client, config=config, rng=rng).run()
