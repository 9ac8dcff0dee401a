import logging

import pytest

from starcatcher.game.clock import CLOCK_KEY
from starcatcher.game.entities import Controls, EndCause, Obstacle, Star
from starcatcher.game.session import InvalidTransition, SessionController, SessionState

FRAME = 1 / 60
LIVE_KEY = 'live-leaderboard'


@pytest.fixture()
def controller(fake_client, scheduler, rng):
    return SessionController(fake_client, scheduler, rng=rng)


def quiet(ctx):
    """Leave one far-away star and no hazards so nothing happens on its own."""
    ctx.stars = [Star(20, 20)]
    ctx.obstacles = []


def test_short_name_is_rejected(controller, scheduler):
    assert controller.start('Al') is False
    assert 'at least 3 characters' in controller.name_error
    assert controller.state is SessionState.IDLE
    assert controller.context is None
    assert not scheduler.pending(CLOCK_KEY)
    assert not scheduler.pending(LIVE_KEY)


def test_start_spawns_level_one(controller, scheduler, fake_client):
    assert controller.start('Ava_99') is True
    ctx = controller.context
    assert controller.state is SessionState.PLAYING
    assert controller.player_name == 'Ava_99'
    assert controller.name_error == ''
    assert ctx.level == 1
    assert ctx.score == 0
    assert ctx.time_remaining == 30
    assert len(ctx.stars) == 4
    assert len(ctx.obstacles) == 1
    assert ctx.invulnerable is True
    assert scheduler.pending(CLOCK_KEY)
    assert scheduler.pending(LIVE_KEY)
    assert fake_client.list_calls == 1


def test_start_while_playing_is_invalid(controller):
    controller.start('Ava_99')
    with pytest.raises(InvalidTransition):
        controller.start('Nova')


def test_pause_from_idle_is_invalid(controller):
    with pytest.raises(InvalidTransition) as excinfo:
        controller.pause()
    assert excinfo.value.state is SessionState.IDLE
    with pytest.raises(InvalidTransition):
        controller.resume()


def test_pause_freezes_and_resume_continues(controller, scheduler):
    controller.start('Ava_99')
    ctx = controller.context
    quiet(ctx)
    ctx.obstacles = [Obstacle(x=100, y=50, dx=2)]
    scheduler.advance(1.0)
    assert ctx.time_remaining == 29

    controller.pause()
    assert controller.state is SessionState.PAUSED
    x_before = ctx.obstacles[0].x
    ball_before = (ctx.ball.x, ctx.ball.y)
    controller.set_controls(Controls(up=True))
    scheduler.advance(5.0)
    assert ctx.time_remaining == 29
    assert ctx.obstacles[0].x == x_before
    assert (ctx.ball.x, ctx.ball.y) == ball_before

    controller.toggle_pause()
    assert controller.state is SessionState.PLAYING
    scheduler.advance(1.0)
    assert ctx.time_remaining == 28
    assert ctx.ball.y < ball_before[1]


def test_clock_expiry_ends_and_submits(controller, scheduler, fake_client):
    controller.start('Ava_99')
    ctx = controller.context
    quiet(ctx)
    ctx.score = 40
    for _ in range(30):
        scheduler.advance(1.0)

    assert controller.state is SessionState.ENDED
    assert controller.end_cause is EndCause.TIME_EXPIRED
    assert ctx.game_over is True
    assert fake_client.submitted == [('Ava_99', 40, 1)]
    assert controller.submit_result.ok is True
    assert controller.player_rank == 0
    assert controller.leaderboard[0]['name'] == 'Ava_99'
    assert not scheduler.pending(CLOCK_KEY)
    assert not scheduler.pending(LIVE_KEY)

    scheduler.advance(10.0)
    assert len(fake_client.submitted) == 1


def test_hazard_contact_ends_and_submits(controller, scheduler, fake_client):
    controller.start('Ava_99')
    ctx = controller.context
    quiet(ctx)
    ctx.invulnerable = False
    ctx.obstacles = [Obstacle(x=ctx.ball.x - 10, y=ctx.ball.y - 5, dx=0)]
    scheduler.advance(FRAME)

    assert controller.state is SessionState.ENDED
    assert controller.end_cause is EndCause.HAZARD
    assert fake_client.submitted == [('Ava_99', 0, 1)]
    assert not scheduler.pending(CLOCK_KEY)


def test_submit_failure_still_ends(failing_client, scheduler, rng, caplog):
    controller = SessionController(failing_client, scheduler, rng=rng)
    controller.start('Ava_99')
    quiet(controller.context)
    with caplog.at_level(logging.WARNING):
        for _ in range(30):
            scheduler.advance(1.0)

    assert controller.state is SessionState.ENDED
    assert controller.submit_result.ok is False
    assert controller.player_rank is None
    assert '[session-submit] failed' in caplog.text


def test_restart_after_end_gives_fresh_session(controller, scheduler):
    controller.start('Ava_99')
    quiet(controller.context)
    controller.context.score = 70
    for _ in range(30):
        scheduler.advance(1.0)
    first = controller.context
    assert controller.state is SessionState.ENDED

    assert controller.start('Ava_99') is True
    assert controller.context is not first
    assert controller.context.score == 0
    assert controller.context.level == 1
    assert controller.end_cause is None
    assert controller.player_rank is None
    assert scheduler.pending(CLOCK_KEY)


def test_stop_cancels_everything(controller, scheduler):
    controller.start('Ava_99')
    ctx = controller.context
    quiet(ctx)
    controller.stop()
    assert not scheduler.pending(CLOCK_KEY)
    assert not scheduler.pending(LIVE_KEY)
    scheduler.advance(5.0)
    assert ctx.time_remaining == 30
    assert controller.state is SessionState.IDLE


def test_stopped_session_cannot_be_resumed(controller, scheduler, fake_client):
    controller.start('Ava_99')
    quiet(controller.context)
    controller.pause()
    controller.stop()
    assert controller.state is SessionState.IDLE
    with pytest.raises(InvalidTransition):
        controller.toggle_pause()
    assert not scheduler.pending(CLOCK_KEY)
    assert fake_client.submitted == []

    assert controller.start('Nova') is True
    assert controller.state is SessionState.PLAYING
    assert controller.player_name == 'Nova'


def test_live_leaderboard_polls_every_three_seconds(controller, scheduler, fake_client):
    fake_client.entries = [{'name': 'Nova', 'score': 120, 'level': 4}]
    controller.start('Ava_99')
    quiet(controller.context)
    assert fake_client.list_calls == 1
    assert controller.leaderboard[0]['name'] == 'Nova'

    scheduler.advance(2.5)
    assert fake_client.list_calls == 1
    scheduler.advance(0.5)
    assert fake_client.list_calls == 2
    scheduler.advance(3.0)
    assert fake_client.list_calls == 3
