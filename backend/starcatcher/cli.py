import logging
import random

import click

from config import GameConfig
from starcatcher.client import LeaderboardClient


def _client(ctx) -> LeaderboardClient:
    return ctx.obj['client']


def _fail(message: str) -> None:
    raise click.ClickException(message)


@click.group()
@click.option('--url', default=GameConfig.LEADERBOARD_URL, show_default=True, help='Leaderboard service base URL.')
@click.option('-v', '--verbose', is_flag=True, help='Log debug output.')
@click.pass_context
def cli(ctx, url, verbose):
    """Star Catcher game and leaderboard tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['url'] = url
    ctx.obj['client'] = LeaderboardClient(url, timeout=GameConfig.LEADERBOARD_TIMEOUT_SEC)


@cli.command()
@click.option('--seed', type=int, default=None, help='Seed the spawn layout for a reproducible run.')
@click.pass_context
def play(ctx, seed):
    """Open the game window."""
    class _Config(GameConfig):
        LEADERBOARD_URL = ctx.obj['url']

    from starcatcher.frontend.app import main
    main(config=_Config, rng=random.Random(seed) if seed is not None else None)


@cli.group()
def leaderboard():
    """Browse and edit leaderboard entries."""


@leaderboard.command('list')
@click.pass_context
def list_entries(ctx):
    entries = _client(ctx).list()
    if not entries:
        click.echo('No scores yet')
        return
    click.echo(f"{'#':<4}{'Name':<18}{'Score':>6}{'Level':>7}  When")
    for idx, entry in enumerate(entries, start=1):
        click.echo(f"{idx:<4}{entry.get('name', ''):<18}{entry.get('score', 0):>6}{entry.get('level', 1):>7}  {entry.get('date') or '-'}")


@leaderboard.command('add')
@click.argument('name')
@click.argument('score', type=click.IntRange(min=0))
@click.option('--level', type=click.IntRange(min=1), default=1, show_default=True)
@click.pass_context
def add_entry(ctx, name, score, level):
    """Insert a new row, even if NAME already has one."""
    result = _client(ctx).submit(name, score, level)
    if not result.ok:
        _fail(f'Failed to submit score: {result.error}')
    click.echo(f'Added {name}: {score} (level {level})')


@leaderboard.command('edit')
@click.argument('name')
@click.argument('score', type=click.IntRange(min=0))
@click.option('--level', type=click.IntRange(min=1), default=1, show_default=True)
@click.pass_context
def edit_entry(ctx, name, score, level):
    """Set NAME's score and level, creating the row if needed."""
    result = _client(ctx).upsert(name, score, level)
    if not result.ok:
        _fail(f'Failed to update score: {result.error}')
    click.echo(f'Updated {name}: {score} (level {level})')


@leaderboard.command('remove')
@click.argument('name')
@click.pass_context
def remove_entry(ctx, name):
    result = _client(ctx).remove(name)
    if result.not_found:
        _fail(f'Player not found: {name}')
    if not result.ok:
        _fail(f'Failed to delete {name}: {result.error}')
    click.echo(f'{name} deleted')


@leaderboard.command('clear')
@click.confirmation_option(prompt='Delete every leaderboard entry?')
@click.pass_context
def clear_entries(ctx):
    result = _client(ctx).clear()
    if not result.ok:
        _fail(f'Failed to clear leaderboard: {result.error}')
    click.echo('Leaderboard cleared')


if __name__ == '__main__':
    cli()
