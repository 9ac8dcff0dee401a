"""Input validation shared by the leaderboard service and the game client."""
import re
from typing import Any, Optional, Tuple

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 16
NAME_PATTERN = re.compile(r'^[-_A-Za-z0-9 ]+$')
# Upper bound of the Integer columns on every supported backend
INT_MAX = 2 ** 31 - 1


def validate_name(name: Any) -> str:
    """Return an error message for an invalid player name, '' when valid.

    The name is trimmed before the length and character checks.
    """
    if not name or not isinstance(name, str):
        return 'Please enter a name'
    trimmed = name.strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        return f'Name must be at least {NAME_MIN_LENGTH} characters'
    if len(trimmed) > NAME_MAX_LENGTH:
        return f'Name must be at most {NAME_MAX_LENGTH} characters'
    if not NAME_PATTERN.match(trimmed):
        return 'Only letters, numbers, spaces, - and _ allowed'
    return ''


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass; reject it along with floats like 1.5
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, (int, str)):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def parse_score_level(data: dict) -> Tuple[Optional[int], Optional[int], str]:
    """Coerce score/level from a request body. Returns (score, level, error)."""
    if 'score' not in data or data.get('score') is None:
        return None, None, 'score is required'
    score = _as_int(data.get('score'))
    if score is None or score < 0:
        return None, None, 'score must be an integer >= 0'
    if score > INT_MAX:
        return None, None, f'score must be at most {INT_MAX}'
    level = _as_int(data.get('level', 1))
    if level is None or level < 1:
        return None, None, 'level must be an integer >= 1'
    if level > INT_MAX:
        return None, None, f'level must be at most {INT_MAX}'
    return score, level, ''
