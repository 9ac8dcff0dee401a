import pytest

from starcatcher.validation import parse_score_level, validate_name


@pytest.mark.parametrize('name, message', [
    ('', 'Please enter a name'),
    (None, 'Please enter a name'),
    ('Al', 'Name must be at least 3 characters'),
    ('  Al  ', 'Name must be at least 3 characters'),
    ('A' * 17, 'Name must be at most 16 characters'),
    ('Ava!', 'Only letters, numbers, spaces, - and _ allowed'),
])
def test_invalid_names(name, message):
    assert validate_name(name) == message


@pytest.mark.parametrize('name', ['Ava_99', 'Nova', 'Star-Lord', 'Big Al', 'A' * 16])
def test_valid_names(name):
    assert validate_name(name) == ''


def test_score_and_level_are_coerced():
    assert parse_score_level({'score': '50', 'level': 3}) == (50, 3, '')
    assert parse_score_level({'score': 0}) == (0, 1, '')
    assert parse_score_level({'score': ' 7 ', 'level': 2.0}) == (7, 2, '')
    assert parse_score_level({'score': 2 ** 31 - 1}) == (2 ** 31 - 1, 1, '')


@pytest.mark.parametrize('body', [
    {},
    {'score': None},
    {'score': -1},
    {'score': 1.5},
    {'score': True},
    {'score': 10, 'level': 0},
    {'score': 10, 'level': 'two'},
    {'score': '--5'},
    {'score': '\u00b2'},
    {'score': 10 ** 20},
    {'score': 10, 'level': 2 ** 31},
])
def test_bad_score_or_level(body):
    score, level, error = parse_score_level(body)
    assert error
    assert score is None and level is None
