from typetrainer.core.layout import (
    _Token,
    _wrap_tokens,
    build_rows,
    layout_from_rows,
    position_at,
    wrap_text,
)
from typetrainer.core.navigation import Geometry


def _unit(_char):
    return 1


def test_wrap_tokens_moves_word_to_next_line():
    tokens = [
        _Token(start=0, end=5, widths=[1, 1, 1, 1, 1], is_space=False),
        _Token(start=5, end=6, widths=[1], is_space=True),
        _Token(start=6, end=11, widths=[1, 1, 1, 1, 1], is_space=False),
    ]
    assert _wrap_tokens(tokens, max_width=6) == [(0, 6), (6, 11)]


def test_wrap_tokens_splits_single_long_word():
    tokens = [_Token(start=0, end=10, widths=[1] * 10, is_space=False)]
    assert _wrap_tokens(tokens, max_width=4) == [(0, 4), (4, 8), (8, 10)]


def test_wrap_tokens_keeps_trailing_spaces_on_the_row():
    tokens = [
        _Token(start=0, end=4, widths=[1] * 4, is_space=False),
        _Token(start=4, end=6, widths=[1, 1], is_space=True),
        _Token(start=6, end=8, widths=[1, 1], is_space=False),
    ]
    assert _wrap_tokens(tokens, max_width=4) == [(0, 6), (6, 8)]


def test_wrap_text_breaks_at_newlines():
    assert wrap_text("ab\ncd", _unit, 10) == [(0, 3), (3, 5)]
    assert wrap_text("ab\n", _unit, 10) == [(0, 3), (3, 3)]
    assert wrap_text("", _unit, 10) == [(0, 0)]


def test_layout_gives_every_position_and_caret_geometry():
    rows = build_rows("ab cd", _unit, 3, line_step=20)
    layout = layout_from_rows(rows, 5)
    assert layout(0) == Geometry(top=0, left=0)
    assert layout(2) == Geometry(top=0, left=2)
    assert layout(3) == Geometry(top=20, left=0)
    assert layout(5) == Geometry(top=20, left=2)
    assert layout(6) is None


def test_position_at_maps_clicks_to_characters():
    rows = build_rows("ab cd", _unit, 3, line_step=20)
    assert position_at(rows, 1.5, 5, 20) == 1
    assert position_at(rows, 0.2, 25, 20) == 3
    assert position_at(rows, 9, 25, 20) is None
    assert position_at(rows, 0, 100, 20) is None
