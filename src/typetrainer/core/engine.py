from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from typetrainer.core.navigation import (
    DOWN,
    UP,
    LayoutOracle,
    next_word_end,
    previous_word_start,
    vertical_target,
)
from typetrainer.core.text import TextModel

logger = logging.getLogger(__name__)

ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
ARROW_UP = "ArrowUp"
ARROW_DOWN = "ArrowDown"
BACKSPACE = "Backspace"
ENTER = "Enter"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    word_modifier: bool = False


@dataclass(frozen=True)
class PointerEvent:
    position: int


@dataclass(frozen=True)
class SetReferenceText:
    text: str


@dataclass(frozen=True)
class FocusChanged:
    editor_focused: bool


Event = Union[KeyEvent, PointerEvent, SetReferenceText, FocusChanged]


@dataclass(frozen=True)
class SessionState:
    model: TextModel
    cursor: int = 0
    anchor: Optional[float] = None
    editor_focused: bool = False

    @classmethod
    def for_text(cls, text: str) -> "SessionState":
        return cls(model=TextModel.from_text(text))

    @property
    def length(self) -> int:
        return self.model.length


def _clamp(value: int, length: int) -> int:
    return max(0, min(length, value))


def _navigate(
    state: SessionState,
    event: KeyEvent,
    layout: Optional[LayoutOracle],
    row_tolerance: float,
) -> Optional[SessionState]:
    text = state.model.text
    if event.key == ARROW_LEFT:
        if event.word_modifier:
            return replace(state, cursor=previous_word_start(text, state.cursor))
        return replace(state, cursor=_clamp(state.cursor - 1, state.length))
    if event.key == ARROW_RIGHT:
        if event.word_modifier:
            return replace(state, cursor=next_word_end(text, state.cursor))
        return replace(state, cursor=_clamp(state.cursor + 1, state.length))
    if event.key in (ARROW_UP, ARROW_DOWN):
        if event.word_modifier:
            return state
        direction = UP if event.key == ARROW_UP else DOWN
        target = vertical_target(
            state.cursor,
            direction,
            state.length,
            layout,
            row_tolerance=row_tolerance,
        )
        return replace(state, cursor=_clamp(target, state.length))
    return None


def _backspace(state: SessionState, event: KeyEvent, now: float) -> SessionState:
    cursor = state.cursor
    if event.word_modifier:
        start = previous_word_start(state.model.text, cursor)
        return replace(
            state,
            model=state.model.clear_range(start, cursor),
            cursor=start,
            anchor=now,
        )
    if cursor == 0:
        return state
    if state.model.is_locked(cursor - 1):
        return replace(state, cursor=cursor - 1)
    return replace(
        state,
        model=state.model.clear_range(cursor - 1, cursor),
        cursor=cursor - 1,
        anchor=now,
    )


def _type_char(state: SessionState, char: str, now: float) -> SessionState:
    anchor = state.anchor if state.anchor is not None else now
    if state.cursor >= state.length:
        return replace(state, anchor=anchor)
    return replace(
        state,
        model=state.model.set_char(state.cursor, char),
        cursor=state.cursor + 1,
        anchor=anchor,
    )


def _reposition(state: SessionState, position: int, now: float) -> SessionState:
    if not 0 <= position <= state.length:
        logger.debug("Dropping pointer at %d outside [0, %d]", position, state.length)
        return state
    return replace(
        state,
        model=state.model.clear_range(position, state.length),
        cursor=position,
        anchor=now,
    )


def apply_event(
    state: SessionState,
    event: Event,
    *,
    now: float,
    layout: Optional[LayoutOracle] = None,
    row_tolerance: float = 5.0,
) -> SessionState:
    """Return the state that results from handling ``event`` at time ``now``.

    Events that do not apply are absorbed and the same state is returned.
    """
    if isinstance(event, SetReferenceText):
        return replace(SessionState.for_text(event.text), editor_focused=state.editor_focused)
    if isinstance(event, FocusChanged):
        return replace(state, editor_focused=event.editor_focused)
    if state.editor_focused:
        logger.debug("Editor has focus; dropping %r", event)
        return state
    if isinstance(event, PointerEvent):
        return _reposition(state, event.position, now)
    if not isinstance(event, KeyEvent):
        return state

    navigated = _navigate(state, event, layout, row_tolerance)
    if navigated is not None:
        return navigated
    if event.key == BACKSPACE:
        return _backspace(state, event, now)
    if event.word_modifier:
        logger.debug("Dropping unhandled chord %r", event.key)
        return state
    if event.key == ENTER:
        return _type_char(state, "\n", now)
    if len(event.key) == 1:
        return _type_char(state, event.key, now)
    logger.debug("Dropping key %r", event.key)
    return state
