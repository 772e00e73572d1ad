import pygame

from typetrainer.core.engine import KeyEvent
from typetrainer.ui.common import (
    PygameTicker,
    ignore_system_shortcut,
    is_primary_pointer_event,
    key_event_from_pygame,
)


def _key(key, unicode="", mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode, mod=mod)


def test_arrow_and_editing_keys_are_named():
    assert key_event_from_pygame(_key(pygame.K_LEFT)) == KeyEvent("ArrowLeft")
    assert key_event_from_pygame(_key(pygame.K_DOWN)) == KeyEvent("ArrowDown")
    assert key_event_from_pygame(_key(pygame.K_RETURN, "\r")) == KeyEvent("Enter")
    assert key_event_from_pygame(_key(pygame.K_BACKSPACE, "\b")) == KeyEvent("Backspace")


def test_ctrl_marks_word_modifier():
    event = _key(pygame.K_BACKSPACE, mod=pygame.KMOD_LCTRL)
    assert key_event_from_pygame(event) == KeyEvent("Backspace", word_modifier=True)


def test_printable_characters_pass_through():
    assert key_event_from_pygame(_key(pygame.K_a, "A", pygame.KMOD_SHIFT)) == KeyEvent("A")
    assert key_event_from_pygame(_key(pygame.K_SPACE, " ")) == KeyEvent(" ")


def test_modifier_keys_alt_chords_and_control_characters_are_dropped():
    assert key_event_from_pygame(_key(pygame.K_LCTRL, mod=pygame.KMOD_LCTRL)) is None
    assert key_event_from_pygame(_key(pygame.K_a, "a", pygame.KMOD_LALT)) is None
    assert key_event_from_pygame(_key(pygame.K_TAB, "\t")) is None
    assert key_event_from_pygame(pygame.event.Event(pygame.KEYUP, key=pygame.K_a, mod=0)) is None


def test_function_keys_are_ignored():
    assert ignore_system_shortcut(_key(pygame.K_F5))
    assert not ignore_system_shortcut(_key(pygame.K_a, "a"))


def test_primary_pointer_event_rejects_right_mouse_button():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(10, 10))
    assert not is_primary_pointer_event(event, is_down=True)
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
    assert is_primary_pointer_event(event, is_down=True)


def test_ticker_runs_callback_and_cancels_timer(monkeypatch):
    calls = []
    monkeypatch.setattr("typetrainer.ui.common.pygame.time.set_timer", lambda event, ms: calls.append((event, ms)))
    ticks = []
    ticker = PygameTicker(1000, event_type=pygame.USEREVENT + 1)
    ticker.start(lambda: ticks.append(1))

    assert ticker.handle(pygame.event.Event(pygame.USEREVENT + 1))
    assert not ticker.handle(pygame.event.Event(pygame.USEREVENT + 2))
    ticker.cancel()
    ticker.cancel()

    assert ticks == [1]
    assert calls == [(pygame.USEREVENT + 1, 1000), (pygame.USEREVENT + 1, 0)]
