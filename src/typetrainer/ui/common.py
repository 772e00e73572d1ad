from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import pygame

from typetrainer.core.engine import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    ENTER,
    KeyEvent,
)


Color = Tuple[int, int, int]
Point = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERUP = getattr(pygame, "FINGERUP", None)
FINGER_EVENTS = {event for event in (FINGERDOWN, FINGERUP) if event is not None}

WORD_MODIFIERS = pygame.KMOD_CTRL | pygame.KMOD_META | pygame.KMOD_GUI

_KEY_NAMES = {
    pygame.K_LEFT: ARROW_LEFT,
    pygame.K_RIGHT: ARROW_RIGHT,
    pygame.K_UP: ARROW_UP,
    pygame.K_DOWN: ARROW_DOWN,
    pygame.K_BACKSPACE: BACKSPACE,
    pygame.K_RETURN: ENTER,
    pygame.K_KP_ENTER: ENTER,
}

_MODIFIER_KEYS = {
    pygame.K_LCTRL,
    pygame.K_RCTRL,
    pygame.K_LALT,
    pygame.K_RALT,
    pygame.K_LSHIFT,
    pygame.K_RSHIFT,
    pygame.K_LMETA,
    pygame.K_RMETA,
    pygame.K_LGUI,
    pygame.K_RGUI,
}


@dataclass
class Button:
    rect: pygame.Rect
    label: str = ""
    fill: Optional[Color] = None
    border_color: Optional[Color] = (30, 30, 30)
    border_width: int = 0

    def draw(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        if self.fill is not None:
            pygame.draw.rect(surface, self.fill, self.rect, border_radius=12)
        if self.border_color is not None and self.border_width > 0:
            pygame.draw.rect(
                surface,
                self.border_color,
                self.rect,
                width=self.border_width,
                border_radius=12,
            )
        if self.label and font is not None:
            text = font.render(self.label, True, (20, 20, 20))
            text_rect = text.get_rect(center=self.rect.center)
            surface.blit(text, text_rect)

    def hit(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


class PygameTicker:
    """Periodic callback driven by a pygame timer event.

    The event loop hands every event to :meth:`handle`; matching timer events
    run the callback.
    """

    def __init__(self, interval_ms: int, event_type: Optional[int] = None) -> None:
        self.interval_ms = interval_ms
        self.event_type = event_type if event_type is not None else pygame.event.custom_type()
        self.callback: Optional[Callable[[], None]] = None

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        pygame.time.set_timer(self.event_type, self.interval_ms)

    def cancel(self) -> None:
        if self.callback is None:
            return
        pygame.time.set_timer(self.event_type, 0)
        self.callback = None

    def handle(self, event: pygame.event.Event) -> bool:
        if event.type != self.event_type:
            return False
        if self.callback is not None:
            self.callback()
        return True


def create_window(size: Tuple[int, int], *, fullscreen: bool = False) -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    if fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        screen = pygame.display.set_mode(size)
    pygame.display.set_caption("Typing Test")
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def is_primary_pointer_event(event: pygame.event.Event, *, is_down: bool) -> bool:
    expected_type = pygame.MOUSEBUTTONDOWN if is_down else pygame.MOUSEBUTTONUP
    if event.type == expected_type:
        button = getattr(event, "button", 1)
        if button in {0, 1}:
            return True
        return bool(getattr(event, "touch", False))
    finger_type = FINGERDOWN if is_down else FINGERUP
    return finger_type is not None and event.type == finger_type


def pointer_event_pos(event: pygame.event.Event, screen_rect: pygame.Rect) -> Optional[Point]:
    if hasattr(event, "pos"):
        return event.pos
    if event.type in FINGER_EVENTS:
        return (
            int(event.x * screen_rect.width),
            int(event.y * screen_rect.height),
        )
    return None


def ignore_system_shortcut(event: pygame.event.Event) -> bool:
    if event.type != pygame.KEYDOWN:
        return False
    return event.key in {
        pygame.K_F1,
        pygame.K_F2,
        pygame.K_F3,
        pygame.K_F4,
        pygame.K_F5,
        pygame.K_F6,
        pygame.K_F7,
        pygame.K_F8,
        pygame.K_F9,
        pygame.K_F10,
        pygame.K_F11,
        pygame.K_F12,
    }


def key_event_from_pygame(event: pygame.event.Event) -> Optional[KeyEvent]:
    """Translate a KEYDOWN into a :class:`KeyEvent`, or ``None`` to drop it."""
    if event.type != pygame.KEYDOWN:
        return None
    if event.key in _MODIFIER_KEYS:
        return None
    mods = getattr(event, "mod", 0)
    if mods & pygame.KMOD_ALT:
        return None
    word_modifier = bool(mods & WORD_MODIFIERS)
    name = _KEY_NAMES.get(event.key)
    if name is not None:
        return KeyEvent(key=name, word_modifier=word_modifier)
    char = getattr(event, "unicode", "")
    if len(char) == 1 and char.isprintable():
        return KeyEvent(key=char, word_modifier=word_modifier)
    return None
