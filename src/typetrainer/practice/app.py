from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pygame

from typetrainer.config import load_config, practice_settings
from typetrainer.core.engine import FocusChanged, PointerEvent
from typetrainer.core.layout import VisualRow, build_rows, layout_from_rows, position_at, wrap_text
from typetrainer.core.metrics import format_metrics
from typetrainer.core.text import CORRECT, INCORRECT, UNTYPED
from typetrainer.paths import ensure_directories, get_data_root
from typetrainer.session import TypingSession
from typetrainer.ui.common import (
    Button,
    PygameTicker,
    create_window,
    ignore_system_shortcut,
    is_primary_pointer_event,
    key_event_from_pygame,
    pointer_event_pos,
)

logger = logging.getLogger(__name__)

HELP_LINES = [
    "Type the text below. Press Enter for newline, Backspace to delete, and Ctrl+Backspace to delete the previous word.",
    "Use the arrow keys (including up/down and Ctrl+ArrowLeft/Right) to reposition your cursor.",
    "Click any character below to reposition your cursor.",
]

TEXT_COLORS = {
    CORRECT: (34, 139, 34),
    INCORRECT: (200, 30, 30),
}
UNTYPED_COLOR = (60, 60, 60)
INCORRECT_FILL = (255, 215, 215)
CURSOR_FILL = (255, 236, 150)


def setup_logging(config: Dict[str, Any]) -> None:
    logs_dir = ensure_directories(get_data_root(config))["logs"]
    level = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(logs_dir / "typetrainer.log", encoding="utf-8"),
        ],
    )


@dataclass
class ChangeTextPanel:
    """State of the "Change Text" editor shown above the practice text."""

    open: bool = False
    focused: bool = False
    buffer: str = ""

    def toggle(self) -> None:
        self.open = not self.open
        if not self.open:
            self.focused = False

    def insert(self, char: str) -> None:
        self.buffer += char

    def backspace(self) -> None:
        self.buffer = self.buffer[:-1]

    def take_text(self) -> str:
        text = self.buffer
        self.buffer = ""
        self.open = False
        self.focused = False
        return text


def status_color(status: str) -> Tuple[int, int, int]:
    return TEXT_COLORS.get(status, UNTYPED_COLOR)


def visible_char(char: str) -> str:
    return "↵" if char == "\n" else char


class PracticeApp:
    def __init__(self) -> None:
        self.config = load_config()
        self.settings = practice_settings(self.config)

        self.screen, self.screen_rect = create_window(
            self.settings["window_size"],
            fullscreen=self.settings["fullscreen"],
        )
        self.clock = pygame.time.Clock()
        pygame.key.set_repeat(400, 30)

        self.ui_font = pygame.font.SysFont("sans", 18)
        self.title_font = pygame.font.SysFont("sans", 30, bold=True)
        self.text_font = pygame.font.SysFont("dejavusansmono,monospace", self.settings["font_size"])
        self.line_step = self.text_font.get_height() + self.settings["line_gap"]

        self.session = TypingSession(
            self.settings["default_text"],
            row_tolerance=self.settings["row_tolerance"],
        )
        self.ticker = PygameTicker(self.settings["tick_ms"])
        self.panel = ChangeTextPanel()

        self.margin = 24
        self.change_button = Button(
            rect=pygame.Rect(self.margin, self.margin, 150, 44),
            label="Change Text",
            fill=(235, 235, 235),
        )
        help_top = self.change_button.rect.bottom + 12
        self.help_top = help_top
        self.header_bottom = help_top + len(HELP_LINES) * (self.ui_font.get_height() + 4) + 8
        width = self.screen_rect.width - self.margin * 2
        self.editor_rect = pygame.Rect(self.margin, self.header_bottom, width, 140)
        self.set_button = Button(
            rect=pygame.Rect(self.margin, self.editor_rect.bottom + 8, 120, 40),
            label="Set Text",
            fill=(235, 235, 235),
        )
        self.metrics_height = self.ui_font.get_height() + 24
        self.text_pad = 16
        self.text_scroll_y = 0
        self._rows_key: Optional[Tuple[str, int]] = None
        self.rows: List[VisualRow] = []
        self._layout_text_rect()

    def _layout_text_rect(self) -> None:
        top = self.set_button.rect.bottom + 12 if self.panel.open else self.header_bottom
        bottom = self.screen_rect.height - self.margin - self.metrics_height
        self.text_rect = pygame.Rect(
            self.margin,
            top,
            self.screen_rect.width - self.margin * 2,
            max(self.line_step, bottom - top),
        )

    def _char_width(self, char: str) -> int:
        return self.text_font.size(visible_char(char))[0]

    def _refresh_rows(self) -> None:
        text = self.session.state.model.text
        max_width = max(1, self.text_rect.width - self.text_pad * 2)
        key = (text, max_width)
        if key == self._rows_key:
            return
        self.rows = build_rows(text, self._char_width, max_width, self.line_step)
        self._rows_key = key
        self.session.set_layout(layout_from_rows(self.rows, len(text)))

    def _cursor_row_top(self) -> int:
        cursor = self.session.state.cursor
        for row in self.rows:
            if row.start <= cursor < row.end:
                return row.top
        return self.rows[-1].top if self.rows else 0

    def _ensure_cursor_visible(self) -> None:
        view_height = max(1, self.text_rect.height - self.text_pad * 2)
        content_height = (self.rows[-1].top + self.line_step) if self.rows else 0
        if content_height <= view_height:
            self.text_scroll_y = 0
            return
        max_scroll = content_height - view_height
        cursor_top = self._cursor_row_top()
        cursor_bottom = cursor_top + self.line_step
        # Keep the cursor row roughly centred, like scrolling it into view.
        if cursor_top < self.text_scroll_y or cursor_bottom > self.text_scroll_y + view_height:
            self.text_scroll_y = cursor_top - (view_height - self.line_step) // 2
        self.text_scroll_y = max(0, min(max_scroll, self.text_scroll_y))

    def _set_editor_focus(self, focused: bool) -> None:
        if self.panel.focused == focused:
            return
        self.panel.focused = focused
        self.session.dispatch(FocusChanged(editor_focused=focused))

    def _toggle_panel(self) -> None:
        self.panel.toggle()
        if not self.panel.open:
            self.session.dispatch(FocusChanged(editor_focused=False))
        self._layout_text_rect()

    def _apply_new_text(self) -> None:
        self._set_editor_focus(False)
        self.session.set_text(self.panel.take_text())
        self.text_scroll_y = 0
        self._layout_text_rect()

    def _handle_editor_key(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            self._set_editor_focus(False)
        elif event.key == pygame.K_BACKSPACE:
            self.panel.backspace()
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.panel.insert("\n")
        elif event.key == pygame.K_TAB:
            self.panel.insert("\t")
        elif event.unicode and event.unicode.isprintable():
            self.panel.insert(event.unicode)

    def _handle_pointer(self, pos: Tuple[int, int]) -> None:
        if self.change_button.hit(pos):
            self._toggle_panel()
            return
        if self.panel.open:
            if self.set_button.hit(pos):
                self._apply_new_text()
                return
            if self.editor_rect.collidepoint(pos):
                self._set_editor_focus(True)
                return
            self._set_editor_focus(False)
        if not self.text_rect.collidepoint(pos):
            return
        x = pos[0] - self.text_rect.left - self.text_pad
        y = pos[1] - self.text_rect.top - self.text_pad + self.text_scroll_y
        index = position_at(self.rows, x, y, self.line_step)
        if index is not None:
            self.session.dispatch(PointerEvent(position=index))

    def _draw_header(self) -> None:
        self.change_button.draw(self.screen, self.ui_font)
        title = self.title_font.render("Typing Test", True, (20, 20, 20))
        self.screen.blit(title, (self.change_button.rect.right + 24, self.margin + 4))
        y = self.help_top
        for line in HELP_LINES:
            surf = self.ui_font.render(line, True, (90, 90, 90))
            self.screen.blit(surf, (self.margin, y))
            y += self.ui_font.get_height() + 4

    def _draw_editor(self) -> None:
        pygame.draw.rect(self.screen, (255, 255, 255), self.editor_rect)
        border = (30, 110, 220) if self.panel.focused else (160, 160, 160)
        pygame.draw.rect(self.screen, border, self.editor_rect, width=2)
        self.set_button.draw(self.screen, self.ui_font)

        left = self.editor_rect.left + 8
        top = self.editor_rect.top + 6
        if not self.panel.buffer:
            hint = self.ui_font.render("Type your new text here...", True, (150, 150, 150))
            self.screen.blit(hint, (left, top))
            return
        max_width = self.editor_rect.width - 16
        step = self.ui_font.get_height() + 2
        rows = wrap_text(self.panel.buffer, lambda c: self.ui_font.size(c)[0], max_width)
        max_rows = max(1, (self.editor_rect.height - 12) // step)
        # Show the tail of the buffer, where typing happens.
        for idx, (start, end) in enumerate(rows[-max_rows:]):
            line = self.panel.buffer[start:end].rstrip("\n").replace("\t", "    ")
            surf = self.ui_font.render(line, True, (30, 30, 30))
            self.screen.blit(surf, (left, top + idx * step))

    def _draw_text(self) -> None:
        pygame.draw.rect(self.screen, (255, 255, 255), self.text_rect)
        pygame.draw.rect(self.screen, (200, 200, 200), self.text_rect, width=2)
        snapshot = self.session.snapshot()
        origin_x = self.text_rect.left + self.text_pad
        origin_y = self.text_rect.top + self.text_pad - self.text_scroll_y
        clip = self.text_rect.inflate(-4, -4)
        self.screen.set_clip(clip)
        for row in self.rows:
            y = origin_y + row.top
            if y + self.line_step < clip.top or y > clip.bottom:
                continue
            for offset, index in enumerate(range(row.start, row.end)):
                cell = snapshot.cells[index]
                x = origin_x + row.lefts[offset]
                width = row.lefts[offset + 1] - row.lefts[offset]
                cell_rect = pygame.Rect(x, y, width, self.text_font.get_height())
                if cell.is_cursor:
                    pygame.draw.rect(self.screen, CURSOR_FILL, cell_rect)
                    pygame.draw.line(self.screen, (30, 30, 30), cell_rect.bottomleft, cell_rect.bottomright, 2)
                elif cell.status == INCORRECT:
                    pygame.draw.rect(self.screen, INCORRECT_FILL, cell_rect)
                if cell.char == "\n" and cell.status == UNTYPED and not cell.is_cursor:
                    continue
                surf = self.text_font.render(visible_char(cell.char), True, status_color(cell.status))
                self.screen.blit(surf, (x, y))
        if snapshot.caret and self.rows:
            last = self.rows[-1]
            caret = pygame.Rect(
                origin_x + last.lefts[-1],
                origin_y + last.top,
                max(2, self._char_width(" ")),
                self.text_font.get_height(),
            )
            pygame.draw.rect(self.screen, CURSOR_FILL, caret)
        self.screen.set_clip(None)

    def _draw_metrics(self) -> None:
        line = format_metrics(self.session.metrics())
        surf = self.ui_font.render(line, True, (20, 20, 20))
        rect = surf.get_rect(
            midleft=(self.margin, self.screen_rect.height - self.margin - self.metrics_height // 2)
        )
        self.screen.blit(surf, rect)

    def _render(self) -> None:
        self._refresh_rows()
        self._ensure_cursor_visible()
        self.screen.fill((248, 248, 248))
        self._draw_header()
        if self.panel.open:
            self._draw_editor()
        self._draw_text()
        self._draw_metrics()
        pygame.display.flip()

    def run(self) -> None:
        running = True
        self.session.start(self.ticker)
        self._render()
        try:
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif self.ticker.handle(event):
                        continue
                    elif event.type == pygame.KEYDOWN:
                        if ignore_system_shortcut(event):
                            continue
                        if self.panel.focused:
                            self._handle_editor_key(event)
                        elif event.key == pygame.K_ESCAPE:
                            running = False
                        else:
                            key_event = key_event_from_pygame(event)
                            if key_event is not None:
                                self.session.dispatch(key_event)
                    elif is_primary_pointer_event(event, is_down=True):
                        pos = pointer_event_pos(event, self.screen_rect)
                        if pos is not None:
                            self._handle_pointer(pos)

                self._render()
                self.clock.tick(60)
        finally:
            self.session.close()
            pygame.quit()


def main() -> None:
    config = load_config()
    setup_logging(config)
    try:
        PracticeApp().run()
    except Exception:
        logger.exception("Typing test crashed")
        pygame.quit()
        sys.exit(1)


if __name__ == "__main__":
    main()
