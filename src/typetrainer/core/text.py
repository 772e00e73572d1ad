from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

UNTYPED = "untyped"
CORRECT = "correct"
INCORRECT = "incorrect"


@dataclass(frozen=True)
class TextModel:
    """Reference text plus what has been typed at each position.

    ``typed`` and ``locked`` always have the same length as ``text``. A typed
    slot holds ``None`` until something is typed there. A locked slot was typed
    correctly and stays that way until the text is replaced.
    """

    text: str
    typed: Tuple[Optional[str], ...]
    locked: Tuple[bool, ...]

    @classmethod
    def from_text(cls, text: str) -> "TextModel":
        return cls(text=text, typed=(None,) * len(text), locked=(False,) * len(text))

    @property
    def length(self) -> int:
        return len(self.text)

    def is_locked(self, index: int) -> bool:
        return 0 <= index < len(self.text) and self.locked[index]

    def status(self, index: int) -> str:
        typed = self.typed[index]
        if typed is None:
            return UNTYPED
        if self.locked[index] or typed == self.text[index]:
            return CORRECT
        return INCORRECT

    def set_char(self, index: int, char: str) -> "TextModel":
        if not 0 <= index < len(self.text) or self.locked[index]:
            return self
        typed = list(self.typed)
        typed[index] = char
        locked = self.locked
        if char == self.text[index]:
            locked = self.locked[:index] + (True,) + self.locked[index + 1 :]
        return TextModel(text=self.text, typed=tuple(typed), locked=locked)

    def clear_range(self, lo: int, hi: int) -> "TextModel":
        lo = max(0, lo)
        hi = min(len(self.text), hi)
        if lo >= hi:
            return self
        typed = list(self.typed)
        for index in range(lo, hi):
            if not self.locked[index]:
                typed[index] = None
        return TextModel(text=self.text, typed=tuple(typed), locked=self.locked)

    def replace_text(self, text: str) -> "TextModel":
        return TextModel.from_text(text)
