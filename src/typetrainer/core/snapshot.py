from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from typetrainer.core.engine import SessionState


@dataclass(frozen=True)
class Cell:
    char: str
    status: str
    is_cursor: bool


@dataclass(frozen=True)
class RenderSnapshot:
    cells: Tuple[Cell, ...]
    caret: bool


def build_snapshot(state: SessionState) -> RenderSnapshot:
    model = state.model
    cells = tuple(
        Cell(char=char, status=model.status(index), is_cursor=index == state.cursor)
        for index, char in enumerate(model.text)
    )
    return RenderSnapshot(cells=cells, caret=state.cursor >= model.length)
