from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

UP = -1
DOWN = 1


@dataclass(frozen=True)
class Geometry:
    top: float
    left: float


LayoutOracle = Callable[[int], Optional[Geometry]]


class TableLayout:
    """Layout oracle backed by a position -> geometry table.

    Positions missing from the table are treated as not rendered.
    """

    def __init__(self, table: Optional[Mapping[int, Geometry]] = None) -> None:
        self._table: Dict[int, Geometry] = dict(table or {})

    @classmethod
    def from_pairs(cls, pairs: Mapping[int, Tuple[float, float]]) -> "TableLayout":
        return cls({index: Geometry(top=top, left=left) for index, (top, left) in pairs.items()})

    def __call__(self, index: int) -> Optional[Geometry]:
        return self._table.get(index)


def previous_word_start(text: str, cursor: int) -> int:
    index = max(0, min(cursor, len(text)))
    while index > 0 and text[index - 1].isspace():
        index -= 1
    while index > 0 and not text[index - 1].isspace():
        index -= 1
    return index


def next_word_end(text: str, cursor: int) -> int:
    index = max(0, min(cursor, len(text)))
    while index < len(text) and not text[index].isspace():
        index += 1
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _rendered(length: int, layout: LayoutOracle) -> List[Tuple[int, Geometry]]:
    rendered = []
    for index in range(length + 1):
        geometry = layout(index)
        if geometry is not None:
            rendered.append((index, geometry))
    return rendered


def vertical_target(
    cursor: int,
    direction: int,
    length: int,
    layout: Optional[LayoutOracle],
    *,
    row_tolerance: float = 5.0,
) -> int:
    """Resolve an up/down move to the position best matching the cursor column.

    Every rendered position whose row top lies above (``UP``) or below
    (``DOWN``) the cursor is a candidate; the one with the smallest horizontal
    distance to the cursor wins, ties going to the lowest index. Moving down
    with no candidate below lands past the end of the text when the cursor is
    on the last row. Without geometry for the cursor position the cursor stays
    put.
    """
    if layout is None or not 0 <= cursor <= length:
        return cursor
    current = layout(cursor)
    if current is None:
        return cursor
    rendered = _rendered(length, layout)

    if direction == UP:
        candidates = [(i, g) for i, g in rendered if g.top < current.top]
    else:
        candidates = [(i, g) for i, g in rendered if g.top > current.top]

    if candidates:
        best_index = cursor
        best_diff = float("inf")
        for index, geometry in candidates:
            diff = abs(geometry.left - current.left)
            if diff < best_diff:
                best_diff = diff
                best_index = index
        return best_index

    if direction == UP:
        return cursor

    last = rendered[-1][1]
    if abs(current.top - last.top) < row_tolerance:
        return length
    return cursor
