from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from typetrainer.core.navigation import Geometry, TableLayout


@dataclass
class _Token:
    start: int
    end: int
    widths: List[int]
    is_space: bool


@dataclass
class VisualRow:
    start: int
    end: int
    top: int
    lefts: List[int]


def _wrap_tokens(tokens: List[_Token], max_width: int) -> List[Tuple[int, int]]:
    if max_width <= 0:
        return []
    lines: List[Tuple[int, int]] = []
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    line_width = 0
    for token in tokens:
        token_width = sum(token.widths)
        if token_width <= max_width or token.is_space:
            if line_width == 0:
                line_start = token.start
                line_end = token.end
                line_width = token_width
            elif line_width + token_width <= max_width or token.is_space:
                # Trailing spaces hang off the right edge instead of wrapping.
                line_end = token.end
                line_width += token_width
            else:
                if line_start is not None and line_end is not None:
                    lines.append((line_start, line_end))
                line_start = token.start
                line_end = token.end
                line_width = token_width
            continue

        if line_width > 0:
            if line_start is not None and line_end is not None:
                lines.append((line_start, line_end))
            line_start = None
            line_end = None
            line_width = 0

        idx = token.start
        i = 0
        widths = token.widths
        while i < len(widths):
            acc = 0
            j = i
            while j < len(widths) and (acc + widths[j] <= max_width or acc == 0):
                acc += widths[j]
                j += 1
            lines.append((idx + i, idx + j))
            i = j

    if line_width > 0 and line_start is not None and line_end is not None:
        lines.append((line_start, line_end))
    return lines


def _tokenize(text: str, widths: List[int], offset: int = 0) -> List[_Token]:
    if not text:
        return []
    tokens: List[_Token] = []
    start = 0
    current_space = text[0].isspace()
    for idx, char in enumerate(text):
        is_space = char.isspace()
        if is_space != current_space:
            tokens.append(
                _Token(start=offset + start, end=offset + idx, widths=widths[start:idx], is_space=current_space)
            )
            start = idx
            current_space = is_space
    tokens.append(
        _Token(start=offset + start, end=offset + len(text), widths=widths[start:], is_space=current_space)
    )
    return tokens


def wrap_text(text: str, char_width: Callable[[str], int], max_width: int) -> List[Tuple[int, int]]:
    """Split ``text`` into ``(start, end)`` rows no wider than ``max_width``.

    A newline ends its row and belongs to it. Words wrap as a whole unless a
    single word is wider than a row.
    """
    rows: List[Tuple[int, int]] = []
    paragraph_start = 0
    while paragraph_start <= len(text):
        newline = text.find("\n", paragraph_start)
        paragraph_end = len(text) if newline < 0 else newline
        paragraph = text[paragraph_start:paragraph_end]
        widths = [char_width(char) for char in paragraph]
        ranges = _wrap_tokens(_tokenize(paragraph, widths, paragraph_start), max_width)
        if not ranges:
            ranges = [(paragraph_start, paragraph_start)]
        if newline >= 0:
            last_start, _ = ranges[-1]
            ranges[-1] = (last_start, newline + 1)
        rows.extend(ranges)
        if newline < 0:
            break
        paragraph_start = newline + 1
    return rows


def build_rows(
    text: str,
    char_width: Callable[[str], int],
    max_width: int,
    line_step: int,
) -> List[VisualRow]:
    rows: List[VisualRow] = []
    for row_idx, (start, end) in enumerate(wrap_text(text, char_width, max_width)):
        lefts: List[int] = []
        x = 0
        for char in text[start:end]:
            lefts.append(x)
            x += char_width(char)
        # One extra slot so the caret after the last character has a place.
        lefts.append(x)
        rows.append(VisualRow(start=start, end=end, top=row_idx * line_step, lefts=lefts))
    return rows


def layout_from_rows(rows: List[VisualRow], length: int) -> TableLayout:
    table: Dict[int, Geometry] = {}
    for row in rows:
        for offset, index in enumerate(range(row.start, row.end)):
            table[index] = Geometry(top=row.top, left=row.lefts[offset])
    if rows:
        last = rows[-1]
        if last.end == length:
            table.setdefault(length, Geometry(top=last.top, left=last.lefts[-1]))
    return TableLayout(table)


def position_at(rows: List[VisualRow], x: float, y: float, line_step: int) -> Optional[int]:
    """Return the text position drawn at content coordinates ``(x, y)``, if any."""
    for row in rows:
        if not row.top <= y < row.top + line_step:
            continue
        for offset, index in enumerate(range(row.start, row.end)):
            if row.lefts[offset] <= x < row.lefts[offset + 1]:
                return index
        return None
    return None
