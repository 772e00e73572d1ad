from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from typetrainer.core.text import TextModel

CHARS_PER_WORD = 5


@dataclass(frozen=True)
class Metrics:
    typed_count: int
    correct_count: int
    accuracy: float
    elapsed_minutes: float
    wpm: float
    percent_finished: float


def compute_metrics(model: TextModel, anchor: Optional[float], now: float) -> Metrics:
    """Accuracy, speed and completion for ``model`` as of ``now``.

    ``anchor`` and ``now`` are in seconds. Speed counts every typed position,
    right or wrong, over the time since the anchor was last armed.
    """
    typed_count = 0
    correct_count = 0
    for expected, typed, locked in zip(model.text, model.typed, model.locked):
        if typed is None:
            continue
        typed_count += 1
        if locked or typed == expected:
            correct_count += 1

    accuracy = 100.0 * correct_count / typed_count if typed_count > 0 else 100.0
    elapsed_minutes = (now - anchor) / 60.0 if anchor is not None else 0.0
    wpm = (typed_count / CHARS_PER_WORD) / elapsed_minutes if elapsed_minutes > 0 else 0.0
    percent_finished = 100.0 * correct_count / model.length if model.length else 0.0
    return Metrics(
        typed_count=typed_count,
        correct_count=correct_count,
        accuracy=accuracy,
        elapsed_minutes=elapsed_minutes,
        wpm=wpm,
        percent_finished=percent_finished,
    )


def format_metrics(metrics: Metrics) -> str:
    return (
        f"Accuracy: {metrics.accuracy:.1f}%   "
        f"WPM: {metrics.wpm:.1f}   "
        f"Completed: {metrics.percent_finished:.1f}%"
    )
