from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from typetrainer.config import DEFAULT_ROW_TOLERANCE, DEFAULT_TEXT
from typetrainer.core.engine import Event, SessionState, SetReferenceText, apply_event
from typetrainer.core.metrics import Metrics, compute_metrics
from typetrainer.core.navigation import LayoutOracle
from typetrainer.core.snapshot import RenderSnapshot, build_snapshot

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    def start(self, callback: Callable[[], None]) -> None:
        ...

    def cancel(self) -> None:
        ...


class TypingSession:
    """Owns the typing state for one window and feeds it events one at a time."""

    def __init__(
        self,
        text: str = DEFAULT_TEXT,
        *,
        clock: Callable[[], float] = time.time,
        layout: Optional[LayoutOracle] = None,
        row_tolerance: float = DEFAULT_ROW_TOLERANCE,
    ) -> None:
        self.clock = clock
        self.layout = layout
        self.row_tolerance = row_tolerance
        self.state = SessionState.for_text(text)
        self.now = clock()
        self.ticker: Optional[Ticker] = None

    def dispatch(self, event: Event) -> SessionState:
        self.now = self.clock()
        previous = self.state
        self.state = apply_event(
            previous,
            event,
            now=self.now,
            layout=self.layout,
            row_tolerance=self.row_tolerance,
        )
        if isinstance(event, SetReferenceText):
            logger.info("Reference text replaced (%d characters)", self.state.length)
        elif self.state is not previous:
            logger.debug("%r -> cursor %d", event, self.state.cursor)
        return self.state

    def set_text(self, text: str) -> SessionState:
        return self.dispatch(SetReferenceText(text))

    def set_layout(self, layout: Optional[LayoutOracle]) -> None:
        self.layout = layout

    def tick(self) -> Metrics:
        self.now = self.clock()
        return self.metrics()

    def metrics(self) -> Metrics:
        return compute_metrics(self.state.model, self.state.anchor, self.now)

    def snapshot(self) -> RenderSnapshot:
        return build_snapshot(self.state)

    def start(self, ticker: Ticker) -> None:
        if self.ticker is not None:
            self.ticker.cancel()
        self.ticker = ticker
        ticker.start(self.tick)
        logger.info("Session started")

    def close(self) -> None:
        if self.ticker is None:
            return
        self.ticker.cancel()
        self.ticker = None
        logger.info("Session closed")
