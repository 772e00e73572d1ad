from typetrainer.core.engine import KeyEvent, PointerEvent
from typetrainer.core.navigation import TableLayout
from typetrainer.session import TypingSession


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class FakeTicker:
    def __init__(self):
        self.callback = None
        self.cancelled = 0

    def start(self, callback):
        self.callback = callback

    def cancel(self):
        self.cancelled += 1


def test_tick_resamples_clock_without_touching_state():
    clock = FakeClock(0.0)
    session = TypingSession("hello", clock=clock)
    for char in "hello":
        session.dispatch(KeyEvent(char))
    state = session.state

    clock.now = 60.0
    metrics = session.tick()
    assert session.state is state
    assert metrics.wpm == 1.0
    assert metrics.percent_finished == 100.0


def test_backspace_restarts_speed_timing():
    clock = FakeClock(0.0)
    session = TypingSession("ab", clock=clock)
    session.dispatch(KeyEvent("X"))
    clock.now = 30.0
    session.dispatch(KeyEvent("Backspace"))
    assert session.state.anchor == 30.0
    assert session.metrics().elapsed_minutes == 0.0


def test_set_text_resets_state():
    session = TypingSession("ab", clock=FakeClock(5.0))
    session.dispatch(KeyEvent("a"))
    session.set_text("xyz")
    assert session.state.cursor == 0
    assert session.state.anchor is None
    assert session.state.model.text == "xyz"
    assert session.metrics().accuracy == 100.0


def test_layout_is_used_for_vertical_moves():
    session = TypingSession("abcd", clock=FakeClock())
    session.set_layout(TableLayout.from_pairs({0: (0, 0), 1: (0, 10), 2: (20, 0), 3: (20, 10)}))
    session.dispatch(PointerEvent(1))
    session.dispatch(KeyEvent("ArrowDown"))
    assert session.state.cursor == 3


def test_ticker_is_cancelled_once_on_close():
    session = TypingSession("ab", clock=FakeClock())
    ticker = FakeTicker()
    session.start(ticker)
    assert ticker.callback == session.tick
    session.close()
    session.close()
    assert ticker.cancelled == 1


def test_snapshot_reflects_current_state():
    session = TypingSession("ab", clock=FakeClock())
    session.dispatch(KeyEvent("a"))
    snapshot = session.snapshot()
    assert snapshot.cells[1].is_cursor
