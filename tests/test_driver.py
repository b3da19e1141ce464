"""
tests/test_driver.py — pytest unit tests for radixstream.driver.StreamDriver.

The driver is exercised headless: sources are plain byte strings, displays
and sleep are recording fakes.
"""

from typing import List

import pytest

from radixstream import driver as driver_module
from radixstream.buffer import BufferFull, SymbolQueue
from radixstream.driver import StreamDriver
from radixstream.encoder import ABSENT

A, B, C = ord("a"), ord("b"), ord("c")


class RecordingDisplay:
    """Display fake that keeps every snapshot and can quit after N frames."""

    def __init__(self, quit_after: int = None):
        self.frames: List = []
        self.quit_after = quit_after

    def show(self, snapshot) -> bool:
        self.frames.append(snapshot)
        return self.quit_after is None or len(self.frames) < self.quit_after


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def warnings() -> List[str]:
    return []


def _driver(data: bytes, sleeps, warnings, **kwargs) -> StreamDriver:
    return StreamDriver(data, sleep=sleeps.append, warn=warnings.append, **kwargs)


class TestSnapshots:

    def test_one_snapshot_per_symbol(self, sleeps, warnings):
        snapshots = list(_driver(b"aabca", sleeps, warnings).snapshots())

        assert [s.step for s in snapshots] == [1, 2, 3, 4, 5]
        assert [s.last_symbol for s in snapshots] == list(b"aabca")
        assert sleeps == []

    def test_final_state_sparse(self, sleeps, warnings):
        final = list(_driver(b"aabca", sleeps, warnings).snapshots())[-1]

        assert final.values(A) == (0, 1, 3)
        assert final.values(B) == (0,)
        assert final.values(C) == (0,)

    def test_final_state_zero_streaming(self, sleeps, warnings):
        driver = _driver(b"aabca", sleeps, warnings, zero_streaming=True)
        final = list(driver.snapshots())[-1]

        assert all(len(final.values(s)) == 5 for s in (A, B, C))
        assert final.values(B) == (ABSENT, ABSENT, 0, ABSENT, ABSENT)

    def test_restart_replays_from_the_beginning(self, sleeps, warnings):
        driver = _driver(b"hello", sleeps, warnings)
        first = list(driver.snapshots())
        second = list(driver.snapshots())

        assert [(s.step, dict(s.lines)) for s in first] == [(s.step, dict(s.lines)) for s in second]
        assert driver.encoder.current_step == 5

    def test_snapshots_are_lazy(self, sleeps, warnings):
        driver = _driver(b"abc", sleeps, warnings)
        iterator = driver.snapshots()
        assert driver.encoder is None

        next(iterator)
        assert driver.encoder.current_step == 1

    def test_queue_drains_after_every_symbol(self, sleeps, warnings):
        driver = _driver(b"abcdef", sleeps, warnings)
        for _ in driver.snapshots():
            assert len(driver.queue) == 0
        assert driver.dropped == 0

    def test_case_is_folded_by_default(self, sleeps, warnings):
        final = list(_driver(b"AaB", sleeps, warnings).snapshots())[-1]
        assert final.tracked_symbols == (A, B)
        assert final.values(A) == (0, 1)

    def test_keep_case(self, sleeps, warnings):
        driver = _driver(b"AaB", sleeps, warnings, fold_case=False)
        final = list(driver.snapshots())[-1]
        assert driver.queue.fold_case is False
        assert final.tracked_symbols == (ord("A"), A, ord("B"))

    def test_empty_source(self, sleeps, warnings):
        assert list(_driver(b"", sleeps, warnings).snapshots()) == []

    def test_overflow_warns_once_and_continues(self, sleeps, warnings):
        driver = _driver(b"aaaaab", sleeps, warnings, line_capacity=2)
        snapshots = list(driver.snapshots())

        assert len(snapshots) == 6
        assert len(warnings) == 1
        assert "'a'" in warnings[0]
        assert snapshots[-1].values(A) == (0, 1)
        assert snapshots[-1].values(B) == (0,)


class TestRun:

    def test_shows_every_frame_and_sleeps_between(self, sleeps, warnings):
        display = RecordingDisplay()
        driver = _driver(b"aabca", sleeps, warnings, update_speed=40)
        last = driver.run(display)

        assert len(display.frames) == 5
        assert sleeps == [0.04] * 5
        assert last is display.frames[-1]
        assert last.values(A) == (0, 1, 3)

    def test_display_can_stop_the_run(self, sleeps, warnings):
        display = RecordingDisplay(quit_after=2)
        last = _driver(b"abcdef", sleeps, warnings).run(display)

        assert len(display.frames) == 2
        assert last.step == 2
        assert len(sleeps) == 1
        assert any("stopping" in w for w in warnings)

    def test_empty_source_returns_none(self, sleeps, warnings):
        assert _driver(b"", sleeps, warnings).run(RecordingDisplay()) is None

    def test_default_speed_from_config(self, sleeps, warnings):
        from radixstream import config
        assert _driver(b"", sleeps, warnings).update_speed == config.DEFAULT_UPDATE_SPEED_MS

    @pytest.mark.parametrize("speed", [0, -5])
    def test_rejects_non_positive_speed(self, sleeps, warnings, speed):
        with pytest.raises(ValueError):
            _driver(b"", sleeps, warnings, update_speed=speed)

    @pytest.mark.parametrize("option", ["queue_capacity", "line_capacity"])
    def test_rejects_zero_capacity(self, sleeps, warnings, option):
        with pytest.raises(ValueError):
            _driver(b"", sleeps, warnings, **{option: 0})


class JammedQueue(SymbolQueue):
    """Queue that reports itself full whenever an 'x' arrives."""

    def enqueue(self, symbol: int):
        if symbol == ord("x"):
            raise BufferFull(f"Buffer is full ({self.capacity} symbols), cannot add {symbol}")
        super().enqueue(symbol)


class TestDroppedSymbols:

    @pytest.fixture(autouse=True)
    def jammed(self, monkeypatch):
        monkeypatch.setattr(driver_module, "SymbolQueue", JammedQueue)

    def test_full_queue_drops_symbol_and_continues(self, sleeps, warnings):
        driver = _driver(b"axbxa", sleeps, warnings)
        snapshots = list(driver.snapshots())

        assert driver.dropped == 2
        assert [s.last_symbol for s in snapshots] == [A, B, A]
        assert snapshots[-1].values(A) == (0, 2)
        assert ord("x") not in snapshots[-1].tracked_symbols
        assert len(warnings) == 2
        assert all("symbol dropped" in w for w in warnings)

    def test_restart_resets_dropped_count(self, sleeps, warnings):
        driver = _driver(b"xax", sleeps, warnings)
        list(driver.snapshots())
        list(driver.snapshots())
        assert driver.dropped == 2
