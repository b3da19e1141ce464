"""
Gap encoding of a symbol stream.

Every distinct symbol owns a number line: the sequence of gaps between its
consecutive occurrences, measured in stream steps. The first occurrence is
recorded as 0. In zero streaming mode every tracked line also receives an
ABSENT placeholder on the steps where its symbol did not occur, so all lines
stay the same length and can be displayed side by side.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from . import config


# Placeholder entry for steps where a symbol did not occur
ABSENT = -1

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE36_LIMIT = 36 * 36  # two rendered characters


class LineOverflowError(OverflowError):
    """
    Raised when number lines hit their capacity during a record call.

    The step is fully applied before this is raised: every other line was
    updated and the step counter advanced. The listed symbols receive no
    further entries for the rest of the session.
    """

    def __init__(self, symbols: Sequence[int], step: int, capacity: int):
        self.symbols = tuple(symbols)
        self.step = step
        self.capacity = capacity
        names = ", ".join(repr(chr(s)) for s in self.symbols)
        super().__init__(f"Line capacity {capacity} reached at step {step} for {names}")


class NumberLine:
    """
    Gap sequence for a single symbol.

    Values live in a preallocated int64 array; only the first ``len(line)``
    slots are meaningful. The tuple form is cached until the next change.
    """

    def __init__(self, capacity: int = None):
        self.capacity = config.LINE_CAPACITY if capacity is None else capacity
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        self.last_seen_step = -1
        self.occurrences = 0
        self.overflowed = False

        self._values = np.full(self.capacity, ABSENT, dtype=np.int64)
        self._count = 0
        self._tuple: Optional[Tuple[int, ...]] = ()

    def append(self, value: int):
        """
        Append a gap or ABSENT.

        Raises:
            LineOverflowError: If the line is already at capacity. The line is
                marked overflowed before raising.
        """
        if self._count >= self.capacity:
            self.overflowed = True
            raise LineOverflowError((), self._count, self.capacity)

        self._values[self._count] = value
        self._count += 1
        self._tuple = None

    def pad(self, steps: int):
        """
        Append ``steps`` ABSENT entries.

        Raises:
            LineOverflowError: If they do not all fit. As many as fit are kept.
        """
        room = self.capacity - self._count
        # Unused slots already hold ABSENT
        self._count += min(steps, room)
        self._tuple = None
        if steps > room:
            self.overflowed = True
            raise LineOverflowError((), self._count, self.capacity)

    @property
    def values(self) -> np.ndarray:
        """Copy of the recorded entries."""
        return self._values[:self._count].copy()

    def to_tuple(self) -> Tuple[int, ...]:
        if self._tuple is None:
            self._tuple = tuple(self._values[:self._count].tolist())
        return self._tuple

    def __len__(self) -> int:
        return self._count


@dataclass(frozen=True)
class EncoderSnapshot:
    """Immutable view of encoder state after a step."""

    step: int
    zero_streaming: bool
    tracked_symbols: Tuple[int, ...]
    lines: Mapping[int, Tuple[int, ...]]
    last_symbol: Optional[int] = None

    def values(self, symbol: int) -> Tuple[int, ...]:
        return self.lines.get(symbol, ())


class GapEncoder:
    """
    Per-symbol gap encoder.

    Usage:
        encoder = GapEncoder(zero_streaming=False)
        for symbol in b"aabca":
            encoder.record(symbol)

        encoder.line(ord('a')).to_tuple()  # (0, 1, 3)
    """

    def __init__(self, zero_streaming: bool = False, line_capacity: int = None):
        self.zero_streaming = zero_streaming
        self.line_capacity = config.LINE_CAPACITY if line_capacity is None else line_capacity
        if self.line_capacity <= 0:
            raise ValueError(f"line_capacity must be positive, got {self.line_capacity}")

        self._lines: List[Optional[NumberLine]] = [None] * config.SYMBOL_RANGE
        self._order: List[int] = []
        self._step = 0
        self._last_symbol: Optional[int] = None

    @property
    def current_step(self) -> int:
        return self._step

    @property
    def tracked_symbols(self) -> Tuple[int, ...]:
        """Distinct symbols in order of first occurrence."""
        return tuple(self._order)

    def line(self, symbol: int) -> Optional[NumberLine]:
        return self._lines[symbol]

    def occurrence_count(self, symbol: int) -> int:
        line = self._lines[symbol]
        return line.occurrences if line is not None else 0

    def record(self, symbol: int) -> int:
        """
        Record one symbol and advance the step counter.

        Args:
            symbol: Byte value 0-255

        Returns:
            The gap recorded for the symbol (0 on first occurrence).

        Raises:
            LineOverflowError: If one or more lines reached capacity on this
                step. Raised after the step has been applied.
        """
        if not 0 <= symbol < config.SYMBOL_RANGE:
            raise ValueError(f"symbol must be a byte value, got {symbol!r}")

        overflowed: List[int] = []
        line = self._lines[symbol]

        if line is None:
            line = NumberLine(self.line_capacity)
            self._lines[symbol] = line
            self._order.append(symbol)
            gap = 0
            if self.zero_streaming and self._step:
                # Late arrivals get placeholders for the steps they missed
                try:
                    line.pad(self._step)
                except LineOverflowError:
                    overflowed.append(symbol)
        else:
            gap = self._step - line.last_seen_step

        line.last_seen_step = self._step
        line.occurrences += 1
        self._push(symbol, gap, overflowed)

        if self.zero_streaming:
            for other in self._order:
                if other != symbol:
                    self._push(other, ABSENT, overflowed)

        self._step += 1
        self._last_symbol = symbol

        if overflowed:
            raise LineOverflowError(overflowed, self._step - 1, self.line_capacity)

        return gap

    def _push(self, symbol: int, value: int, overflowed: List[int]):
        line = self._lines[symbol]
        if line.overflowed:
            return
        try:
            line.append(value)
        except LineOverflowError:
            overflowed.append(symbol)

    def snapshot(self) -> EncoderSnapshot:
        lines = {symbol: self._lines[symbol].to_tuple() for symbol in self._order}
        return EncoderSnapshot(
            step=self._step,
            zero_streaming=self.zero_streaming,
            tracked_symbols=tuple(self._order),
            lines=MappingProxyType(lines),
            last_symbol=self._last_symbol
        )

    def get_stats(self) -> dict:
        """
        Summary of the session so far.

        Returns:
            Dict with step and symbol counts, overflowed symbols, and per-symbol
            occurrence counts with mean/max recurrence gap.
        """
        per_symbol = {}
        for symbol in self._order:
            line = self._lines[symbol]
            values = line.values
            gaps = values[values != ABSENT][1:]
            per_symbol[symbol] = {
                "occurrences": line.occurrences,
                "mean_gap": float(np.mean(gaps)) if gaps.size else 0.0,
                "max_gap": int(np.max(gaps)) if gaps.size else 0
            }

        return {
            "steps": self._step,
            "symbols": len(self._order),
            "overflowed": [s for s in self._order if self._lines[s].overflowed],
            "per_symbol": per_symbol
        }

    def reset(self):
        """Drop all state, keeping the configuration."""
        self._lines = [None] * config.SYMBOL_RANGE
        self._order = []
        self._step = 0
        self._last_symbol = None


def to_base36(value: int, strict: bool = False) -> str:
    """
    Render a gap value in at most two base-36 characters.

    Values of 1296 and above do not fit in two characters. They are reduced
    modulo 1296 unless ``strict`` is set, in which case they raise ValueError.
    """
    if value < 0:
        raise ValueError(f"gap values are non-negative, got {value}")
    if value >= BASE36_LIMIT:
        if strict:
            raise ValueError(f"{value} does not fit in two base-36 digits")
        value %= BASE36_LIMIT

    if value < 36:
        return BASE36_DIGITS[value]
    return BASE36_DIGITS[value // 36] + BASE36_DIGITS[value % 36]


def occurrence_steps(values: Iterable[int], first_step: int) -> List[int]:
    """
    Recover the absolute steps at which a symbol occurred.

    Args:
        values: The symbol's number line, ABSENT entries allowed
        first_step: Step of the first occurrence

    Returns:
        One step per real occurrence, as a running sum of the gaps.
    """
    arr = np.asarray(list(values), dtype=np.int64)
    gaps = arr[arr != ABSENT]
    if gaps.size == 0:
        return []
    return (first_step + np.cumsum(gaps)).tolist()
