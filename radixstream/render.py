"""
Grid layout for encoder snapshots.

Builds the mixed-radix grid as plain text lines: one column per tracked
symbol, newest symbol leftmost, label on row 0, a rule on row 1, and the
symbol's gap values below it, most recent first. Display surfaces only
copy these lines to the screen.
"""

from typing import List

from . import config
from .encoder import ABSENT, EncoderSnapshot, to_base36

HEADER_ROWS = 2


def symbol_label(symbol: int) -> str:
    """Printable ASCII as itself, every other byte as '.'."""
    if 0x20 <= symbol < 0x7F:
        return chr(symbol)
    return "."


class GridRenderer:
    """
    Stateless grid builder bound to a surface size.

    Usage:
        renderer = GridRenderer(rows=24, cols=80)
        lines = renderer.build(snapshot)

        # after the surface changes size
        renderer.resize(rows, cols)
        lines = renderer.build(snapshot)
    """

    def __init__(self, rows: int, cols: int, column_width: int = None):
        self.column_width = config.COLUMN_WIDTH if column_width is None else column_width
        if self.column_width <= 0:
            raise ValueError(f"column_width must be positive, got {self.column_width}")
        self.rows = 0
        self.cols = 0
        self.resize(rows, cols)

    def resize(self, rows: int, cols: int):
        """Set new surface dimensions. The next build uses them."""
        self.rows = max(0, rows)
        self.cols = max(0, cols)

    @property
    def visible_columns(self) -> int:
        """Number of symbol columns that fit the width."""
        if self.cols == 0:
            return 0
        return (self.cols - 1) // self.column_width + 1

    def column_of(self, snapshot: EncoderSnapshot, symbol: int) -> int:
        """Grid column index of ``symbol``, or -1 if it is not tracked."""
        order = snapshot.tracked_symbols
        if symbol not in order:
            return -1
        return len(order) - 1 - order.index(symbol)

    def build(self, snapshot: EncoderSnapshot) -> List[str]:
        """
        Lay out a snapshot.

        Returns:
            Exactly ``rows`` strings, each exactly ``cols`` characters wide.
        """
        grid = [[" "] * self.cols for _ in range(self.rows)]
        if self.rows == 0 or self.cols == 0:
            return ["".join(row) for row in grid]

        order = snapshot.tracked_symbols
        count = len(order)
        columns = min(count, self.visible_columns)

        for i in range(columns):
            symbol = order[count - i - 1]
            self._put(grid, 0, i * self.column_width, symbol_label(symbol))

        if self.rows > 1:
            grid[1] = ["-"] * self.cols

        depth = self.rows - HEADER_ROWS
        for i in range(columns):
            x = i * self.column_width
            values = snapshot.values(order[count - i - 1])

            for j in range(min(depth, len(values))):
                value = values[len(values) - j - 1]
                if value == ABSENT:
                    if not snapshot.zero_streaming:
                        break
                    value = 0
                self._put(grid, j + HEADER_ROWS, x, to_base36(value))

        return ["".join(row) for row in grid]

    def _put(self, grid: List[List[str]], y: int, x: int, text: str):
        row = grid[y]
        for offset, char in enumerate(text):
            if x + offset >= self.cols:
                break
            row[x + offset] = char


def format_frame_line(snapshot: EncoderSnapshot) -> str:
    """
    One-line summary of a snapshot for headless output.

    Returns:
        String like "Step    120 | 'e' gap=7 (7) | 27 symbols"
    """
    if snapshot.last_symbol is None:
        return f"Step {snapshot.step:6d} | no symbols"

    values = snapshot.values(snapshot.last_symbol)
    label = symbol_label(snapshot.last_symbol)
    if values and values[-1] != ABSENT:
        gap_text = f"gap={values[-1]} ({to_base36(values[-1])})"
    else:
        gap_text = "gap=-"

    return (
        f"Step {snapshot.step:6d} | {label!r} {gap_text} | "
        f"{len(snapshot.tracked_symbols)} symbols"
    )
