"""
Display surfaces for the mixed-radix grid.

All surfaces share one contract:
    start()             - acquire the surface
    show(snapshot)      - draw a frame, False if the user asked to quit
    wait(snapshot)      - keep the final frame up until the user quits
    stop()              - release the surface

A surface that returned False from show() treats the session as over and
wait() returns at once.

TerminalDisplay draws with curses and redraws on terminal resize.
WindowDisplay draws into an OpenCV window.
ConsoleDisplay prints progress lines for headless runs.
"""

import curses
import shutil
from typing import Optional

import numpy as np

from . import config
from .encoder import EncoderSnapshot
from .render import GridRenderer, format_frame_line

QUIT_KEYS = (ord('q'), 27)  # 'q' or ESC


class TerminalDisplay:
    """
    Curses display of the grid.

    Holds no grid state of its own: every frame and every resize rebuilds
    the grid from the latest snapshot.

    Usage:
        display = TerminalDisplay()
        display.start()

        for snapshot in snapshots:
            if not display.show(snapshot):
                break  # User pressed 'q'

        display.wait(snapshot)
        display.stop()
    """

    def __init__(self, column_width: int = None):
        self.column_width = config.COLUMN_WIDTH if column_width is None else column_width
        self.renderer: Optional[GridRenderer] = None
        self._screen = None
        self._running = False
        self._last: Optional[EncoderSnapshot] = None

    def start(self):
        """Take over the terminal."""
        self._screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # terminal cannot hide the cursor
        self._screen.keypad(True)
        self._screen.nodelay(True)

        rows, cols = self._screen.getmaxyx()
        self.renderer = GridRenderer(rows, cols, self.column_width)
        self._running = True

    def stop(self):
        """Restore the terminal."""
        if self._screen is None:
            return
        self._screen.keypad(False)
        curses.nocbreak()
        curses.echo()
        curses.endwin()
        self._screen = None
        self._running = False
        print("[viz] Terminal display closed")

    def show(self, snapshot: EncoderSnapshot) -> bool:
        """
        Draw a frame.

        Returns:
            False if the user pressed 'q' or ESC, True otherwise.
        """
        if not self._running:
            return False

        self._last = snapshot
        if not self._poll_keys():
            self._running = False
            return False

        self._draw(snapshot)
        return True

    def wait(self, snapshot: Optional[EncoderSnapshot] = None):
        """Block on key events, redrawing on resize, until 'q' or ESC."""
        if not self._running:
            return
        if snapshot is not None:
            self._last = snapshot

        self._screen.nodelay(False)
        self._redraw()

        while True:
            key = self._screen.getch()
            if key in QUIT_KEYS:
                break
            if key == curses.KEY_RESIZE:
                self.resize()

    def resize(self):
        """Pick up the new terminal size and redraw the latest frame."""
        rows, cols = self._screen.getmaxyx()
        self.renderer.resize(rows, cols)
        self._redraw()

    def _poll_keys(self) -> bool:
        while True:
            key = self._screen.getch()
            if key == -1:
                return True
            if key in QUIT_KEYS:
                return False
            if key == curses.KEY_RESIZE:
                rows, cols = self._screen.getmaxyx()
                self.renderer.resize(rows, cols)

    def _redraw(self):
        if self._last is None:
            self._screen.erase()
            self._screen.refresh()
            return
        self._draw(self._last)

    def _draw(self, snapshot: EncoderSnapshot):
        lines = self.renderer.build(snapshot)
        self._screen.erase()
        for y, line in enumerate(lines):
            # Writing the bottom-right cell moves the cursor off screen
            if y == len(lines) - 1:
                line = line[:-1]
            self._screen.addstr(y, 0, line)
        self._screen.refresh()


class WindowDisplay:
    """
    OpenCV window showing the grid.

    The window can be resized by the user; the grid is rebuilt for the new
    size on the next frame.
    """

    WINDOW_NAME = "radixstream"

    def __init__(
        self,
        width: int = None,
        height: int = None,
        column_width: int = None
    ):
        self.width = config.WINDOW_WIDTH if width is None else width
        self.height = config.WINDOW_HEIGHT if height is None else height
        self.column_width = config.COLUMN_WIDTH if column_width is None else column_width
        self.renderer: Optional[GridRenderer] = None

        self._cv2 = None
        self._running = False
        self._cell_w = 10
        self._cell_h = 18
        self._last: Optional[EncoderSnapshot] = None

    def start(self):
        """Initialize the display window."""
        try:
            import cv2
        except ImportError as e:
            raise RuntimeError(
                f"Failed to import OpenCV: {e}\n\n"
                "Make sure you have installed:\n"
                "  pip install opencv-python"
            )
        self._cv2 = cv2

        print("[viz] Starting display window")
        (text_w, text_h), baseline = cv2.getTextSize("0", cv2.FONT_HERSHEY_PLAIN, 1.0, 1)
        self._cell_w = text_w + 2
        self._cell_h = text_h + baseline + 4

        cv2.namedWindow(self.WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.WINDOW_NAME, self.width, self.height)
        self.renderer = GridRenderer(*self._grid_size(), self.column_width)
        self._running = True

    def stop(self):
        """Close the display window."""
        if self._cv2 is None:
            return
        print("[viz] Closing display window")
        self._running = False
        self._cv2.destroyAllWindows()

    def show(self, snapshot: EncoderSnapshot) -> bool:
        """
        Draw a frame.

        Returns:
            False if the user pressed 'q' or ESC, True otherwise.
        """
        if not self._running:
            return False

        self._last = snapshot
        self._check_resize()
        self._cv2.imshow(self.WINDOW_NAME, self._draw(snapshot))

        key = self._cv2.waitKey(1) & 0xFF
        if key in QUIT_KEYS:
            print("[viz] Quit requested")
            self._running = False
            return False
        return True

    def wait(self, snapshot: Optional[EncoderSnapshot] = None):
        """Keep the final frame up until 'q', ESC, or the window is closed."""
        if not self._running:
            return
        if snapshot is not None:
            self._last = snapshot

        while True:
            if self._last is not None:
                if self._check_resize():
                    self._cv2.imshow(self.WINDOW_NAME, self._draw(self._last))
            key = self._cv2.waitKey(100) & 0xFF
            if key in QUIT_KEYS:
                break
            if self._cv2.getWindowProperty(self.WINDOW_NAME, self._cv2.WND_PROP_VISIBLE) < 1:
                break

    def _grid_size(self):
        return self.height // self._cell_h, self.width // self._cell_w

    def _check_resize(self) -> bool:
        try:
            _, _, w, h = self._cv2.getWindowImageRect(self.WINDOW_NAME)
        except self._cv2.error:
            return False
        if w <= 0 or h <= 0 or (w, h) == (self.width, self.height):
            return False
        self.width, self.height = w, h
        self.renderer.resize(*self._grid_size())
        return True

    def _draw(self, snapshot: EncoderSnapshot) -> np.ndarray:
        cv2 = self._cv2
        canvas = np.zeros((self.height, self.width, 3), dtype=np.uint8)

        # Colors (BGR)
        white = (255, 255, 255)
        gray = (128, 128, 128)
        highlight = (80, 220, 255)

        lines = self.renderer.build(snapshot)
        # Column of the symbol recorded on this step
        active = -1
        if snapshot.last_symbol is not None:
            active = self.renderer.column_of(snapshot, snapshot.last_symbol)

        for y, line in enumerate(lines):
            baseline_y = (y + 1) * self._cell_h - 4
            for x, char in enumerate(line):
                if char == " ":
                    continue
                color = white
                if y == 1:
                    color = gray
                elif x // self.renderer.column_width == active:
                    color = highlight
                cv2.putText(
                    canvas, char, (x * self._cell_w, baseline_y),
                    cv2.FONT_HERSHEY_PLAIN, 1.0, color, 1
                )

        return canvas


class ConsoleDisplay:
    """
    Headless display: prints a progress line every ``interval`` steps and
    the final grid at the end.
    """

    def __init__(self, interval: int = None, column_width: int = None):
        self.interval = config.CONSOLE_INTERVAL if interval is None else interval
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        self.column_width = config.COLUMN_WIDTH if column_width is None else column_width
        self._running = False

    def start(self):
        self._running = True

    def stop(self):
        self._running = False

    def show(self, snapshot: EncoderSnapshot) -> bool:
        if not self._running:
            return False
        if snapshot.step % self.interval == 0:
            print(format_frame_line(snapshot))
        return True

    def wait(self, snapshot: Optional[EncoderSnapshot] = None):
        """Print the final grid sized to the current terminal."""
        if snapshot is None:
            return
        size = shutil.get_terminal_size((config.DEFAULT_COLS, config.DEFAULT_ROWS))
        renderer = GridRenderer(size.lines, size.columns, self.column_width)
        print(format_frame_line(snapshot))
        for line in renderer.build(snapshot):
            print(line.rstrip())


DISPLAYS = {
    "terminal": TerminalDisplay,
    "window": WindowDisplay,
    "console": ConsoleDisplay,
}


def create_display(kind: str):
    """Build a display surface by name."""
    try:
        return DISPLAYS[kind]()
    except KeyError:
        raise ValueError(f"Unknown display {kind!r}, expected one of {sorted(DISPLAYS)}")
