"""
Configuration for radixstream.

Session settings (input path, zero streaming, update speed) come from the
command line or the interactive prompts only. The environment tunes the
defaults and limits below.

Environment variables:
  RADIXSTREAM_QUEUE_CAPACITY   - symbol queue slots (default: 256)
  RADIXSTREAM_LINE_CAPACITY    - max entries per symbol line (default: 2000)
  RADIXSTREAM_UPDATE_SPEED     - update speed offered by the prompt, ms (default: 100)
  RADIXSTREAM_COLUMN_WIDTH     - characters per symbol column (default: 4)
  RADIXSTREAM_WINDOW_WIDTH     - OpenCV window width in pixels (default: 1200)
  RADIXSTREAM_WINDOW_HEIGHT    - OpenCV window height in pixels (default: 600)
  RADIXSTREAM_CONSOLE_INTERVAL - steps between headless progress lines (default: 50)
"""

import os


def _env_int(name: str, default: int) -> int:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        print(f"[config] Warning: {name}={val} invalid, using default={default}")
        return default


# Core limits
QUEUE_CAPACITY = _env_int("RADIXSTREAM_QUEUE_CAPACITY", 256)
LINE_CAPACITY = _env_int("RADIXSTREAM_LINE_CAPACITY", 2000)

# Symbols are single bytes
SYMBOL_RANGE = 256

# Playback
DEFAULT_UPDATE_SPEED_MS = _env_int("RADIXSTREAM_UPDATE_SPEED", 100)

# Display
COLUMN_WIDTH = _env_int("RADIXSTREAM_COLUMN_WIDTH", 4)
WINDOW_WIDTH = _env_int("RADIXSTREAM_WINDOW_WIDTH", 1200)
WINDOW_HEIGHT = _env_int("RADIXSTREAM_WINDOW_HEIGHT", 600)
CONSOLE_INTERVAL = _env_int("RADIXSTREAM_CONSOLE_INTERVAL", 50)

# Fallback terminal size when the surface cannot report one
DEFAULT_ROWS = 24
DEFAULT_COLS = 80


def print_config():
    """Print current configuration."""
    print("[config] Settings:")
    print(f"  QUEUE_CAPACITY       = {QUEUE_CAPACITY}")
    print(f"  LINE_CAPACITY        = {LINE_CAPACITY}")
    print(f"  DEFAULT_UPDATE_SPEED = {DEFAULT_UPDATE_SPEED_MS}ms")
    print(f"  COLUMN_WIDTH         = {COLUMN_WIDTH}")
    print(f"  WINDOW               = {WINDOW_WIDTH}x{WINDOW_HEIGHT}")
    print(f"  CONSOLE_INTERVAL     = {CONSOLE_INTERVAL} steps")
