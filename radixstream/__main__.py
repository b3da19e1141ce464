"""
Entry point for radixstream.

Usage:
    python -m radixstream notes.txt

Options:
    --zero-streaming  Keep every column the same length (placeholders shown as 0)
    --sparse          Only record real occurrences
    --speed MS        Milliseconds between frames
    --keep-case       Do not fold ASCII letters to lowercase
    --display KIND    terminal (default), window, or console
    --yes             Start encoding without waiting for Enter

Any of the input path, zero streaming, or speed that is not given on the
command line is asked for interactively.
"""

import argparse
import sys
import time
import traceback
from dataclasses import dataclass

from . import config
from .driver import StreamDriver
from .render import symbol_label
from .source import ByteSource, ResourceOpenError
from .viz import DISPLAYS, create_display


@dataclass(frozen=True)
class SessionSettings:
    """Settings collected once per session."""

    input_path: str
    zero_streaming: bool
    update_speed: int


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Gap encoder - shows how far apart each symbol of a text recurs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m radixstream notes.txt
    python -m radixstream notes.txt --zero-streaming --speed 20
    python -m radixstream notes.txt --display console --sparse --yes
    cat notes.txt | python -m radixstream - --display console --yes
        """
    )

    parser.add_argument(
        "input_path",
        nargs="?",
        help="Path of the file to encode ('-' reads stdin)"
    )

    streaming = parser.add_mutually_exclusive_group()
    streaming.add_argument(
        "--zero-streaming", "-z",
        dest="zero_streaming",
        action="store_const",
        const=True,
        default=None,
        help="Append placeholders so every column has one entry per step"
    )
    streaming.add_argument(
        "--sparse",
        dest="zero_streaming",
        action="store_const",
        const=False,
        help="Only record real occurrences"
    )

    parser.add_argument(
        "--speed", "-s",
        type=int,
        help="Milliseconds between frames"
    )

    parser.add_argument(
        "--keep-case",
        action="store_true",
        help="Treat 'A' and 'a' as different symbols"
    )

    parser.add_argument(
        "--display", "-d",
        choices=sorted(DISPLAYS),
        default="terminal",
        help="Where to draw the grid (default: terminal)"
    )

    parser.add_argument(
        "--line-capacity",
        type=int,
        help=f"Max entries kept per symbol (default: {config.LINE_CAPACITY})"
    )

    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Start encoding without waiting for Enter"
    )

    args = parser.parse_args(argv)
    if args.speed is not None and args.speed <= 0:
        parser.error("--speed must be a positive number of milliseconds")
    if args.line_capacity is not None and args.line_capacity <= 0:
        parser.error("--line-capacity must be positive")
    return args


def prompt_yes_no(question: str, default: bool = False) -> bool:
    """Ask a y/n question. Anything but y/Y means no."""
    answer = input(question).strip()
    if not answer:
        return default
    return answer[0] in ("y", "Y")


def prompt_speed(default: int) -> int:
    """Ask for a positive update speed, re-asking on bad input."""
    while True:
        answer = input(f"Enter update speed in milliseconds [{default}]: ").strip()
        if not answer:
            return default
        try:
            speed = int(answer)
        except ValueError:
            print(f"[main] '{answer}' is not a whole number")
            continue
        if speed > 0:
            return speed
        print("[main] Update speed must be positive")


def collect_settings(args, interactive: bool) -> SessionSettings:
    """
    Fill in settings missing from the command line.

    Prompts when ``interactive``; otherwise falls back to defaults. The input
    path has no default.
    """
    input_path = args.input_path
    if input_path is None:
        if not interactive:
            raise ValueError("No input path given")
        input_path = input("Enter the path to the text file: ").strip()

    zero_streaming = args.zero_streaming
    if zero_streaming is None:
        zero_streaming = prompt_yes_no("Allow 0 streaming? (y/n): ") if interactive else False

    update_speed = args.speed
    if update_speed is None:
        update_speed = prompt_speed(config.DEFAULT_UPDATE_SPEED_MS) if interactive \
            else config.DEFAULT_UPDATE_SPEED_MS

    return SessionSettings(
        input_path=input_path,
        zero_streaming=zero_streaming,
        update_speed=update_speed
    )


def print_summary(driver: StreamDriver, elapsed: float, top: int = 10):
    """Print session statistics."""
    print()
    print("[main] Session Summary:")

    if driver.encoder is None:
        print("  Nothing encoded")
        return

    stats = driver.encoder.get_stats()
    rate = stats["steps"] / elapsed if elapsed > 0 else 0

    print(f"  Total steps: {stats['steps']}")
    print(f"  Distinct symbols: {stats['symbols']}")
    print(f"  Duration: {elapsed:.1f}s")
    print(f"  Average rate: {rate:.1f} symbols/s")
    if driver.dropped:
        print(f"  Dropped symbols: {driver.dropped}")
    if stats["overflowed"]:
        labels = "".join(symbol_label(s) for s in stats["overflowed"])
        print(f"  Full lines: {len(stats['overflowed'])} ({labels!r})")

    ranked = sorted(
        stats["per_symbol"].items(),
        key=lambda item: item[1]["occurrences"],
        reverse=True
    )
    if ranked:
        print("  Most frequent symbols:")
    for symbol, info in ranked[:top]:
        print(
            f"    {symbol_label(symbol)!r:5} x{info['occurrences']:<6d} "
            f"mean gap {info['mean_gap']:8.2f}  max gap {info['max_gap']}"
        )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    print("=" * 60)
    print("  RADIXSTREAM GAP ENCODER")
    print("=" * 60)
    print()

    config.print_config()
    print()

    reads_stdin = args.input_path == ByteSource.STDIN
    if reads_stdin and args.display == "terminal":
        print("[main] Reading stdin needs --display console or --display window")
        return 2

    interactive = sys.stdin.isatty() and not reads_stdin

    try:
        settings = collect_settings(args, interactive)
    except ValueError as e:
        print(f"[main] {e}")
        return 2
    except (EOFError, KeyboardInterrupt):
        print("\n[main] Cancelled")
        return 1

    print(f"[main] Input: {settings.input_path}")
    print(f"[main] Zero streaming: {'on' if settings.zero_streaming else 'off'}")
    print(f"[main] Update speed: {settings.update_speed}ms")
    print(f"[main] Case folding: {'off' if args.keep_case else 'on'}")
    print()

    source = ByteSource(settings.input_path)
    try:
        source.check()
    except ResourceOpenError as e:
        print(f"[main] {e}")
        return 1

    # Warnings raised while curses owns the screen are printed after it closes
    pending_warnings = []
    warn = pending_warnings.append if args.display == "terminal" else None

    try:
        driver = StreamDriver(
            source,
            zero_streaming=settings.zero_streaming,
            update_speed=settings.update_speed,
            fold_case=not args.keep_case,
            line_capacity=args.line_capacity,
            warn=warn
        )
        display = create_display(args.display)
    except ValueError as e:
        print(f"[main] {e}")
        return 2

    if interactive and not args.yes:
        try:
            input("Press Enter to start encoding...")
        except (EOFError, KeyboardInterrupt):
            print("\n[main] Cancelled")
            return 1

    status = 0
    interrupted = False
    start_time = time.time()

    try:
        display.start()
        last = driver.run(display)
        display.wait(last)

    except KeyboardInterrupt:
        interrupted = True

    except ResourceOpenError as e:
        pending_warnings.append(f"[main] {e}")
        status = 1

    except Exception as e:
        pending_warnings.append(f"[main] Error: {e}")
        pending_warnings.append(traceback.format_exc())
        status = 1

    finally:
        display.stop()

        if interrupted:
            print("\n[main] Interrupted by user")
        for message in pending_warnings:
            print(message)

        print_summary(driver, time.time() - start_time)

    return status


if __name__ == "__main__":
    sys.exit(main())
