"""
Stream driver: feeds source bytes through the queue into the encoder.

Computation and presentation are separate stages. ``snapshots()`` is a
generator of immutable encoder snapshots with no display dependency;
``run()`` consumes it, showing each snapshot and sleeping between frames.
"""

import time
from typing import Callable, Generator, Iterable, Optional

from . import config
from .buffer import BufferEmpty, BufferFull, SymbolQueue
from .encoder import EncoderSnapshot, GapEncoder, LineOverflowError


class StreamDriver:
    """
    Drives one encoding session per iteration of ``snapshots()``.

    Every byte is enqueued and then drained immediately, so the queue never
    holds more than one pending symbol. Batching input would change that.

    Usage:
        driver = StreamDriver(ByteSource("notes.txt"), zero_streaming=True)

        # Headless
        for snapshot in driver.snapshots():
            inspect(snapshot)

        # With a display, sleeping update_speed ms between frames
        driver.run(display)
    """

    def __init__(
        self,
        source: Iterable[int],
        zero_streaming: bool = False,
        update_speed: int = None,
        fold_case: bool = True,
        queue_capacity: int = None,
        line_capacity: int = None,
        warn: Callable[[str], None] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.source = source
        self.zero_streaming = zero_streaming
        if update_speed is None:
            update_speed = config.DEFAULT_UPDATE_SPEED_MS
        if update_speed <= 0:
            raise ValueError(f"update_speed must be a positive number of ms, got {update_speed}")
        self.update_speed = update_speed
        self.fold_case = fold_case
        self.queue_capacity = config.QUEUE_CAPACITY if queue_capacity is None else queue_capacity
        self.line_capacity = config.LINE_CAPACITY if line_capacity is None else line_capacity
        if self.queue_capacity <= 0 or self.line_capacity <= 0:
            raise ValueError(
                f"capacities must be positive, got queue={self.queue_capacity} "
                f"line={self.line_capacity}"
            )

        self._warn = warn or print
        self._sleep = sleep

        self.encoder: Optional[GapEncoder] = None
        self.queue: Optional[SymbolQueue] = None
        self.dropped = 0

    def snapshots(self) -> Generator[EncoderSnapshot, None, None]:
        """
        Encode the source from the beginning, one snapshot per recorded symbol.

        Each call starts a fresh session with its own queue and encoder.
        """
        queue = SymbolQueue(self.queue_capacity, fold_case=self.fold_case)
        encoder = GapEncoder(
            zero_streaming=self.zero_streaming,
            line_capacity=self.line_capacity
        )
        self.queue = queue
        self.encoder = encoder
        self.dropped = 0

        for symbol in self.source:
            try:
                queue.enqueue(symbol)
            except BufferFull as e:
                self.dropped += 1
                self._warn(f"[driver] Warning: {e}, symbol dropped")

            while True:
                try:
                    pending = queue.dequeue()
                except BufferEmpty:
                    break

                try:
                    encoder.record(pending)
                except LineOverflowError as e:
                    for overflowed in e.symbols:
                        self._warn(
                            f"[driver] Warning: line for {chr(overflowed)!r} is full "
                            f"({e.capacity} entries) at step {e.step}, no further entries kept"
                        )

                yield encoder.snapshot()

    def run(self, display) -> Optional[EncoderSnapshot]:
        """
        Show every snapshot on ``display`` with ``update_speed`` ms between frames.

        Args:
            display: Object with ``show(snapshot) -> bool``; False stops the run

        Returns:
            The last snapshot shown, or None if the source was empty.
        """
        delay = self.update_speed / 1000.0
        last = None

        for snapshot in self.snapshots():
            last = snapshot
            if not display.show(snapshot):
                self._warn("[driver] Display closed, stopping")
                break
            self._sleep(delay)

        return last
