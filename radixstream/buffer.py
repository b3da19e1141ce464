"""
Bounded FIFO buffer of raw symbols.

Decouples reading bytes from the source and recording them in the encoder.
Symbols are byte values (0-255). With case folding on, ASCII uppercase
letters are lowered on the way in and the original case is lost.
"""

from typing import List

from . import config


class QueueError(Exception):
    """Raised when symbol queue operations fail."""
    pass


class BufferFull(QueueError):
    """Raised by enqueue when every slot is taken."""
    pass


class BufferEmpty(QueueError):
    """Raised by dequeue when no symbol is pending."""
    pass


def fold_symbol(symbol: int) -> int:
    """Lowercase an ASCII letter byte, leave every other byte alone."""
    if 0x41 <= symbol <= 0x5A:
        return symbol + 0x20
    return symbol


class SymbolQueue:
    """
    Circular buffer of byte symbols.

    Usage:
        queue = SymbolQueue(capacity=256)
        queue.enqueue(ord('A'))

        while not queue.is_empty():
            symbol = queue.dequeue()  # 97, folded to 'a'
    """

    def __init__(self, capacity: int = None, fold_case: bool = True):
        self.capacity = config.QUEUE_CAPACITY if capacity is None else capacity
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        self.fold_case = fold_case

        self._symbols: List[int] = [0] * self.capacity
        self._head = 0
        self._tail = 0
        self._count = 0

    def enqueue(self, symbol: int):
        """
        Append a symbol at the tail.

        Args:
            symbol: Byte value 0-255

        Raises:
            BufferFull: If the queue already holds ``capacity`` symbols.
        """
        if not 0 <= symbol < config.SYMBOL_RANGE:
            raise ValueError(f"symbol must be a byte value, got {symbol!r}")

        if self._count == self.capacity:
            raise BufferFull(f"Buffer is full ({self.capacity} symbols), cannot add {symbol}")

        if self.fold_case:
            symbol = fold_symbol(symbol)

        self._symbols[self._tail] = symbol
        self._tail = (self._tail + 1) % self.capacity
        self._count += 1

    def dequeue(self) -> int:
        """
        Remove and return the symbol at the head.

        Raises:
            BufferEmpty: If nothing is pending.
        """
        if self._count == 0:
            raise BufferEmpty("Buffer is empty")

        symbol = self._symbols[self._head]
        self._head = (self._head + 1) % self.capacity
        self._count -= 1
        return symbol

    def is_full(self) -> bool:
        return self._count == self.capacity

    def is_empty(self) -> bool:
        return self._count == 0

    @property
    def head(self) -> int:
        return self._head

    @property
    def tail(self) -> int:
        return self._tail

    def __len__(self) -> int:
        return self._count
