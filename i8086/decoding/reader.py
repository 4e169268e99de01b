from __future__ import annotations

from dataclasses import dataclass

from .errors import TruncatedInputError


@dataclass
class ByteCursor:
    """
    Forward-only reader over a complete program buffer.

    Resolvers peek at bytes relative to `offset`; only the driver moves the
    cursor, once a resolver has reported how many bytes it consumed.
    """

    data: bytes
    offset: int = 0

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if not 0 <= self.offset <= len(self.data):
            raise ValueError(
                f"Cursor offset {self.offset} outside buffer of {len(self.data)} bytes"
            )

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset == len(self.data)

    def require(self, count: int) -> None:
        if count > self.remaining():
            raise TruncatedInputError(self.offset, count, self.remaining())

    def peek_u8(self, index: int = 0) -> int:
        self.require(index + 1)
        return self.data[self.offset + index]

    def peek_u16_le(self, index: int) -> int:
        self.require(index + 2)
        lo = self.data[self.offset + index]
        hi = self.data[self.offset + index + 1]
        return (hi << 8) | lo

    def advance(self, count: int) -> None:
        if count <= 0:
            raise ValueError(f"Cursor must advance by a positive count, got {count}")
        self.require(count)
        self.offset += count
