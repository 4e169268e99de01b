from __future__ import annotations

from typing import Tuple


class DecodeError(Exception):
    """Base class for fatal decoding failures.

    `partial` holds the lines decoded before the failure; the driver fills it
    in before re-raising so callers can keep them if they want.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset
        self.partial: Tuple[str, ...] = ()


class TruncatedInputError(DecodeError):
    """The buffer ends in the middle of an instruction."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        if available == 1 and needed == 2:
            message = f"Trailing byte found at offset {offset}"
        else:
            message = (
                f"Truncated instruction at offset {offset}: "
                f"need {needed} bytes, have {available} remaining"
            )
        super().__init__(message, offset)
        self.needed = needed
        self.available = available


class UnknownOpcodeError(DecodeError):
    def __init__(self, offset: int, opcode_byte: int) -> None:
        super().__init__(
            f"Unknown opcode: {opcode_byte:08b} at offset {offset}", offset
        )
        self.opcode_byte = opcode_byte
