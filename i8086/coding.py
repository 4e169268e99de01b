# based on https://github.com/whitequark/binja-avnera/blob/main/mc/coding.py
"""Little-endian byte packing used by the assembler."""

import struct


class Encoder:
    def __init__(self) -> None:
        self.buf = bytearray()

    def _pack(self, fmt: str, item: int) -> None:
        offset = len(self.buf)
        self.buf += b"\x00" * struct.calcsize(fmt)
        fmt = "<" + fmt if fmt[0] != ">" else fmt
        struct.pack_into(fmt, self.buf, offset, item)

    def unsigned_byte(self, value: int) -> None:
        self._pack("B", value)

    def signed_byte(self, value: int) -> None:
        self._pack("b", value)

    def unsigned_word_le(self, value: int) -> None:
        self._pack("H", value)

    def signed_word_le(self, value: int) -> None:
        self._pack("h", value)

    def raw(self, data: bytes) -> None:
        self.buf += data
