import struct

import pytest

from .coding import Encoder


def test_encoder() -> None:
    encoder = Encoder()
    encoder.unsigned_byte(0x89)
    encoder.unsigned_word_le(0x1387)
    encoder.signed_byte(-37)
    encoder.signed_word_le(-300)
    encoder.raw(b"\xb8")
    assert encoder.buf == bytearray([0x89, 0x87, 0x13, 0xDB, 0xD4, 0xFE, 0xB8])


def test_encoder_value_too_large() -> None:
    encoder = Encoder()
    with pytest.raises(struct.error):
        encoder.unsigned_byte(256)
    with pytest.raises(struct.error):
        encoder.signed_byte(128)
