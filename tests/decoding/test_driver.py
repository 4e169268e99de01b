import logging

import pytest

from i8086.config import DecoderConfig
from i8086.decoding import (
    DecodeSession,
    DecoderState,
    TruncatedInputError,
    UnknownOpcodeError,
    decode,
    decode_instructions,
)


def test_empty_buffer_decodes_to_nothing() -> None:
    assert decode(b"") == []


def test_single_byte_is_trailing_byte() -> None:
    with pytest.raises(TruncatedInputError, match="Trailing byte") as info:
        decode(bytes([0x89]))
    assert info.value.offset == 0
    assert info.value.partial == ()


def test_concrete_programs() -> None:
    assert decode(bytes([0b10001001, 0b11011001])) == ["mov cx, bx"]
    assert decode(bytes([0b10001010, 0b00000000])) == ["mov al, [bx + si]"]
    assert decode(bytes([0b10111000, 0b00000001, 0b00000000])) == ["mov ax, 1"]


def test_mixed_program() -> None:
    data = bytes(
        [
            0x89, 0xD9,              # mov cx, bx
            0xB1, 0x0C,              # mov cl, 12
            0x8A, 0x80, 0x87, 0x13,  # mov al, [bx + si + 4999]
            0x8B, 0x41, 0xDB,        # mov ax, [bx + di + 219]
            0xBA, 0x6C, 0x0F,        # mov dx, 3948
            0x89, 0x18,              # mov [bx + si], bx
        ]
    )
    assert decode(data) == [
        "mov cx, bx",
        "mov cl, 12",
        "mov al, [bx + si + 4999]",
        "mov ax, [bx + di + 219]",
        "mov dx, 3948",
        "mov [bx + si], bx",
    ]


def test_instruction_records_cover_buffer() -> None:
    data = bytes([0x89, 0xD9, 0x8A, 0x80, 0x87, 0x13, 0xB5, 0xF4])
    instrs = decode_instructions(data)
    assert [i.offset for i in instrs] == [0, 2, 6]
    assert [i.length for i in instrs] == [2, 4, 2]
    assert sum(i.length for i in instrs) == len(data)


def test_unknown_opcode_reports_bit_pattern() -> None:
    with pytest.raises(UnknownOpcodeError) as info:
        decode(bytes([0x89, 0xD9, 0x90, 0x90]))
    err = info.value
    assert err.opcode_byte == 0x90
    assert err.offset == 2
    assert "10010000" in str(err)
    assert err.partial == ("mov cx, bx",)


def test_trailing_byte_keeps_partial_lines() -> None:
    with pytest.raises(TruncatedInputError) as info:
        decode(bytes([0x89, 0xD9, 0xB1, 0x0C, 0x89]))
    assert info.value.offset == 4
    assert info.value.partial == ("mov cx, bx", "mov cl, 12")


def test_truncated_displacement() -> None:
    with pytest.raises(TruncatedInputError) as info:
        decode(bytes([0x8B, 0x41]))
    assert info.value.needed == 3
    assert info.value.available == 2
    assert info.value.partial == ()


def test_truncated_word_immediate() -> None:
    with pytest.raises(TruncatedInputError):
        decode(bytes([0xB8, 0x01]))


def test_literal_rm6_leaves_address_bytes_undecoded() -> None:
    # The two address bytes are read as the next opcode in literal mode.
    with pytest.raises(UnknownOpcodeError) as info:
        decode(bytes([0x8B, 0x2E, 0x05, 0x00]))
    assert info.value.partial == ("mov bp, [bp]",)


def test_hardware_accurate_config() -> None:
    config = DecoderConfig(hardware_accurate=True)
    assert decode(bytes([0x8B, 0x2E, 0x05, 0x00]), config) == ["mov bp, [5]"]
    assert decode(bytes([0x8B, 0x41, 0xDB]), config) == ["mov ax, [bx + di - 37]"]


def test_session_steps_through_states() -> None:
    session = DecodeSession.for_bytes(bytes([0x89, 0xD9]))
    assert session.state is DecoderState.START
    assert session.step() is DecoderState.DISPATCH
    assert session.cursor.offset == 0
    assert session.step() is DecoderState.START
    assert session.cursor.offset == 2
    assert session.lines == ["mov cx, bx"]
    assert session.step() is DecoderState.DONE
    with pytest.raises(RuntimeError):
        session.step()


def test_session_failure_state() -> None:
    session = DecodeSession.for_bytes(bytes([0x00, 0x00]))
    assert session.step() is DecoderState.FAILED
    assert isinstance(session.error, UnknownOpcodeError)
    with pytest.raises(UnknownOpcodeError):
        session.run()


def test_decoded_lines_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="i8086.decoding.driver"):
        decode(bytes([0x89, 0xD9]))
    assert "mov cx, bx" in caplog.text


def test_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="i8086.decoding.driver"):
        with pytest.raises(UnknownOpcodeError):
            decode(bytes([0x00, 0x00]))
    assert "Unknown opcode" in caplog.text
