"""
Bit-field extraction for the 8086 `mov` encodings.

Register/memory form::

    byte 1             byte 2
    |1 0 0 0 1 0|D|W|  |MOD|REG  |R/M  |

Immediate-to-register form::

    |1 0 1 1|W|REG  |  data-lo  [data-hi if W=1]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

MOV_REG_MEM_OPCODE = 0b100010
MOV_IMM_REG_OPCODE = 0b1011

MOD_MEM = 0b00
MOD_MEM_DISP8 = 0b01
MOD_MEM_DISP16 = 0b10
MOD_REG = 0b11

RM_DIRECT_ADDRESS = 0b110

W_BYTE = 0
W_WORD = 1

_FIELD_BITS: Dict[str, int] = {
    "opcode": 6,
    "direction": 1,
    "width": 1,
    "mode": 2,
    "reg": 3,
    "rm": 3,
}


@dataclass(frozen=True, slots=True)
class FieldSet:
    opcode: int
    direction: int
    width: int
    mode: int
    reg: int
    rm: int

    def __post_init__(self) -> None:
        for name, bits in _FIELD_BITS.items():
            value = getattr(self, name)
            if not 0 <= value < (1 << bits):
                raise ValueError(f"{name} out of range for {bits} bits: {value}")


def is_reg_mem_move(byte1: int) -> bool:
    return (byte1 >> 2) == MOV_REG_MEM_OPCODE


def is_imm_reg_move(byte1: int) -> bool:
    return (byte1 >> 4) == MOV_IMM_REG_OPCODE


def extract_fields(byte1: int, byte2: int = 0) -> FieldSet:
    """Split a register/memory header into its fields.

    Any pair of 8-bit values yields a field set; whether the opcode is one we
    understand is decided by the caller.
    """
    return FieldSet(
        opcode=(byte1 >> 2) & 0b111111,
        direction=(byte1 >> 1) & 0b1,
        width=byte1 & 0b1,
        mode=(byte2 >> 6) & 0b11,
        reg=(byte2 >> 3) & 0b111,
        rm=byte2 & 0b111,
    )


def extract_immediate_fields(byte1: int) -> FieldSet:
    # mode and rm have no meaning for this form and stay zero
    return FieldSet(
        opcode=(byte1 >> 4) & 0b1111,
        direction=0,
        width=(byte1 >> 3) & 0b1,
        mode=0,
        reg=byte1 & 0b111,
        rm=0,
    )


def encode_fields(fields: FieldSet) -> bytes:
    """Inverse of `extract_fields`."""
    byte1 = (fields.opcode << 2) | (fields.direction << 1) | fields.width
    byte2 = (fields.mode << 6) | (fields.reg << 3) | fields.rm
    return bytes([byte1, byte2])


def encode_immediate_header(fields: FieldSet) -> int:
    return (fields.opcode << 4) | (fields.width << 3) | fields.reg
