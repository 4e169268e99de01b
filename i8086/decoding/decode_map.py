from __future__ import annotations

from typing import Callable, Optional, Tuple

from .bind import DecodedInstr, Disp16, Disp8, Imm16, Imm8, Variant
from .fields import (
    RM_DIRECT_ADDRESS,
    W_WORD,
    FieldSet,
    extract_fields,
    extract_immediate_fields,
    is_imm_reg_move,
    is_reg_mem_move,
)
from .reader import ByteCursor
from .tables import effective_address, register_name

Resolver = Callable[..., DecodedInstr]

_HEADER_LEN = 2


def _read_imm8(cursor: ByteCursor, index: int) -> Imm8:
    return Imm8(cursor.peek_u8(index))


def _read_imm16(cursor: ByteCursor, index: int) -> Imm16:
    return Imm16(cursor.peek_u8(index), cursor.peek_u8(index + 1))


def _read_disp8(cursor: ByteCursor, index: int) -> Disp8:
    raw = cursor.peek_u8(index)
    return Disp8(raw - 0x100 if raw & 0x80 else raw)


def _read_disp16(cursor: ByteCursor, index: int) -> Disp16:
    raw = cursor.peek_u16_le(index)
    return Disp16(raw - 0x10000 if raw & 0x8000 else raw)


def _format_mov(dst: str, src: str) -> str:
    return f"mov {dst}, {src}"


def _format_memory(base: str, disp: Optional[int] = None, *, keep_zero: bool = True) -> str:
    if disp is None or (disp == 0 and not keep_zero):
        return f"[{base}]"
    if disp < 0:
        return f"[{base} - {-disp}]"
    return f"[{base} + {disp}]"


def _order(fields: FieldSet, reg_operand: str, rm_operand: str) -> Tuple[str, str]:
    # D=1: REG is the destination
    if fields.direction == 1:
        return reg_operand, rm_operand
    return rm_operand, reg_operand


def _reg_mem_instr(
    cursor: ByteCursor,
    fields: FieldSet,
    variant: Variant,
    length: int,
    rm_operand: str,
    **binds: object,
) -> DecodedInstr:
    reg_operand = register_name(fields.reg, fields.width)
    dst, src = _order(fields, reg_operand, rm_operand)
    return DecodedInstr(
        offset=cursor.offset,
        length=length,
        text=_format_mov(dst, src),
        variant=variant,
        fields=fields,
        binds=dict(binds),
    )


def _dec_register_mode(
    cursor: ByteCursor, fields: FieldSet, hardware_accurate: bool
) -> DecodedInstr:
    rm_operand = register_name(fields.rm, fields.width)
    return _reg_mem_instr(cursor, fields, Variant.REGISTER, _HEADER_LEN, rm_operand)


def _dec_memory_mode(
    cursor: ByteCursor, fields: FieldSet, hardware_accurate: bool
) -> DecodedInstr:
    if hardware_accurate and fields.rm == RM_DIRECT_ADDRESS:
        length = _HEADER_LEN + 2
        cursor.require(length)
        addr = _read_imm16(cursor, _HEADER_LEN)
        return _reg_mem_instr(
            cursor,
            fields,
            Variant.DIRECT_ADDRESS,
            length,
            f"[{addr.value}]",
            addr=addr,
        )

    rm_operand = _format_memory(effective_address(fields.rm))
    return _reg_mem_instr(cursor, fields, Variant.MEMORY, _HEADER_LEN, rm_operand)


def _dec_memory_disp8(
    cursor: ByteCursor, fields: FieldSet, hardware_accurate: bool
) -> DecodedInstr:
    length = _HEADER_LEN + 1
    cursor.require(length)
    disp: object
    if hardware_accurate:
        disp = _read_disp8(cursor, _HEADER_LEN)
    else:
        disp = _read_imm8(cursor, _HEADER_LEN)
    rm_operand = _format_memory(
        effective_address(fields.rm),
        disp.value,  # type: ignore[attr-defined]
        keep_zero=not hardware_accurate,
    )
    return _reg_mem_instr(
        cursor, fields, Variant.MEMORY_DISP8, length, rm_operand, disp=disp
    )


def _dec_memory_disp16(
    cursor: ByteCursor, fields: FieldSet, hardware_accurate: bool
) -> DecodedInstr:
    length = _HEADER_LEN + 2
    cursor.require(length)
    disp: object
    if hardware_accurate:
        disp = _read_disp16(cursor, _HEADER_LEN)
    else:
        disp = _read_imm16(cursor, _HEADER_LEN)
    rm_operand = _format_memory(
        effective_address(fields.rm),
        disp.value,  # type: ignore[attr-defined]
        keep_zero=not hardware_accurate,
    )
    return _reg_mem_instr(
        cursor, fields, Variant.MEMORY_DISP16, length, rm_operand, disp=disp
    )


# Indexed by MOD.
_MODE_RESOLVERS: Tuple[Callable[[ByteCursor, FieldSet, bool], DecodedInstr], ...] = (
    _dec_memory_mode,
    _dec_memory_disp8,
    _dec_memory_disp16,
    _dec_register_mode,
)


def decode_reg_mem_move(
    cursor: ByteCursor, *, hardware_accurate: bool = False
) -> DecodedInstr:
    """Decode `100010dw | mod reg r/m | [disp-lo] | [disp-hi]` at the cursor."""
    cursor.require(_HEADER_LEN)
    fields = extract_fields(cursor.peek_u8(0), cursor.peek_u8(1))
    return _MODE_RESOLVERS[fields.mode](cursor, fields, hardware_accurate)


def decode_imm_reg_move(
    cursor: ByteCursor, *, hardware_accurate: bool = False
) -> DecodedInstr:
    """Decode `1011 w reg | data-lo | [data-hi]` at the cursor.

    Immediates are unsigned in both decoding modes.
    """
    fields = extract_immediate_fields(cursor.peek_u8(0))
    imm: object
    if fields.width == W_WORD:
        length = 3
        cursor.require(length)
        imm = _read_imm16(cursor, 1)
    else:
        length = 2
        cursor.require(length)
        imm = _read_imm8(cursor, 1)
    dst = register_name(fields.reg, fields.width)
    return DecodedInstr(
        offset=cursor.offset,
        length=length,
        text=_format_mov(dst, str(imm.value)),  # type: ignore[attr-defined]
        variant=Variant.IMMEDIATE,
        fields=fields,
        binds={"imm": imm},
    )


def resolver_for(opcode_byte: int) -> Optional[Resolver]:
    """Pick the resolver for a leading byte, or None if it is not a `mov`."""
    if is_reg_mem_move(opcode_byte):
        return decode_reg_mem_move
    if is_imm_reg_move(opcode_byte):
        return decode_imm_reg_move
    return None
