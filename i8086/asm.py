"""Reassembles decoder listings back into machine code."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Any, List, Optional, Tuple, Union

from lark import Lark, Token, Transformer
from lark import exceptions as lark_exceptions

from .coding import Encoder
from .config import DecoderConfig
from .decoding.fields import (
    MOD_MEM,
    MOD_MEM_DISP16,
    MOD_MEM_DISP8,
    MOD_REG,
    MOV_IMM_REG_OPCODE,
    MOV_REG_MEM_OPCODE,
    RM_DIRECT_ADDRESS,
    W_WORD,
    FieldSet,
    encode_fields,
    encode_immediate_header,
)
from .decoding.tables import EFFECTIVE_ADDRESS_IDS, REGISTER_IDS

logger = logging.getLogger(__name__)

grammar_path = os.path.join(os.path.dirname(__file__), "asm.lark")
with open(grammar_path, "r") as f:
    asm_grammar = f.read()

asm_parser = Lark(asm_grammar, parser="earley", maybe_placeholders=False)

SUPPORTED_BITS = 16


class AssemblerError(Exception):
    pass


@dataclass(frozen=True)
class RegOperand:
    name: str
    reg: int
    width: int


@dataclass(frozen=True)
class MemOperand:
    rm: Optional[int] = None
    disp: Optional[int] = None
    direct: Optional[int] = None


@dataclass(frozen=True)
class ImmOperand:
    value: int


Operand = Union[RegOperand, MemOperand, ImmOperand]


@dataclass(frozen=True)
class MovNode:
    dst: Operand
    src: Operand


@dataclass(frozen=True)
class BitsNode:
    bits: int


class AsmTransformer(Transformer):
    def start(self, items: List[Any]) -> List[Union[MovNode, BitsNode]]:
        return [item for item in items if isinstance(item, (MovNode, BitsNode))]

    def bits_directive(self, items: List[Token]) -> BitsNode:
        return BitsNode(int(str(items[0]), 0))

    def mov(self, items: List[Operand]) -> MovNode:
        dst, src = items
        return MovNode(dst=dst, src=src)

    def register(self, items: List[Token]) -> RegOperand:
        name = str(items[0]).lower()
        if name not in REGISTER_IDS:
            raise AssemblerError(f"Unknown register: {name}")
        reg, width = REGISTER_IDS[name]
        return RegOperand(name=name, reg=reg, width=width)

    def immediate(self, items: List[Token]) -> ImmOperand:
        return ImmOperand(int(str(items[0]), 0))

    def memory(self, items: List[MemOperand]) -> MemOperand:
        return items[0]

    def base_address(self, items: List[Any]) -> MemOperand:
        disp: Optional[int] = None
        if items and isinstance(items[-1], int):
            disp = items.pop()
        names = [str(tok).lower() for tok in items if tok.type == "REG"]
        expr = " + ".join(names)
        if expr not in EFFECTIVE_ADDRESS_IDS:
            raise AssemblerError(f"Unsupported address expression: [{expr}]")
        return MemOperand(rm=EFFECTIVE_ADDRESS_IDS[expr], disp=disp)

    def direct_address(self, items: List[Token]) -> MemOperand:
        return MemOperand(direct=int(str(items[0]), 0))

    def displacement(self, items: List[Token]) -> int:
        sign, number = items
        value = int(str(number), 0)
        return -value if sign.type == "MINUS" else value


class Assembler:
    """
    Encodes `mov` listings using the same conventions the decoder reads.

    Register-to-register moves are emitted with D=0 (REG holds the source);
    memory forms pick D from the side the memory operand is on. Displacements
    use the shortest MOD that decodes back to the same text.
    """

    def __init__(self, config: Optional[DecoderConfig] = None) -> None:
        self.config = config or DecoderConfig()

    def parse(self, source_text: str) -> List[Union[MovNode, BitsNode]]:
        if not source_text.endswith("\n"):
            source_text += "\n"
        try:
            tree = asm_parser.parse(source_text)
            return AsmTransformer().transform(tree)
        except lark_exceptions.VisitError as e:
            if isinstance(e.orig_exc, AssemblerError):
                raise e.orig_exc from e
            raise AssemblerError(f"Parsing failed: {e}") from e
        except lark_exceptions.LarkError as e:
            raise AssemblerError(f"Parsing failed: {e}") from e

    def assemble(self, source_text: str) -> bytes:
        """Assembles the given listing into raw bytes."""
        encoder = Encoder()
        for node in self.parse(source_text):
            if isinstance(node, BitsNode):
                if node.bits != SUPPORTED_BITS:
                    raise AssemblerError(f"Unsupported mode: bits {node.bits}")
                continue
            encoder.raw(self.encode_mov(node))
        logger.debug("assembled %d bytes", len(encoder.buf))
        return bytes(encoder.buf)

    def encode_mov(self, node: MovNode) -> bytes:
        dst, src = node.dst, node.src
        if isinstance(dst, RegOperand) and isinstance(src, ImmOperand):
            return self._encode_immediate(dst, src)
        if isinstance(dst, RegOperand) and isinstance(src, RegOperand):
            self._check_widths(dst, src)
            fields = FieldSet(
                opcode=MOV_REG_MEM_OPCODE,
                direction=0,
                width=dst.width,
                mode=MOD_REG,
                reg=src.reg,
                rm=dst.reg,
            )
            return encode_fields(fields)
        if isinstance(dst, RegOperand) and isinstance(src, MemOperand):
            return self._encode_memory(dst, src, direction=1)
        if isinstance(dst, MemOperand) and isinstance(src, RegOperand):
            return self._encode_memory(src, dst, direction=0)
        raise AssemblerError(
            f"Unsupported operand combination: {type(dst).__name__}, {type(src).__name__}"
        )

    @staticmethod
    def _check_widths(a: RegOperand, b: RegOperand) -> None:
        if a.width != b.width:
            raise AssemblerError(f"Operand size mismatch: {a.name}, {b.name}")

    def _encode_immediate(self, dst: RegOperand, src: ImmOperand) -> bytes:
        limit = 0xFFFF if dst.width == W_WORD else 0xFF
        if not 0 <= src.value <= limit:
            raise AssemblerError(f"Immediate {src.value} does not fit in {dst.name}")
        fields = FieldSet(
            opcode=MOV_IMM_REG_OPCODE,
            direction=0,
            width=dst.width,
            mode=0,
            reg=dst.reg,
            rm=0,
        )
        encoder = Encoder()
        encoder.unsigned_byte(encode_immediate_header(fields))
        if dst.width == W_WORD:
            encoder.unsigned_word_le(src.value)
        else:
            encoder.unsigned_byte(src.value)
        return bytes(encoder.buf)

    def _encode_memory(self, reg: RegOperand, mem: MemOperand, direction: int) -> bytes:
        mode, rm, tail = self._memory_mode(mem)
        fields = FieldSet(
            opcode=MOV_REG_MEM_OPCODE,
            direction=direction,
            width=reg.width,
            mode=mode,
            reg=reg.reg,
            rm=rm,
        )
        return encode_fields(fields) + tail

    def _memory_mode(self, mem: MemOperand) -> Tuple[int, int, bytes]:
        encoder = Encoder()
        hardware_accurate = self.config.hardware_accurate

        if mem.direct is not None:
            if not hardware_accurate:
                raise AssemblerError(
                    "Direct addresses require hardware-accurate mode"
                )
            if not 0 <= mem.direct <= 0xFFFF:
                raise AssemblerError(f"Direct address out of range: {mem.direct}")
            encoder.unsigned_word_le(mem.direct)
            return MOD_MEM, RM_DIRECT_ADDRESS, bytes(encoder.buf)

        assert mem.rm is not None
        disp = mem.disp
        if disp is None:
            if hardware_accurate and mem.rm == RM_DIRECT_ADDRESS:
                # [bp] has no MOD=00 form on real hardware
                encoder.signed_byte(0)
                return MOD_MEM_DISP8, mem.rm, bytes(encoder.buf)
            return MOD_MEM, mem.rm, b""

        if hardware_accurate:
            if -0x80 <= disp <= 0x7F:
                encoder.signed_byte(disp)
                return MOD_MEM_DISP8, mem.rm, bytes(encoder.buf)
            if -0x8000 <= disp <= 0x7FFF:
                encoder.signed_word_le(disp)
                return MOD_MEM_DISP16, mem.rm, bytes(encoder.buf)
        else:
            if 0 <= disp <= 0xFF:
                encoder.unsigned_byte(disp)
                return MOD_MEM_DISP8, mem.rm, bytes(encoder.buf)
            if 0 <= disp <= 0xFFFF:
                encoder.unsigned_word_le(disp)
                return MOD_MEM_DISP16, mem.rm, bytes(encoder.buf)
        raise AssemblerError(f"Displacement out of range: {disp}")
