"""
Decoder for the 8086 register/memory and immediate-to-register `mov` encodings.

`decode()` turns a complete byte buffer into assembly lines; the pieces it is
built from (cursor, field extraction, lookup tables, per-variant resolvers and
the driver state machine) are exported for callers that need the records.
"""

from .bind import (  # noqa: F401
    DecodedInstr,
    Disp16,
    Disp8,
    Imm16,
    Imm8,
    Variant,
)
from .driver import (  # noqa: F401
    DecodeSession,
    DecoderState,
    decode,
    decode_instructions,
)
from .errors import DecodeError, TruncatedInputError, UnknownOpcodeError  # noqa: F401
from .fields import FieldSet, encode_fields, extract_fields  # noqa: F401
from .reader import ByteCursor  # noqa: F401
from . import decode_map, tables  # noqa: F401

__all__ = [
    "ByteCursor",
    "DecodeError",
    "DecodeSession",
    "DecodedInstr",
    "DecoderState",
    "Disp16",
    "Disp8",
    "FieldSet",
    "Imm16",
    "Imm8",
    "TruncatedInputError",
    "UnknownOpcodeError",
    "Variant",
    "decode",
    "decode_instructions",
    "decode_map",
    "encode_fields",
    "extract_fields",
    "tables",
]
