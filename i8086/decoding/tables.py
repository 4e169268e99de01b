from __future__ import annotations

from typing import Dict, Tuple

# The W=0 and W=1 columns name different physical registers: id 4 is AH as a
# byte register but SP as a word register.
#
# | REG | W=0 | W=1 |
# |-----+-----+-----|
# | 000 | AL  | AX  |
# | 001 | CL  | CX  |
# | 010 | DL  | DX  |
# | 011 | BL  | BX  |
# | 100 | AH  | SP  |
# | 101 | CH  | BP  |
# | 110 | DH  | SI  |
# | 111 | BH  | DI  |
REG_BYTE_NAMES: Tuple[str, ...] = ("al", "cl", "dl", "bl", "ah", "ch", "dh", "bh")
REG_WORD_NAMES: Tuple[str, ...] = ("ax", "cx", "dx", "bx", "sp", "bp", "si", "di")
REG_NAMES_W_TAB: Tuple[Tuple[str, ...], Tuple[str, ...]] = (
    REG_BYTE_NAMES,
    REG_WORD_NAMES,
)

# Entry 6 stays "bp" for MOD=00 too; the direct-address reading of that slot is
# only applied when hardware-accurate decoding is requested.
EFFECTIVE_ADDRESS_TAB: Tuple[str, ...] = (
    "bx + si",
    "bx + di",
    "bp + si",
    "bp + di",
    "si",
    "di",
    "bp",
    "bx",
)


def register_name(reg: int, width: int) -> str:
    return REG_NAMES_W_TAB[width][reg]


def effective_address(rm: int) -> str:
    return EFFECTIVE_ADDRESS_TAB[rm]


# Reverse lookups used by the assembler.
REGISTER_IDS: Dict[str, Tuple[int, int]] = {
    name: (reg, width)
    for width, names in enumerate(REG_NAMES_W_TAB)
    for reg, name in enumerate(names)
}

EFFECTIVE_ADDRESS_IDS: Dict[str, int] = {
    expr: rm for rm, expr in enumerate(EFFECTIVE_ADDRESS_TAB)
}
