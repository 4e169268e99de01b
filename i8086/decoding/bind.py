from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .fields import FieldSet


class Variant(str, Enum):
    """Encoding variants of the `mov` family."""

    REGISTER = "register"
    MEMORY = "memory"
    MEMORY_DISP8 = "memory_disp8"
    MEMORY_DISP16 = "memory_disp16"
    DIRECT_ADDRESS = "direct_address"
    IMMEDIATE = "immediate"


@dataclass(frozen=True, slots=True)
class Imm8:
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"Imm8 out of range: {self.value:#x}")


@dataclass(frozen=True, slots=True)
class Imm16:
    lo: int
    hi: int

    def __post_init__(self) -> None:
        for label, val in (("lo", self.lo), ("hi", self.hi)):
            if not 0 <= val <= 0xFF:
                raise ValueError(f"Imm16 {label} byte out of range: {val:#x}")

    @property
    def value(self) -> int:
        return (self.hi << 8) | self.lo


@dataclass(frozen=True, slots=True)
class Disp8:
    value: int  # signed

    def __post_init__(self) -> None:
        if not -0x80 <= self.value <= 0x7F:
            raise ValueError(f"Disp8 out of range: {self.value}")


@dataclass(frozen=True, slots=True)
class Disp16:
    value: int  # signed

    def __post_init__(self) -> None:
        if not -0x8000 <= self.value <= 0x7FFF:
            raise ValueError(f"Disp16 out of range: {self.value}")


@dataclass(frozen=True, slots=True)
class DecodedInstr:
    offset: int
    length: int
    text: str
    variant: Variant
    fields: FieldSet
    binds: Dict[str, object] = field(default_factory=dict)

    @property
    def displacement(self) -> Optional[int]:
        disp = self.binds.get("disp")
        return None if disp is None else disp.value  # type: ignore[attr-defined]
