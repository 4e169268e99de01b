from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
from typing import List, Optional

from ..config import DecoderConfig
from .bind import DecodedInstr
from .decode_map import Resolver, resolver_for
from .errors import DecodeError, TruncatedInputError, UnknownOpcodeError
from .reader import ByteCursor

logger = logging.getLogger(__name__)


class DecoderState(enum.Enum):
    START = "start"
    DISPATCH = "dispatch"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({DecoderState.DONE, DecoderState.FAILED})


@dataclass
class DecodeSession:
    """
    One pass over a program buffer.

    `step()` performs a single transition of the decoder state machine, `run()`
    drives it to a terminal state. Every START -> DISPATCH -> START cycle moves
    the cursor forward by at least two bytes, so `run()` always terminates.
    """

    cursor: ByteCursor
    config: DecoderConfig = field(default_factory=DecoderConfig)
    state: DecoderState = DecoderState.START
    instructions: List[DecodedInstr] = field(default_factory=list)
    error: Optional[DecodeError] = None
    _resolver: Optional[Resolver] = field(default=None, init=False, repr=False)

    @classmethod
    def for_bytes(cls, data: bytes, config: Optional[DecoderConfig] = None) -> "DecodeSession":
        return cls(cursor=ByteCursor(data), config=config or DecoderConfig())

    @property
    def lines(self) -> List[str]:
        return [instr.text for instr in self.instructions]

    def step(self) -> DecoderState:
        if self.state is DecoderState.START:
            self.state = self._start()
        elif self.state is DecoderState.DISPATCH:
            self.state = self._dispatch()
        else:
            raise RuntimeError(f"Decoder already finished in state {self.state.name}")
        return self.state

    def _fail(self, error: DecodeError) -> DecoderState:
        error.partial = tuple(self.lines)
        self.error = error
        return DecoderState.FAILED

    def _start(self) -> DecoderState:
        remaining = self.cursor.remaining()
        if remaining == 0:
            return DecoderState.DONE
        if remaining == 1:
            return self._fail(TruncatedInputError(self.cursor.offset, 2, 1))

        opcode_byte = self.cursor.peek_u8()
        resolver = resolver_for(opcode_byte)
        if resolver is None:
            return self._fail(UnknownOpcodeError(self.cursor.offset, opcode_byte))
        self._resolver = resolver
        return DecoderState.DISPATCH

    def _dispatch(self) -> DecoderState:
        assert self._resolver is not None
        try:
            decoded = self._resolver(
                self.cursor, hardware_accurate=self.config.hardware_accurate
            )
        except DecodeError as exc:
            return self._fail(exc)
        finally:
            self._resolver = None

        logger.debug(
            "decoded %d byte(s) at offset %d: %s",
            decoded.length,
            decoded.offset,
            decoded.text,
        )
        self.instructions.append(decoded)
        self.cursor.advance(decoded.length)
        return DecoderState.START

    def run(self) -> List[DecodedInstr]:
        while self.state not in TERMINAL_STATES:
            self.step()
        if self.error is not None:
            logger.warning("decoding stopped: %s", self.error)
            raise self.error
        return list(self.instructions)


def decode_instructions(
    data: bytes, config: Optional[DecoderConfig] = None
) -> List[DecodedInstr]:
    """Decode `data` into instruction records, raising `DecodeError` on failure."""
    return DecodeSession.for_bytes(data, config).run()


def decode(data: bytes, config: Optional[DecoderConfig] = None) -> List[str]:
    """Decode `data` into `mov ...` lines."""
    return [instr.text for instr in decode_instructions(data, config)]
