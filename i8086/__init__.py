"""8086 `mov` instruction decoder."""

__version__ = "0.1.0"

from .config import DecoderConfig, load_decoder_config  # noqa: E402
from .decoding import (  # noqa: E402
    DecodeError,
    TruncatedInputError,
    UnknownOpcodeError,
    decode,
    decode_instructions,
)

__all__ = [
    "DecodeError",
    "DecoderConfig",
    "TruncatedInputError",
    "UnknownOpcodeError",
    "decode",
    "decode_instructions",
    "load_decoder_config",
]
