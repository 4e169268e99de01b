"""Assembly listing output around the decoder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import DEFAULT_HEADER, DecoderConfig
from .decoding import decode

logger = logging.getLogger(__name__)


def render_listing(lines: Iterable[str], header: str = DEFAULT_HEADER) -> str:
    """Header line, a blank line, then one instruction per line."""
    body = "".join(f"{line}\n" for line in lines)
    return f"{header}\n\n{body}"


def disassemble_bytes(data: bytes, config: Optional[DecoderConfig] = None) -> str:
    config = config or DecoderConfig()
    return render_listing(decode(data, config), header=config.header)


def disassemble_file(
    path: Union[str, Path], config: Optional[DecoderConfig] = None
) -> str:
    data = Path(path).read_bytes()
    logger.info("disassembling %s (%d bytes)", path, len(data))
    return disassemble_bytes(data, config)
