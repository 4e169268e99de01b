from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Optional

DEFAULT_HEADER = "bits 16"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


@dataclass(frozen=True)
class DecoderConfig:
    # Sign-extend displacements and treat MOD=00 R/M=110 as a direct address
    # instead of the literal table reading.
    hardware_accurate: bool = False
    header: str = DEFAULT_HEADER

    def with_overrides(self, *, hardware_accurate: Optional[bool] = None) -> "DecoderConfig":
        if hardware_accurate is None:
            return self
        return replace(self, hardware_accurate=hardware_accurate)


def load_decoder_config() -> DecoderConfig:
    return DecoderConfig(
        hardware_accurate=_env_flag("I8086_HARDWARE_ACCURATE", default=False),
        header=os.getenv("I8086_LISTING_HEADER", DEFAULT_HEADER),
    )


__all__ = ["DEFAULT_HEADER", "DecoderConfig", "load_decoder_config"]
