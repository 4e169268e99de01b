import pytest

from .config import DEFAULT_HEADER, DecoderConfig, load_decoder_config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("I8086_HARDWARE_ACCURATE", raising=False)
    monkeypatch.delenv("I8086_LISTING_HEADER", raising=False)
    config = load_decoder_config()
    assert config == DecoderConfig()
    assert config.header == DEFAULT_HEADER
    assert not config.hardware_accurate


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("yes", True), ("0", False), ("false", False), ("OFF", False), ("", False)],
)
def test_hardware_flag_parsing(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("I8086_HARDWARE_ACCURATE", raw)
    assert load_decoder_config().hardware_accurate is expected


def test_header_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("I8086_LISTING_HEADER", "BITS 16")
    assert load_decoder_config().header == "BITS 16"


def test_overrides() -> None:
    config = DecoderConfig()
    assert config.with_overrides() is config
    assert config.with_overrides(hardware_accurate=True).hardware_accurate
