"""Tests for Settings validation and service wiring."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from modbus_regtool import Settings, create_service
from modbus_regtool.config import create_transport, normalize_parity
from modbus_regtool.types import Endianness, RegisterClass


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("none", "N"), ("N", "N"), ("Even", "E"), ("e", "E"), ("odd", "O"), (" O ", "O")],
)
def test_normalize_parity(raw: str, expected: str) -> None:
    assert normalize_parity(raw) == expected


def test_invalid_parity() -> None:
    with pytest.raises(ValueError, match="parity"):
        Settings(parity="mark")


def test_defaults() -> None:
    s = Settings()
    assert s.port == "/dev/ttyACM0"
    assert s.baudrate == 9600
    assert s.parity == "N"
    assert s.unit_id == 1
    assert s.default_quantity == 1
    assert s.endianness is Endianness.BIG
    assert s.names_file is None


def test_default_quantity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(default_quantity=0)


def test_create_transport_uses_settings() -> None:
    t = create_transport(Settings(port="COM3", unit_id=5))
    assert t.port == "COM3"


def test_create_service_wires_codec_and_names(tmp_path: Path, mock_transport: MagicMock) -> None:
    names_file = tmp_path / "register-names.json"
    names_file.write_text(json.dumps({"INPUT_REGISTER_NAMES": {"0x0000": "TEMP"}}), encoding="utf-8")
    service = create_service(
        Settings(endianness=Endianness.LITTLE, names_file=names_file, default_quantity=1),
        transport=mock_transport,
    )
    assert service.codec.mode is Endianness.LITTLE
    assert service.names.resolve(RegisterClass.INPUT_REGISTER, 0) == "TEMP"

    rows = service.read_from_args("0x04", "")
    assert rows[0].name == "TEMP"
    assert rows[0].decimal == 0x3412
