"""Shared fixtures: a mocked transport and a small register-names document."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from modbus_regtool.transport import RegisterTransport


@pytest.fixture
def mock_transport() -> MagicMock:
    transport = MagicMock(spec=RegisterTransport)
    transport.read_coils.return_value = [True, False, True, True, False, False, False, False]
    transport.read_discrete_inputs.return_value = [False]
    transport.read_holding_registers.return_value = [0, 65535, 65535, 255]
    transport.read_input_registers.return_value = [0x1234]
    transport.write_coils.return_value = None
    transport.write_registers.return_value = None
    return transport


@pytest.fixture
def names_document() -> dict[str, Any]:
    return {
        "COIL_NAMES": {"0x0000": "PUMP_ON", "0x0002": "VALVE_OPEN"},
        "DISCRETE_INPUT_NAMES": False,
        "HOLDING_REGISTER_NAMES": {"0x0004": "SETPOINT", "0x00ab": "LOWER_CASE_KEY", "0X0006": "UPPER_PREFIX"},
        "INPUT_REGISTER_NAMES": {},
    }
