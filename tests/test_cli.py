"""Tests for CLI module - command structure, output and exit codes."""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from modbus_regtool.cli import app, exit_code_for, read_banner
from modbus_regtool.errors import InvalidInputError, TransportError, UnsupportedOperationError
from modbus_regtool.formatting import build_row
from modbus_regtool.transport import SerialTransport
from modbus_regtool.types import FunctionCode, RegisterClass

runner = CliRunner()


@pytest.fixture
def cli_transport() -> MagicMock:
    transport = MagicMock(spec=SerialTransport)
    transport.read_coils.return_value = [True, False, True, True, False, False, False, False]
    transport.read_discrete_inputs.return_value = [False]
    transport.read_holding_registers.return_value = [0, 65535, 65535, 255]
    transport.read_input_registers.return_value = [0x1234]
    transport.write_coils.return_value = None
    transport.write_registers.return_value = None
    return transport


@pytest.fixture
def offline_client() -> Iterator[MagicMock]:
    """A pymodbus client whose serial port never opens."""
    client = MagicMock()
    client.connect.return_value = False
    with patch("modbus_regtool.transport.ModbusSerialClient", return_value=client):
        yield client


# ============================================================================
# Helpers
# ============================================================================


def test_exit_codes() -> None:
    assert exit_code_for(InvalidInputError("bad")) == 2
    assert exit_code_for(UnsupportedOperationError("0x05")) == 2
    assert exit_code_for(FileNotFoundError("names.json")) == 2
    assert exit_code_for(TransportError("timeout")) == 3
    assert exit_code_for(RuntimeError("boom")) == 4


def test_read_banner() -> None:
    rows = [build_row(RegisterClass.HOLDING_REGISTER, 4, i, 0) for i in range(4)]
    assert read_banner(FunctionCode.READ_HOLDING_REGISTERS, rows) == '"Read Holding Registers" 4 registers from 0x0004.'


# ============================================================================
# Commands (with mocked transport)
# ============================================================================


@patch("modbus_regtool.cli.create_transport")
def test_read_command(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport

    result = runner.invoke(app, ["read", "0x03", "4", "4"])

    assert result.exit_code == 0
    assert '"Read Holding Registers" 4 registers from 0x0004.' in result.stdout
    assert "HR5" in result.stdout and "HR8" in result.stdout
    assert "0000 0000 1111 1111" in result.stdout
    cli_transport.read_holding_registers.assert_called_once_with(4, 4)


@patch("modbus_regtool.cli.create_transport")
def test_read_command_json_little(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport

    result = runner.invoke(app, ["read", "0x03", "0x4", "4", "--json", "--endianness", "LITTLE"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [row["Reg."] for row in data] == ["HR5", "HR6", "HR7", "HR8"]
    assert data[3]["Decimal"] == 0xFF00
    assert data[3]["Hex"] == "0xFF00"


@patch("modbus_regtool.cli.create_transport")
def test_read_command_with_names(mock_create: MagicMock, cli_transport: MagicMock, tmp_path: Path) -> None:
    mock_create.return_value = cli_transport
    names = tmp_path / "register-names.json"
    names.write_text(json.dumps({"COIL_NAMES": {"0x0000": "PUMP_ON"}}), encoding="utf-8")

    result = runner.invoke(app, ["read", "0x01", "--names", str(names), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == [{"Reg.": "C1", "Addr.": "0x0000", "Name": "PUMP_ON", "Value": True}]


@patch("modbus_regtool.cli.create_transport")
def test_read_command_transport_error(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport
    cli_transport.read_holding_registers.side_effect = OSError("device timeout")

    result = runner.invoke(app, ["read", "0x03", "0", "2"])

    assert result.exit_code == 3
    assert "device timeout" in result.output
    assert "HR1" not in result.output


@patch("modbus_regtool.cli.create_transport")
def test_read_command_unsupported(mock_create: MagicMock) -> None:
    result = runner.invoke(app, ["read", "0x05", "0"])
    assert result.exit_code == 2
    assert "Unsupported function code" in result.output
    mock_create.assert_not_called()


@patch("modbus_regtool.cli.create_transport")
def test_read_command_rejects_write_code(mock_create: MagicMock) -> None:
    result = runner.invoke(app, ["read", "0x10", "0"])
    assert result.exit_code == 2
    mock_create.assert_not_called()


@patch("modbus_regtool.cli.create_transport")
def test_read_command_invalid_address(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport
    result = runner.invoke(app, ["read", "0x03", "0xZZ"])
    assert result.exit_code == 2
    assert "Invalid input" in result.output


@patch("modbus_regtool.cli.create_transport")
def test_write_command_coils(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport

    result = runner.invoke(app, ["write", "0x0F", "10", "1", "1", "0", "1"])

    assert result.exit_code == 0
    assert "Successfully wrote multiple coils." in result.stdout
    cli_transport.write_coils.assert_called_once_with(10, [True, True, False, True])


@patch("modbus_regtool.cli.create_transport")
def test_write_command_registers_json(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport

    result = runner.invoke(app, ["write", "0x10", "4", "0x1234", "--endianness", "little", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {"function": "0x10", "address": "0x0004", "values": [0x3412]}
    cli_transport.write_registers.assert_called_once_with(4, [0x3412])


@patch("modbus_regtool.cli.create_transport")
def test_write_command_unsupported(mock_create: MagicMock) -> None:
    result = runner.invoke(app, ["write", "0x05", "0", "1"])
    assert result.exit_code == 2
    mock_create.assert_not_called()


def test_write_command_requires_value() -> None:
    result = runner.invoke(app, ["write", "0x10", "4"])
    assert result.exit_code == 2


def test_invalid_parity_option() -> None:
    result = runner.invoke(app, ["read", "0x03", "--parity", "mark"])
    assert result.exit_code == 2
    assert "Invalid setting" in result.output


@patch("modbus_regtool.cli.create_transport")
def test_shell_session(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport
    session = "\n".join(["0x03", "4 4", "0x05", "0x10", "4", "0x0f", "10 1 0", "quit"]) + "\n"

    result = runner.invoke(app, ["shell"], input=session)

    assert result.exit_code == 0
    assert "Connected to Modbus slave ID 1 on port /dev/ttyACM0" in result.output
    assert '"Read Holding Registers" 4 registers from 0x0004.' in result.output
    assert "Unrecognized function code" in result.output
    assert "Error writing data: You must provide at least an address and one value." in result.output
    assert "Successfully wrote multiple coils." in result.output
    assert "Exiting..." in result.output
    cli_transport.write_coils.assert_called_once_with(10, [True, False])
    cli_transport.write_registers.assert_not_called()


@patch("modbus_regtool.cli.create_transport")
def test_shell_continues_after_transport_error(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport
    cli_transport.read_input_registers.side_effect = [OSError("no response"), [7]]

    result = runner.invoke(app, ["shell"], input="0x04\n0\n0x04\n0\n")

    assert result.exit_code == 0
    assert "Error reading data: no response" in result.output
    assert "IR1" in result.output
    assert cli_transport.read_input_registers.call_count == 2


# ============================================================================
# Port handling (pymodbus client mocked, serial port unavailable)
# ============================================================================


@pytest.mark.parametrize(
    "argv",
    [
        ["read", "0x03", "0xZZ"],
        ["read", "0x03", "4", "b102"],
        ["read", "0x03", "0", "1", "--names", "missing-names.json"],
        ["write", "0x10", "4", "0xZZ"],
    ],
)
def test_bad_input_reported_before_port_opens(offline_client: MagicMock, argv: list[str]) -> None:
    result = runner.invoke(app, argv)

    assert result.exit_code == 2
    offline_client.connect.assert_not_called()


def test_read_port_unavailable_is_transport_error(offline_client: MagicMock) -> None:
    result = runner.invoke(app, ["read", "0x03", "0", "1"])

    assert result.exit_code == 3
    assert "Failed to open serial port /dev/ttyACM0" in result.output
    offline_client.connect.assert_called_once()


def test_write_port_unavailable_is_transport_error(offline_client: MagicMock) -> None:
    result = runner.invoke(app, ["write", "0x10", "4", "1"])

    assert result.exit_code == 3
    offline_client.write_registers.assert_not_called()


def test_write_command_reports_failed_write(cli_transport: MagicMock) -> None:
    cli_transport.write_registers.return_value = False

    with patch("modbus_regtool.cli.create_transport", return_value=cli_transport):
        result = runner.invoke(app, ["write", "0x10", "4", "1"])

    assert result.exit_code == 3
    assert "Successfully wrote" not in result.output


def test_shell_starts_when_port_unavailable(offline_client: MagicMock) -> None:
    result = runner.invoke(app, ["shell"], input="0x03\n0 1\nquit\n")

    assert result.exit_code == 0
    assert "Error connecting to Modbus device: Failed to open serial port /dev/ttyACM0" in result.output
    assert "Connected to Modbus slave ID" not in result.output
    assert "Error reading data: Failed to open serial port /dev/ttyACM0" in result.output
    assert "Exiting..." in result.output
    assert offline_client.connect.call_count == 2


@patch("modbus_regtool.cli.create_transport")
def test_shell_closes_port_on_exit(mock_create: MagicMock, cli_transport: MagicMock) -> None:
    mock_create.return_value = cli_transport

    result = runner.invoke(app, ["shell"], input="quit\n")

    assert result.exit_code == 0
    cli_transport.connect.assert_called_once()
    cli_transport.close.assert_called_once()


def test_gen_names_command(tmp_path: Path) -> None:
    source = tmp_path / "registers.h"
    source.write_text("enum LOCAL_COILS {\n    PUMP_ON = 0x0000,\n    COUNT\n};\n", encoding="utf-8")
    output = tmp_path / "register-names.json"

    result = runner.invoke(app, ["gen-names", str(source), "--output", str(output)])

    assert result.exit_code == 0
    assert "COIL_NAMES: LOCAL_COILS (1 names)" in result.stdout
    assert "HOLDING_REGISTER_NAMES: LOCAL_HOLDING_REGISTERS (not found)" in result.stdout
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["COIL_NAMES"] == {"0x0000": "PUMP_ON"}


def test_gen_names_missing_source(tmp_path: Path) -> None:
    result = runner.invoke(app, ["gen-names", str(tmp_path / "missing.h")])
    assert result.exit_code == 2
    assert "Source file not found" in result.output


def test_info_command_json() -> None:
    result = runner.invoke(app, ["info", "--json", "--port", "/dev/ttyUSB1", "--parity", "even"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["port"] == "/dev/ttyUSB1"
    assert data["serial"] == "9600 8E1"
    assert data["endianness"] == "BIG"


def test_info_command_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REGTOOL_ENDIANNESS", "little")
    monkeypatch.setenv("REGTOOL_UNIT_ID", "3")
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "Endianness:       LITTLE" in result.stdout
    assert "Unit ID:          3" in result.stdout


def test_command_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("read", "write", "shell", "gen-names", "info"):
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "modbus-regtool" in result.stdout
