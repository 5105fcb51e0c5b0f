#!/usr/bin/env python3
"""Command-line interface for modbus-regtool using Typer."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .config import Settings, create_service, create_transport
from .enums import DEFAULT_ENUM_NAMES, write_register_names
from .errors import InvalidInputError, TransportError, UnsupportedOperationError
from .formatting import render_table, to_hex_display
from .parse import parse_function_code
from .service import RegisterAccessService
from .types import Direction, Endianness, FunctionCode, RegisterClass, ResultRow, WriteResult

app = typer.Typer(
    name="regtool",
    help="Read and write Modbus RTU coils and registers by address, with named registers.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

PortOption = Annotated[
    str,
    typer.Option("--port", "-p", help="Serial port device", envvar="REGTOOL_PORT"),
]
BaudrateOption = Annotated[
    int,
    typer.Option("--baudrate", "-b", help="Serial baud rate", envvar="REGTOOL_BAUDRATE"),
]
BytesizeOption = Annotated[
    int,
    typer.Option("--bytesize", help="Data bits per character"),
]
StopbitsOption = Annotated[
    int,
    typer.Option("--stopbits", help="Stop bits"),
]
ParityOption = Annotated[
    str,
    typer.Option("--parity", help="Parity: none, even, odd", envvar="REGTOOL_PARITY"),
]
UnitIdOption = Annotated[
    int,
    typer.Option("--unit-id", "-u", help="Modbus slave/unit ID", envvar="REGTOOL_UNIT_ID"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Response timeout in seconds", envvar="REGTOOL_TIMEOUT"),
]
RetriesOption = Annotated[
    int,
    typer.Option("--retries", "-r", help="Retries performed by the Modbus client", envvar="REGTOOL_RETRIES"),
]
EndiannessOption = Annotated[
    Endianness,
    typer.Option(
        "--endianness",
        "-e",
        help="Byte order of register words",
        envvar="REGTOOL_ENDIANNESS",
        case_sensitive=False,
    ),
]
NamesOption = Annotated[
    Optional[Path],
    typer.Option("--names", "-n", help="register-names JSON file", envvar="REGTOOL_NAMES"),
]
DefaultQuantityOption = Annotated[
    int,
    typer.Option("--default-quantity", help="Quantity used when a read omits it"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_settings(
    port: str,
    baudrate: int,
    bytesize: int,
    stopbits: int,
    parity: str,
    unit_id: int,
    timeout: float,
    retries: int,
    endianness: Endianness,
    names: Optional[Path],
    default_quantity: int = 1,
) -> Settings:
    """Create Settings from CLI options; invalid combinations exit with code 2."""
    try:
        return Settings(
            port=port,
            baudrate=baudrate,
            bytesize=bytesize,
            stopbits=stopbits,
            parity=parity,
            unit_id=unit_id,
            default_quantity=default_quantity,
            endianness=endianness,
            timeout=timeout,
            retries=retries,
            names_file=names,
        )
    except ValueError as e:
        typer.echo(f"Error: Invalid setting: {e}", err=True)
        raise typer.Exit(2)


def read_banner(fc: FunctionCode, rows: list[ResultRow]) -> str:
    """Echo line printed before a read's table."""
    return f'"{fc.title}" {len(rows)} registers from {rows[0].address}.'


def write_banner(result: WriteResult) -> str:
    if result.function_code.register_class is RegisterClass.COIL:
        return "Successfully wrote multiple coils."
    return "Successfully wrote multiple holding registers."


def rows_to_json(rows: list[ResultRow]) -> str:
    return json.dumps([row.as_dict() for row in rows], indent=2)


def exit_code_for(e: Exception) -> int:
    """Map an exception to the CLI exit code: 2 bad input, 3 transport, 4 anything else."""
    if isinstance(e, (InvalidInputError, UnsupportedOperationError, FileNotFoundError, ValueError)):
        return 2
    if isinstance(e, TransportError):
        return 3
    return 4


def report_error(e: Exception, verbose: bool) -> typer.Exit:
    """Print a one-line error for e and return the matching typer.Exit to raise."""
    if isinstance(e, InvalidInputError):
        typer.echo(f"Error: Invalid input: {e}", err=True)
    elif isinstance(e, UnsupportedOperationError):
        typer.echo(f"Error: {e}", err=True)
    elif isinstance(e, TransportError):
        typer.echo(f"Error: Connection/Modbus error: {e}", err=True)
    elif isinstance(e, (FileNotFoundError, ValueError)):
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
    else:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
    return typer.Exit(exit_code_for(e))


# ============================================================================
# Commands
# ============================================================================


@app.command()
def read(
    function: Annotated[str, typer.Argument(help="Read function code: 0x01 coils, 0x02 discrete inputs, 0x03 holding, 0x04 input")],
    address: Annotated[Optional[str], typer.Argument(help="Start address (decimal, 0xHEX or bBINARY; default 0)")] = None,
    quantity: Annotated[Optional[str], typer.Argument(help="Number of values (default --default-quantity)")] = None,
    port: PortOption = "/dev/ttyACM0",
    baudrate: BaudrateOption = 9600,
    bytesize: BytesizeOption = 8,
    stopbits: StopbitsOption = 1,
    parity: ParityOption = "none",
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 3,
    endianness: EndiannessOption = Endianness.BIG,
    names: NamesOption = None,
    default_quantity: DefaultQuantityOption = 1,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Read coils, discrete inputs, holding or input registers.

    Prints a table of register id, address, name and value. Register values
    are shown as decimal, hex and binary after the endianness transform.
    """
    setup_logging(verbose)
    settings = build_settings(
        port, baudrate, bytesize, stopbits, parity, unit_id, timeout, retries, endianness, names, default_quantity
    )
    args = " ".join(a for a in (address, quantity) if a is not None)

    try:
        fc = parse_function_code(function)
        if fc.direction is not Direction.READ:
            raise UnsupportedOperationError(function, f"Not a read function code: {fc.label} ({fc.title})")
        # the port opens on the first request, after arguments and names are validated
        transport = create_transport(settings)
        service = create_service(settings, transport)
        try:
            rows = service.read_from_args(fc, args)
        finally:
            transport.close()
        if json_output:
            typer.echo(rows_to_json(rows))
        else:
            typer.echo(read_banner(fc, rows))
            typer.echo(render_table(rows))
    except Exception as e:
        raise report_error(e, verbose)


@app.command()
def write(
    function: Annotated[str, typer.Argument(help="Write function code: 0x0F coils, 0x10 holding registers")],
    address: Annotated[str, typer.Argument(help="Start address")],
    values: Annotated[list[str], typer.Argument(help="Values to write (coils: nonzero is on)")],
    port: PortOption = "/dev/ttyACM0",
    baudrate: BaudrateOption = 9600,
    bytesize: BytesizeOption = 8,
    stopbits: StopbitsOption = 1,
    parity: ParityOption = "none",
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 3,
    endianness: EndiannessOption = Endianness.BIG,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Write multiple coils or holding registers starting at ADDRESS.

    Holding-register values are entered in the configured byte order and
    converted before sending.
    """
    setup_logging(verbose)
    settings = build_settings(port, baudrate, bytesize, stopbits, parity, unit_id, timeout, retries, endianness, None)

    try:
        fc = parse_function_code(function)
        if fc.direction is not Direction.WRITE:
            raise UnsupportedOperationError(function, f"Not a write function code: {fc.label} ({fc.title})")
        transport = create_transport(settings)
        service = create_service(settings, transport)
        try:
            result = service.write_from_args(fc, " ".join([address, *values]))
        finally:
            transport.close()
        if json_output:
            typer.echo(
                json.dumps(
                    {
                        "function": result.function_code.label,
                        "address": to_hex_display(result.start_address),
                        "values": list(result.values),
                    }
                )
            )
        else:
            typer.echo(write_banner(result))
    except Exception as e:
        raise report_error(e, verbose)


MENU = """
Choose an action (or type 'quit' to exit):
READ:
  0x01 -> Coils
  0x02 -> Discrete Inputs
  0x03 -> Holding Registers
  0x04 -> Input Registers
WRITE:
  0x0F -> Multiple Coils
  0x10 -> Multiple Holding Registers"""


def run_shell(service: RegisterAccessService) -> None:
    """Prompt for function codes and arguments until 'quit' or end of input; errors never end the loop."""
    while True:
        typer.echo(MENU)
        try:
            choice = typer.prompt("Enter function code", default="", show_default=False).strip().lower()
        except typer.Abort:
            break
        if choice == "quit":
            typer.echo("Exiting...")
            break
        if not choice:
            continue

        try:
            fc = parse_function_code(choice)
        except UnsupportedOperationError:
            typer.echo("Unrecognized function code. Please try again.", err=True)
            continue

        try:
            if fc.direction is Direction.READ:
                args = typer.prompt(
                    "Enter address [space] quantity (default=1)", default="", show_default=False
                )
                rows = service.read_from_args(fc, args)
                typer.echo(read_banner(fc, rows))
                typer.echo(render_table(rows))
            else:
                args = typer.prompt(
                    "Enter address [space] value [space] value ... (ex: 10 1 1 0 1)", default="", show_default=False
                )
                typer.echo(write_banner(service.write_from_args(fc, args)))
        except typer.Abort:
            break
        except (InvalidInputError, UnsupportedOperationError, TransportError) as e:
            action = "reading" if fc.direction is Direction.READ else "writing"
            typer.echo(f"Error {action} data: {e}", err=True)


@app.command()
def shell(
    port: PortOption = "/dev/ttyACM0",
    baudrate: BaudrateOption = 9600,
    bytesize: BytesizeOption = 8,
    stopbits: StopbitsOption = 1,
    parity: ParityOption = "none",
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 3,
    endianness: EndiannessOption = Endianness.BIG,
    names: NamesOption = None,
    default_quantity: DefaultQuantityOption = 1,
    verbose: VerboseOption = False,
) -> None:
    """
    Interactive menu: choose a function code, enter arguments, repeat.

    Type 'quit' (or send end of input) to exit. Read/write errors are reported
    and the loop continues.
    """
    setup_logging(verbose)
    settings = build_settings(
        port, baudrate, bytesize, stopbits, parity, unit_id, timeout, retries, endianness, names, default_quantity
    )

    try:
        transport = create_transport(settings)
        service = create_service(settings, transport)
    except Exception as e:
        raise report_error(e, verbose)

    # a failed connect is reported and the menu still runs; each request retries the port
    try:
        transport.connect()
        typer.echo(f"Connected to Modbus slave ID {settings.unit_id} on port {settings.port}")
    except TransportError as e:
        typer.echo(f"Error connecting to Modbus device: {e}", err=True)

    try:
        run_shell(service)
    finally:
        transport.close()


@app.command(name="gen-names")
def gen_names(
    source: Annotated[Path, typer.Argument(help="C/C++ header containing the register enums")],
    output: Annotated[Path, typer.Option("--output", "-o", help="JSON file to write")] = Path("register-names.json"),
    coils: Annotated[str, typer.Option("--coils", help="Enum holding coil addresses")] = DEFAULT_ENUM_NAMES[
        RegisterClass.COIL
    ],
    discrete_inputs: Annotated[
        str, typer.Option("--discrete-inputs", help="Enum holding discrete input addresses")
    ] = DEFAULT_ENUM_NAMES[RegisterClass.DISCRETE_INPUT],
    holding_registers: Annotated[
        str, typer.Option("--holding-registers", help="Enum holding holding-register addresses")
    ] = DEFAULT_ENUM_NAMES[RegisterClass.HOLDING_REGISTER],
    input_registers: Annotated[
        str, typer.Option("--input-registers", help="Enum holding input-register addresses")
    ] = DEFAULT_ENUM_NAMES[RegisterClass.INPUT_REGISTER],
    verbose: VerboseOption = False,
) -> None:
    """
    Generate a register-names JSON file from enum declarations.

    Each enum line of the form FIELD = 0xADDR becomes "0xADDR": "FIELD".
    Enums not found in SOURCE are written as null (names disabled).
    """
    setup_logging(verbose)

    if not source.is_file():
        typer.echo(f"Error: Source file not found: {source}", err=True)
        raise typer.Exit(2)

    enum_names = {
        RegisterClass.COIL: coils,
        RegisterClass.DISCRETE_INPUT: discrete_inputs,
        RegisterClass.HOLDING_REGISTER: holding_registers,
        RegisterClass.INPUT_REGISTER: input_registers,
    }
    try:
        document = write_register_names(
            source,
            output,
            coils=coils,
            discrete_inputs=discrete_inputs,
            holding_registers=holding_registers,
            input_registers=input_registers,
        )
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(4)

    for rc in RegisterClass:
        table = document[rc.names_key]
        found = f"{len(table)} names" if table is not None else "not found"
        typer.echo(f"{rc.names_key}: {enum_names[rc]} ({found})")
    typer.echo(f"Wrote {output}")


@app.command()
def info(
    port: PortOption = "/dev/ttyACM0",
    baudrate: BaudrateOption = 9600,
    bytesize: BytesizeOption = 8,
    stopbits: StopbitsOption = 1,
    parity: ParityOption = "none",
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 3,
    endianness: EndiannessOption = Endianness.BIG,
    names: NamesOption = None,
    default_quantity: DefaultQuantityOption = 1,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show package version and the effective settings. Does not open the port.
    """
    setup_logging(verbose)
    settings = build_settings(
        port, baudrate, bytesize, stopbits, parity, unit_id, timeout, retries, endianness, names, default_quantity
    )

    info_data = {
        "version": __version__,
        "port": settings.port,
        "serial": f"{settings.baudrate} {settings.bytesize}{settings.parity}{settings.stopbits}",
        "unit_id": settings.unit_id,
        "endianness": settings.endianness.value.upper(),
        "default_quantity": settings.default_quantity,
        "names_file": str(settings.names_file) if settings.names_file else None,
    }

    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"modbus-regtool version: {info_data['version']}")
        typer.echo(f"Port:             {info_data['port']} ({info_data['serial']})")
        typer.echo(f"Unit ID:          {info_data['unit_id']}")
        typer.echo(f"Endianness:       {info_data['endianness']}")
        typer.echo(f"Default quantity: {info_data['default_quantity']}")
        typer.echo(f"Names file:       {info_data['names_file'] or '(none)'}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"modbus-regtool {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """regtool - read and write Modbus RTU coils and registers."""
    pass


if __name__ == "__main__":
    app()
