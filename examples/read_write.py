#!/usr/bin/env python3
"""Example: read named holding registers and write coils over a serial Modbus RTU link."""

import sys

from modbus_regtool import Settings, create_service, render_table
from modbus_regtool.config import create_transport
from modbus_regtool.errors import InvalidInputError, TransportError, UnsupportedOperationError
from modbus_regtool.types import Endianness


def main() -> None:
    settings = Settings(
        port="/dev/ttyACM0",  # change to your adapter
        baudrate=9600,
        unit_id=1,
        endianness=Endianness.BIG,
        names_file=None,  # or Path("register-names.json")
    )

    try:
        with create_transport(settings) as transport:
            service = create_service(settings, transport)

            # Four holding registers from 0x0004
            rows = service.read("0x03", 4, 4)
            print(render_table(rows))

            # Same request as typed at the interactive prompt
            rows = service.read_from_args("0x01", "0 8")
            print(render_table(rows))

            # Write coils (example; uncomment if your device allows)
            # service.write_from_args("0x0F", "10 1 1 0 1")
    except (InvalidInputError, UnsupportedOperationError) as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        sys.exit(1)
    except TransportError as e:
        print(f"Modbus/connection error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
