"""modbus-regtool: read/write Modbus RTU coils and registers with named addresses and byte-order control."""

__version__ = "0.1.0"

from .codec import EndiannessCodec
from .config import Settings, create_service
from .errors import InvalidInputError, RegToolError, TransportError, UnsupportedOperationError
from .formatting import build_row, render_table, to_binary_display, to_hex_display
from .names import NameTable, load_name_table, normalize_address
from .parse import parse_function_code, parse_value
from .service import RegisterAccessService
from .transport import RegisterTransport, SerialTransport
from .types import Direction, Endianness, FunctionCode, RegisterClass, ResultRow, WriteResult

__all__ = [
    "__version__",
    "EndiannessCodec",
    "Settings",
    "create_service",
    "InvalidInputError",
    "RegToolError",
    "TransportError",
    "UnsupportedOperationError",
    "build_row",
    "render_table",
    "to_binary_display",
    "to_hex_display",
    "NameTable",
    "load_name_table",
    "normalize_address",
    "parse_function_code",
    "parse_value",
    "RegisterAccessService",
    "RegisterTransport",
    "SerialTransport",
    "Direction",
    "Endianness",
    "FunctionCode",
    "RegisterClass",
    "ResultRow",
    "WriteResult",
]
