"""RegisterAccessService: validate a request, call the transport, decode and name the results."""

import logging
from collections.abc import Sequence
from typing import Any

from .codec import EndiannessCodec
from .errors import InvalidInputError, RegToolError, TransportError, UnsupportedOperationError
from .formatting import build_row
from .names import NameTable
from .parse import parse_function_code, parse_value
from .transport import RegisterTransport
from .types import Direction, FunctionCode, RegisterClass, ResultRow, WriteResult

logger = logging.getLogger(__name__)

_READERS: dict[RegisterClass, str] = {
    RegisterClass.COIL: "read_coils",
    RegisterClass.DISCRETE_INPUT: "read_discrete_inputs",
    RegisterClass.HOLDING_REGISTER: "read_holding_registers",
    RegisterClass.INPUT_REGISTER: "read_input_registers",
}

_WRITERS: dict[RegisterClass, str] = {
    RegisterClass.COIL: "write_coils",
    RegisterClass.HOLDING_REGISTER: "write_registers",
}


class RegisterAccessService:
    """
    Stateless request handler over a RegisterTransport.

    Reads return one ResultRow per requested address, in address order.
    Register words pass through the endianness codec in both directions;
    coil and discrete-input bits are untouched. Nothing is retried here.
    """

    def __init__(
        self,
        transport: RegisterTransport,
        codec: EndiannessCodec | None = None,
        names: NameTable | None = None,
        default_quantity: int = 1,
    ) -> None:
        self._transport = transport
        self._codec = codec if codec is not None else EndiannessCodec()
        self._names = names if names is not None else NameTable()
        self._default_quantity = default_quantity

    @property
    def codec(self) -> EndiannessCodec:
        return self._codec

    @property
    def names(self) -> NameTable:
        return self._names

    def _function(self, function: FunctionCode | int | str, direction: Direction) -> FunctionCode:
        fc = parse_function_code(function)
        if fc.direction != direction:
            raise UnsupportedOperationError(
                function, f"Unsupported {direction.value} function code: {fc.label} ({fc.title})"
            )
        return fc

    def _invoke(self, fc: FunctionCode, method: str, address: int, arg: Any) -> Any:
        logger.debug("%s (%s) address=%d arg=%r", fc.title, fc.label, address, arg)
        try:
            return getattr(self._transport, method)(address, arg)
        except RegToolError:
            raise
        except Exception as e:
            raise TransportError(
                str(e) or type(e).__name__,
                table=fc.register_class.value,
                address=address,
                cause=e,
            ) from e

    def read(self, function: FunctionCode | int | str, start_address: int, quantity: int) -> list[ResultRow]:
        """
        Read quantity values starting at start_address and build display rows.

        Extra values returned by the transport are dropped; fewer than quantity
        is a TransportError and no rows are returned.
        """
        fc = self._function(function, Direction.READ)
        if start_address < 0:
            raise InvalidInputError(f"Address must be >= 0, got {start_address}")
        if quantity < 1:
            raise InvalidInputError(f"Quantity must be >= 1, got {quantity}")

        rc = fc.register_class
        raw = list(self._invoke(fc, _READERS[rc], start_address, quantity))
        if len(raw) < quantity:
            raise TransportError(
                f"Short response: expected {quantity} values, got {len(raw)}",
                table=rc.value,
                address=start_address,
            )
        rows: list[ResultRow] = []
        for index, value in enumerate(raw[:quantity]):
            if not rc.is_bit:
                value = self._codec.convert(int(value)) & 0xFFFF
            name = self._names.resolve(rc, start_address + index)
            rows.append(build_row(rc, start_address, index, value, name))
        return rows

    def write(self, function: FunctionCode | int | str, start_address: int, values: Sequence[int]) -> WriteResult:
        """
        Write values starting at start_address.

        Coils take "nonzero is true"; holding-register values are in display
        byte order and are converted to wire order before sending.
        """
        fc = self._function(function, Direction.WRITE)
        if len(values) < 1:
            raise InvalidInputError("You must provide at least one value to write.")

        wire: list[bool] | list[int]
        if fc.register_class.is_bit:
            wire = [v != 0 for v in values]
        else:
            wire = [self._codec.convert(v) for v in values]
        if self._invoke(fc, _WRITERS[fc.register_class], start_address, wire) is False:
            raise TransportError(
                f"{fc.title} failed at {start_address}",
                table=fc.register_class.value,
                address=start_address,
            )
        logger.debug("%s wrote %d values at %d", fc.title, len(wire), start_address)
        return WriteResult(function_code=fc, start_address=start_address, values=tuple(wire))

    def read_from_args(self, function: FunctionCode | int | str, args: str) -> list[ResultRow]:
        """Read using an "address [quantity]" string; address defaults to 0, quantity to the default."""
        fc = self._function(function, Direction.READ)
        parts = args.split()
        start_address = parse_value(parts[0]) if parts else 0
        quantity = parse_value(parts[1]) if len(parts) > 1 else self._default_quantity
        return self.read(fc, start_address, quantity)

    def write_from_args(self, function: FunctionCode | int | str, args: str) -> WriteResult:
        """Write using an "address value [value ...]" string."""
        fc = self._function(function, Direction.WRITE)
        parts = args.split()
        if len(parts) < 2:
            raise InvalidInputError("You must provide at least an address and one value.")
        start_address = parse_value(parts[0])
        values = [parse_value(p) for p in parts[1:]]
        return self.write(fc, start_address, values)
