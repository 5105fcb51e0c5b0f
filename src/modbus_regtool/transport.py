"""Transport seam: the six Modbus primitives, and a pymodbus RTU serial implementation."""

import logging
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from pymodbus.client import ModbusSerialClient
from pymodbus.exceptions import ModbusException as PymodbusException

from .errors import TransportError
from .types import RegisterClass

logger = logging.getLogger(__name__)


@runtime_checkable
class RegisterTransport(Protocol):
    """
    Already-decoded read/write primitives.

    Implementations raise TransportError on failure. A write that returns
    False instead is also reported as a failure.
    """

    def read_coils(self, address: int, quantity: int) -> list[bool]: ...

    def read_discrete_inputs(self, address: int, quantity: int) -> list[bool]: ...

    def read_holding_registers(self, address: int, quantity: int) -> list[int]: ...

    def read_input_registers(self, address: int, quantity: int) -> list[int]: ...

    def write_coils(self, address: int, values: Sequence[bool]) -> bool | None: ...

    def write_registers(self, address: int, values: Sequence[int]) -> bool | None: ...


class SerialTransport:
    """
    Modbus RTU over a serial port via pymodbus ModbusSerialClient.
    Connects lazily on first use; use as a context manager to close the port.
    """

    def __init__(
        self,
        port: str,
        baudrate: int = 9600,
        bytesize: int = 8,
        parity: str = "N",
        stopbits: int = 1,
        unit_id: int = 1,
        timeout: float = 3.0,
        retries: int = 3,
    ) -> None:
        self._port = port
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits
        self._unit_id = unit_id
        self._timeout = timeout
        self._retries = retries
        self._client: ModbusSerialClient | None = None

    def _get_client(self) -> ModbusSerialClient:
        if self._client is None:
            self._client = ModbusSerialClient(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=self._bytesize,
                parity=self._parity,
                stopbits=self._stopbits,
                timeout=self._timeout,
                retries=self._retries,
            )
            if not self._client.connect():
                self._client = None
                raise TransportError(f"Failed to open serial port {self._port}")
            logger.debug("Connected to unit %d on %s @ %d", self._unit_id, self._port, self._baudrate)
        return self._client

    def _call(self, table: RegisterClass, address: int, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a pymodbus client method; map error responses and exceptions to TransportError."""
        client = self._get_client()
        logger.debug("%s address=%d args=%r", method, address, args or kwargs)
        try:
            rr = getattr(client, method)(address, *args, device_id=self._unit_id, **kwargs)
        except PymodbusException as e:
            raise TransportError(str(e), table=table.value, address=address, cause=e) from e
        if rr.isError():
            raise TransportError(
                str(rr),
                table=table.value,
                address=address,
                cause=getattr(rr, "exception", None),
            )
        return rr

    def read_coils(self, address: int, quantity: int) -> list[bool]:
        rr = self._call(RegisterClass.COIL, address, "read_coils", count=quantity)
        return [bool(b) for b in rr.bits]

    def read_discrete_inputs(self, address: int, quantity: int) -> list[bool]:
        rr = self._call(RegisterClass.DISCRETE_INPUT, address, "read_discrete_inputs", count=quantity)
        return [bool(b) for b in rr.bits]

    def read_holding_registers(self, address: int, quantity: int) -> list[int]:
        rr = self._call(RegisterClass.HOLDING_REGISTER, address, "read_holding_registers", count=quantity)
        return [int(r) for r in rr.registers]

    def read_input_registers(self, address: int, quantity: int) -> list[int]:
        rr = self._call(RegisterClass.INPUT_REGISTER, address, "read_input_registers", count=quantity)
        return [int(r) for r in rr.registers]

    def write_coils(self, address: int, values: Sequence[bool]) -> None:
        self._call(RegisterClass.COIL, address, "write_coils", list(values))

    def write_registers(self, address: int, values: Sequence[int]) -> None:
        self._call(RegisterClass.HOLDING_REGISTER, address, "write_registers", list(values))

    def connect(self) -> None:
        """Open the serial port."""
        self._get_client()

    def close(self) -> None:
        """Close the serial port."""
        if self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.warning("Error closing Modbus client: %s", e)
            self._client = None

    def __enter__(self) -> "SerialTransport":
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def port(self) -> str:
        return self._port
