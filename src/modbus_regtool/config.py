"""Runtime settings (serial link, unit id, byte order, names file) and service wiring."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .codec import EndiannessCodec
from .names import load_name_table
from .service import RegisterAccessService
from .transport import RegisterTransport, SerialTransport
from .types import Endianness

logger = logging.getLogger(__name__)

_PARITY: dict[str, str] = {
    "n": "N",
    "none": "N",
    "e": "E",
    "even": "E",
    "o": "O",
    "odd": "O",
}


def normalize_parity(value: str) -> str:
    """Map none/even/odd (or N/E/O) to the single-letter form pymodbus expects."""
    try:
        return _PARITY[value.strip().lower()]
    except KeyError:
        raise ValueError(f"Invalid parity: {value!r} (expected none, even or odd)") from None


@dataclass(frozen=True)
class Settings:
    """Fixed for the process lifetime; defaults match a typical 9600 8N1 bench setup."""

    port: str = "/dev/ttyACM0"
    baudrate: int = 9600
    bytesize: int = 8
    stopbits: int = 1
    parity: str = "N"
    unit_id: int = 1
    default_quantity: int = 1
    endianness: Endianness = Endianness.BIG
    timeout: float = 3.0
    retries: int = 3
    names_file: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parity", normalize_parity(self.parity))
        if self.default_quantity < 1:
            raise ValueError(f"default_quantity must be >= 1, got {self.default_quantity}")


def create_transport(settings: Settings) -> SerialTransport:
    return SerialTransport(
        port=settings.port,
        baudrate=settings.baudrate,
        bytesize=settings.bytesize,
        parity=settings.parity,
        stopbits=settings.stopbits,
        unit_id=settings.unit_id,
        timeout=settings.timeout,
        retries=settings.retries,
    )


def create_service(settings: Settings, transport: RegisterTransport | None = None) -> RegisterAccessService:
    """Build the service: names table, codec, and (unless given) a SerialTransport."""
    names = load_name_table(settings.names_file)
    if transport is None:
        transport = create_transport(settings)
    logger.debug("Service: endianness=%s names=%d", settings.endianness.value, len(names))
    return RegisterAccessService(
        transport,
        codec=EndiannessCodec(settings.endianness),
        names=names,
        default_quantity=settings.default_quantity,
    )
