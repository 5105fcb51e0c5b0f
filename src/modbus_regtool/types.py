"""Core data model: register classes, function codes, endianness and result rows."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RegisterClass(str, Enum):
    """Modbus tables addressable by the tool."""

    COIL = "coil"
    DISCRETE_INPUT = "discrete_input"
    HOLDING_REGISTER = "holding_register"
    INPUT_REGISTER = "input_register"

    @property
    def prefix(self) -> str:
        """Display prefix used in register ids (C5, DI5, HR5, IR5)."""
        return _PREFIXES[self]

    @property
    def names_key(self) -> str:
        """Top-level key of this table in the register-names JSON document."""
        return _NAMES_KEYS[self]

    @property
    def is_bit(self) -> bool:
        return self in (RegisterClass.COIL, RegisterClass.DISCRETE_INPUT)


_PREFIXES: dict[RegisterClass, str] = {
    RegisterClass.COIL: "C",
    RegisterClass.DISCRETE_INPUT: "DI",
    RegisterClass.HOLDING_REGISTER: "HR",
    RegisterClass.INPUT_REGISTER: "IR",
}

_NAMES_KEYS: dict[RegisterClass, str] = {
    RegisterClass.COIL: "COIL_NAMES",
    RegisterClass.DISCRETE_INPUT: "DISCRETE_INPUT_NAMES",
    RegisterClass.HOLDING_REGISTER: "HOLDING_REGISTER_NAMES",
    RegisterClass.INPUT_REGISTER: "INPUT_REGISTER_NAMES",
}


class Direction(str, Enum):
    READ = "read"
    WRITE = "write"


class FunctionCode(Enum):
    """The six supported Modbus operations, each bound to its table and direction."""

    READ_COILS = (0x01, RegisterClass.COIL, Direction.READ, "Read Coils")
    READ_DISCRETE_INPUTS = (0x02, RegisterClass.DISCRETE_INPUT, Direction.READ, "Read Discrete Inputs")
    READ_HOLDING_REGISTERS = (0x03, RegisterClass.HOLDING_REGISTER, Direction.READ, "Read Holding Registers")
    READ_INPUT_REGISTERS = (0x04, RegisterClass.INPUT_REGISTER, Direction.READ, "Read Input Registers")
    WRITE_MULTIPLE_COILS = (0x0F, RegisterClass.COIL, Direction.WRITE, "Write Multiple Coils")
    WRITE_MULTIPLE_REGISTERS = (
        0x10,
        RegisterClass.HOLDING_REGISTER,
        Direction.WRITE,
        "Write Multiple Holding Registers",
    )

    def __init__(self, code: int, register_class: RegisterClass, direction: Direction, title: str) -> None:
        self.code = code
        self.register_class = register_class
        self.direction = direction
        self.title = title

    @property
    def label(self) -> str:
        """Menu form of the code, e.g. 0x0F."""
        return f"0x{self.code:02X}"

    @classmethod
    def from_code(cls, code: int) -> "FunctionCode | None":
        for member in cls:
            if member.code == code:
                return member
        return None


class Endianness(str, Enum):
    """Byte order of 16-bit register words as presented to the operator."""

    BIG = "big"
    LITTLE = "little"


@dataclass(frozen=True)
class ResultRow:
    """One displayed register: id, address, name and either a bit value or the numeric triple."""

    register_id: str
    address: str
    name: str
    value: bool | None = None
    decimal: int | None = None
    hex: str | None = None
    binary: str | None = None

    @property
    def is_bit(self) -> bool:
        return self.decimal is None

    def as_dict(self) -> dict[str, Any]:
        """Display columns in table order."""
        out: dict[str, Any] = {"Reg.": self.register_id, "Addr.": self.address, "Name": self.name}
        if self.is_bit:
            out["Value"] = self.value
        else:
            out["Decimal"] = self.decimal
            out["Hex"] = self.hex
            out["Binary"] = self.binary
        return out


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a successful write: what was sent, and where."""

    function_code: FunctionCode
    start_address: int
    values: tuple[bool | int, ...]

    @property
    def count(self) -> int:
        return len(self.values)
