"""Parse operator-entered tokens: numbers in binary/hex/decimal, function codes, byte order."""

import re

from .errors import InvalidInputError, UnsupportedOperationError
from .types import Endianness, FunctionCode

# Digit text per base, after any prefix is consumed. Decimal may carry a sign.
_DIGITS: dict[int, re.Pattern[str]] = {
    2: re.compile(r"[01]+"),
    10: re.compile(r"-?[0-9]+"),
    16: re.compile(r"[0-9A-Fa-f]+"),
}


def parse_value(token: str) -> int:
    """
    Parse a numeric token into an integer.

    - ``b1010`` is binary (lowercase ``b`` only).
    - ``0xFF`` / ``0XFF`` is hexadecimal.
    - Anything else is decimal.

    No range is enforced here. Raises InvalidInputError for malformed text.
    """
    if token.startswith("b"):
        digits, base = token[1:], 2
    elif token.startswith(("0x", "0X")):
        digits, base = token[2:], 16
    else:
        digits, base = token, 10

    if not _DIGITS[base].fullmatch(digits):
        raise InvalidInputError(f"Not a number: {token!r}", token=token)
    return int(digits, base)


def parse_function_code(token: "FunctionCode | int | str") -> FunctionCode:
    """Resolve a function code from a member, an int, or a token such as 0x03, 0x0f or 16."""
    if isinstance(token, FunctionCode):
        return token
    if isinstance(token, int):
        code = token
    else:
        try:
            code = parse_value(token.strip())
        except InvalidInputError:
            raise UnsupportedOperationError(token) from None
    fc = FunctionCode.from_code(code)
    if fc is None:
        raise UnsupportedOperationError(token)
    return fc


def parse_endianness(token: "Endianness | str") -> Endianness:
    """Parse BIG/LITTLE (case-insensitive)."""
    if isinstance(token, Endianness):
        return token
    try:
        return Endianness(token.strip().lower())
    except ValueError:
        raise InvalidInputError(f"Invalid endianness: {token!r} (expected BIG or LITTLE)", token=token) from None
