"""Display helpers: hex/binary register text, result rows, and a plain-text table."""

import re
from collections.abc import Sequence
from typing import Any

from .types import RegisterClass, ResultRow

_NIBBLE = re.compile(r"(.{4})")


def to_hex_display(n: int) -> str:
    """0x-prefixed, zero-padded to 4 uppercase hex digits (4 -> 0x0004)."""
    return f"0x{n:04X}"


def to_binary_display(n: int) -> str:
    """16-bit binary in 4-bit groups, each followed by a space (255 -> '0000 0000 1111 1111 ')."""
    return _NIBBLE.sub(r"\1 ", f"{n:016b}")


def build_row(
    register_class: RegisterClass,
    start_address: int,
    index: int,
    value: bool | int,
    name: str = "",
) -> ResultRow:
    """
    Assemble the row for the index-th value of a read starting at start_address.

    Register ids are 1-based (address 4 of the holding registers is HR5).
    Bit classes carry the boolean; register classes carry decimal/hex/binary.
    """
    address = start_address + index
    register_id = f"{register_class.prefix}{address + 1}"
    address_hex = to_hex_display(address)
    if register_class.is_bit:
        return ResultRow(register_id=register_id, address=address_hex, name=name, value=bool(value))
    word = int(value)
    return ResultRow(
        register_id=register_id,
        address=address_hex,
        name=name,
        decimal=word,
        hex=to_hex_display(word),
        binary=to_binary_display(word),
    )


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def render_table(rows: Sequence[ResultRow]) -> str:
    """Render rows as an aligned text table with a header line; empty input renders as ""."""
    if not rows:
        return ""
    records = [row.as_dict() for row in rows]
    headers = list(records[0].keys())
    cells = [[_cell(rec[h]) for h in headers] for rec in records]
    widths = [max(len(h), *(len(line[i]) for line in cells)) for i, h in enumerate(headers)]

    def fmt(line: list[str]) -> str:
        return " | ".join(c.ljust(w) for c, w in zip(line, widths)).rstrip()

    sep = "-+-".join("-" * w for w in widths)
    return "\n".join([fmt(headers), sep, *(fmt(line) for line in cells)])
