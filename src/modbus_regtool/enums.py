"""Scrape `enum NAME { FIELD = 0xADDR, ... };` blocks from C/C++ headers into a register-names document."""

import json
import logging
import re
from pathlib import Path
from typing import Any

from .types import RegisterClass

logger = logging.getLogger(__name__)

# FIELD = 0xADDR followed by a comma, a // comment, or end of line
_FIELD_PATTERN = re.compile(r"^(\w+)\s*=\s*(0x[0-9A-Fa-f]+)\s*(,|/|$)")

DEFAULT_ENUM_NAMES: dict[RegisterClass, str] = {
    RegisterClass.COIL: "LOCAL_COILS",
    RegisterClass.DISCRETE_INPUT: "LOCAL_DISCRETE_INPUTS",
    RegisterClass.HOLDING_REGISTER: "LOCAL_HOLDING_REGISTERS",
    RegisterClass.INPUT_REGISTER: "LOCAL_INPUT_REGISTERS",
}


def parse_enum_block(text: str, enum_name: str) -> dict[str, str] | None:
    """
    Return {"0xADDR": "FIELD"} for the fields of enum_name, or None if the enum is absent.

    Enumerators without an explicit address (the trailing COUNT/MAX sentinel)
    are skipped.
    """
    block = re.search(rf"enum\s+{re.escape(enum_name)}\s*\{{([^}}]*)\}};", text, re.MULTILINE)
    if block is None:
        logger.debug("enum %s not found", enum_name)
        return None

    fields: dict[str, str] = {}
    for line in block.group(1).splitlines():
        line = line.strip()
        if not line or "=" not in line:
            continue
        m = _FIELD_PATTERN.match(line)
        if m:
            fields[m.group(2)] = m.group(1)
        else:
            logger.debug("enum %s: skipping unparsed line %r", enum_name, line)
    return fields


def build_register_names(
    text: str,
    coils: str = DEFAULT_ENUM_NAMES[RegisterClass.COIL],
    discrete_inputs: str = DEFAULT_ENUM_NAMES[RegisterClass.DISCRETE_INPUT],
    holding_registers: str = DEFAULT_ENUM_NAMES[RegisterClass.HOLDING_REGISTER],
    input_registers: str = DEFAULT_ENUM_NAMES[RegisterClass.INPUT_REGISTER],
) -> dict[str, Any]:
    """Build the register-names document; classes whose enum is missing map to None (disabled)."""
    enum_names = {
        RegisterClass.COIL: coils,
        RegisterClass.DISCRETE_INPUT: discrete_inputs,
        RegisterClass.HOLDING_REGISTER: holding_registers,
        RegisterClass.INPUT_REGISTER: input_registers,
    }
    return {rc.names_key: parse_enum_block(text, enum_names[rc]) for rc in RegisterClass}


def write_register_names(source: str | Path, output: str | Path, **enum_names: str) -> dict[str, Any]:
    """
    Scrape source and write the document as indented JSON to output. Returns the document.

    Keyword arguments (coils, discrete_inputs, ...) are passed to build_register_names.
    """
    text = Path(source).read_text(encoding="utf-8")
    document = build_register_names(text, **enum_names)
    Path(output).write_text(json.dumps(document, indent=2), encoding="utf-8")
    logger.info("Wrote register names to %s", output)
    return document
