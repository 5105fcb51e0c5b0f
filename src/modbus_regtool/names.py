"""NameTable: read-only (register class, address) -> symbolic name lookup loaded from register-names JSON."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .formatting import to_hex_display
from .types import RegisterClass

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Canonical key form: uppercase hex digits, lowercase 0x prefix (0x00ab -> 0x00AB)."""
    return address.strip().upper().replace("0X", "0x", 1)


def _parse_class_names(key: str, raw: Any) -> Mapping[str, str] | None:
    """Build one per-class mapping. false/null/missing disables the class."""
    if raw is None or raw is False:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError(f"{key} must be an object of \"0xADDR\": \"NAME\" pairs or false, got {type(raw).__name__}")
    names: dict[str, str] = {}
    for addr, name in raw.items():
        norm = normalize_address(str(addr))
        if norm in names and names[norm] != name:
            raise ValueError(f"Duplicate address in {key}: {norm}")
        names[norm] = str(name)
    return MappingProxyType(names)


class NameTable:
    """
    Immutable per-class map of canonical hex addresses to register names.

    A class whose table is absent (``false`` in the JSON document) resolves
    every address to the empty string, the same as a class with no entries.
    """

    def __init__(self, tables: Mapping[RegisterClass, Any] | None = None) -> None:
        tables = tables or {}
        self._tables = MappingProxyType(
            {rc: _parse_class_names(rc.names_key, tables.get(rc)) for rc in RegisterClass}
        )

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "NameTable":
        """Build from the register-names document ({"COIL_NAMES": {...} | false, ...})."""
        return cls({rc: data.get(rc.names_key) for rc in RegisterClass})

    def resolve(self, register_class: RegisterClass, address: int | str) -> str:
        """Return the name bound to address, or "" when the class is disabled or has no entry."""
        names = self._tables[register_class]
        if not names:
            return ""
        key = to_hex_display(address) if isinstance(address, int) else normalize_address(address)
        return names.get(key, "")

    def is_enabled(self, register_class: RegisterClass) -> bool:
        return self._tables[register_class] is not None

    def __len__(self) -> int:
        return sum(len(names) for names in self._tables.values() if names)


def load_name_table(path: str | Path | None) -> NameTable:
    """Load a NameTable from a register-names JSON file; None yields an empty table."""
    if path is None:
        logger.debug("No register-names file configured; names disabled")
        return NameTable()
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Register names file not found: {path}") from None
    if not isinstance(data, dict):
        raise ValueError(f"Register names file must contain a JSON object: {path}")
    table = NameTable.from_document(data)
    logger.debug("NameTable loaded from %s: %d entries", path, len(table))
    return table
