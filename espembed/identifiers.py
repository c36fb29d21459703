"""C identifier and route derivation for embedded files."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

INDEX_FILENAME = "index.html"

_NON_SYMBOL_RE = re.compile(r"[^A-Za-z0-9]")


class GenerationError(ValueError):
    """Raised when the input file set cannot be turned into a valid header."""


class DuplicateFileError(GenerationError):
    """Raised when the same filename appears more than once."""


class SymbolCollisionError(GenerationError):
    """Raised when two filenames sanitize to the same C identifier."""

    def __init__(self, symbol: str, first: str, second: str) -> None:
        super().__init__(
            f"'{first}' and '{second}' both map to the identifier '{symbol}'; rename one of them"
        )
        self.symbol = symbol
        self.first = first
        self.second = second


def symbol_for(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9]`` with an underscore."""
    return _NON_SYMBOL_RE.sub("_", filename)


def upper_symbol_for(filename: str) -> str:
    return symbol_for(filename).upper()


def route_for(filename: str, base_path: str = "") -> str:
    """URL under which ``filename`` is served."""
    return f"{base_path}/{filename}"


def default_route_for(filename: str, base_path: str = "") -> Optional[str]:
    """Extra route for the index file, ``None`` for every other file."""
    if filename != INDEX_FILENAME:
        return None
    return base_path or "/"


def check_unique_symbols(filenames: Iterable[str]) -> Dict[str, str]:
    """Return ``filename -> symbol`` or fail on duplicates and collisions."""
    symbols: Dict[str, str] = {}
    owners: Dict[str, str] = {}
    for filename in filenames:
        if filename in symbols:
            raise DuplicateFileError(f"'{filename}' is listed more than once")
        symbol = symbol_for(filename)
        if symbol in owners:
            raise SymbolCollisionError(symbol, owners[symbol], filename)
        owners[symbol] = filename
        symbols[filename] = symbol
    return symbols


__all__ = [
    "DuplicateFileError",
    "GenerationError",
    "INDEX_FILENAME",
    "SymbolCollisionError",
    "check_unique_symbols",
    "default_route_for",
    "route_for",
    "symbol_for",
    "upper_symbol_for",
]
