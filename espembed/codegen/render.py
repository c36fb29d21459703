"""Jinja environment and C literal filters used by the code generator."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).with_name("templates")

BYTES_PER_LINE = 16

_HEX = [f"0x{value:02x}" for value in range(256)]
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def c_string(value: str) -> str:
    """Quote ``value`` as a C string literal, escaping non-printable bytes in octal."""
    parts = ['"']
    for char in str(value):
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif " " <= char <= "~":
            parts.append(char)
        else:
            parts.extend(f"\\{byte:03o}" for byte in char.encode("utf-8"))
    parts.append('"')
    return "".join(parts)


def c_array(data: bytes) -> str:
    """Format ``data`` as a brace-enclosed initializer, ``{}`` when empty."""
    if not data:
        return "{}"
    lines = []
    for start in range(0, len(data), BYTES_PER_LINE):
        chunk = data[start : start + BYTES_PER_LINE]
        lines.append("  " + ", ".join(_HEX[byte] for byte in chunk))
    return "{\n" + ",\n".join(lines) + "\n}"


def c_comment(value: str) -> str:
    """Flatten ``value`` so it cannot end or extend a ``//`` comment."""
    return str(value).replace("\r", " ").replace("\n", " ").replace("\\", "/")


def create_environment() -> Environment:
    """Return the environment that renders the C++ templates."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    env.filters["c_string"] = c_string
    env.filters["c_array"] = c_array
    env.filters["c_comment"] = c_comment
    return env


__all__ = ["BYTES_PER_LINE", "TEMPLATES_DIR", "c_array", "c_comment", "c_string", "create_environment"]
