"""Configuration loading (.espembed.yml) and resolution for espembed."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import yaml

DEFAULT_CONFIG_NAME = ".espembed.yml"
SUPPORTED_ENGINES = ("webserver",)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be parsed or is invalid."""


class FeatureMode(str, Enum):
    """Tri-state switch for a generated feature."""

    ENABLED = "true"
    DISABLED = "false"
    DEFERRED = "compiler"

    @classmethod
    def parse(cls, value: object) -> "FeatureMode":
        """Map any raw value onto a mode; unknown values defer to the firmware build."""
        if isinstance(value, bool):
            value = "true" if value else "false"
        if value == "true":
            return cls.ENABLED
        if value == "false":
            return cls.DISABLED
        return cls.DEFERRED


@dataclass
class EmbedOptions:
    """Raw settings from .espembed.yml and the command line."""

    source_path: Optional[str | Path] = None
    output_file: str | Path = Path("svelteesp32.h")
    engine: str = "webserver"
    etag: str = "false"
    gzip: str = "true"
    cache_time: int = 0
    created: bool = False
    version: str = ""
    entry_point: str = "initSvelteStaticFiles"
    define: str = "SVELTEESP32"
    exclude: List[str] = field(default_factory=list)
    base_path: str = ""


@dataclass(frozen=True)
class ResolvedConfig:
    """Fixed decision set read by every generation step."""

    symbol_prefix: str
    etag: FeatureMode
    gzip: FeatureMode
    cache_seconds: int
    base_path: str
    entry_point: str
    version: Optional[str]
    summary: str
    created: Optional[str] = None


# rc file key -> EmbedOptions attribute
_KEY_MAP: Dict[str, str] = {
    "sourcepath": "source_path",
    "outputfile": "output_file",
    "engine": "engine",
    "etag": "etag",
    "gzip": "gzip",
    "cachetime": "cache_time",
    "created": "created",
    "version": "version",
    "espmethod": "entry_point",
    "define": "define",
    "exclude": "exclude",
    "basepath": "base_path",
}


def load_config(config_path: Path) -> EmbedOptions:
    """Load options from an rc file; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return EmbedOptions()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    unknown = sorted(str(key) for key in data if key not in _KEY_MAP)
    if unknown:
        raise ConfigError(f"Unknown keys in {config_file.name}: {', '.join(unknown)}")

    root = config_file.parent
    options = EmbedOptions()

    source_path = _as_str(data.get("sourcepath"))
    if source_path:
        options.source_path = root / source_path
    output_file = _as_str(data.get("outputfile"))
    if output_file:
        options.output_file = root / output_file

    for key in ("engine", "version", "espmethod", "define", "basepath"):
        value = _as_str(data.get(key))
        if value is not None:
            setattr(options, _KEY_MAP[key], value)

    for key in ("etag", "gzip"):
        value = data.get(key)
        if value is not None:
            setattr(options, key, FeatureMode.parse(value).value)

    cache_time = data.get("cachetime")
    if cache_time is not None:
        parsed = _as_int(cache_time)
        if parsed is None:
            raise ConfigError(f"cachetime must be an integer, got {cache_time!r}")
        options.cache_time = parsed

    created = data.get("created")
    if created is not None:
        parsed_bool = _as_bool(created)
        if parsed_bool is None:
            raise ConfigError(f"created must be a boolean, got {created!r}")
        options.created = parsed_bool

    options.exclude = _as_str_list(data.get("exclude"))
    return options


def merge_options(base: EmbedOptions, overrides: Dict[str, Any]) -> EmbedOptions:
    """Return ``base`` with every non-``None`` override applied."""
    known = {item.name for item in fields(EmbedOptions)}
    changes: Dict[str, Any] = {}
    for name, value in overrides.items():
        if name not in known:
            raise ConfigError(f"Unknown option: {name}")
        if value is None:
            continue
        if name == "exclude":
            value = list(base.exclude) + list(value)
        changes[name] = value
    return replace(base, **changes)


def validate_options(options: EmbedOptions) -> None:
    """Reject option combinations that would produce an uncompilable header."""
    if options.source_path is None:
        raise ConfigError("A source path is required (--sourcepath or 'sourcepath' in the rc file)")
    if options.engine not in SUPPORTED_ENGINES:
        supported = ", ".join(SUPPORTED_ENGINES)
        raise ConfigError(f"Unsupported engine '{options.engine}' (supported: {supported})")
    if not _IDENTIFIER_RE.match(options.define):
        raise ConfigError(f"define must be a valid C identifier, got '{options.define}'")
    if not _IDENTIFIER_RE.match(options.entry_point):
        raise ConfigError(f"espmethod must be a valid C identifier, got '{options.entry_point}'")
    if options.cache_time < 0:
        raise ConfigError(f"cachetime must not be negative, got {options.cache_time}")
    if options.base_path:
        if not options.base_path.startswith("/"):
            raise ConfigError(f"basepath must start with '/', got '{options.base_path}'")
        if "//" in options.base_path:
            raise ConfigError(f"basepath must not contain '//', got '{options.base_path}'")


def format_configuration(options: EmbedOptions) -> str:
    """Render the options as the single line embedded in the header comment."""
    parts = [
        f"engine={options.engine}",
        f"sourcepath={Path(options.source_path).as_posix() if options.source_path else ''}",
        f"outputfile={Path(options.output_file).as_posix()}",
        f"etag={options.etag}",
        f"gzip={options.gzip}",
        f"cachetime={options.cache_time}",
        f"created={'true' if options.created else 'false'}",
    ]
    if options.version:
        parts.append(f"version={options.version}")
    parts.append(f"espmethod={options.entry_point}")
    parts.append(f"define={options.define}")
    if options.base_path:
        parts.append(f"basepath={options.base_path}")
    if options.exclude:
        parts.append(f"exclude={','.join(options.exclude)}")
    return " ".join(parts)


def resolve_config(
    options: EmbedOptions,
    *,
    now: datetime | None = None,
    formatter: Callable[[EmbedOptions], str] = format_configuration,
) -> ResolvedConfig:
    """Normalise raw options into the decision set used during generation."""
    base_path = options.base_path
    if base_path.endswith("/"):
        base_path = base_path[:-1]

    created = None
    if options.created:
        created = (now or datetime.now(UTC)).isoformat(timespec="seconds")

    return ResolvedConfig(
        symbol_prefix=options.define,
        etag=FeatureMode.parse(options.etag),
        gzip=FeatureMode.parse(options.gzip),
        cache_seconds=max(int(options.cache_time), 0),
        base_path=base_path,
        entry_point=options.entry_point,
        version=options.version or None,
        summary=formatter(options),
        created=created,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / DEFAULT_CONFIG_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
