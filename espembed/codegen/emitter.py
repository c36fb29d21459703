"""Per-file code emission: data arrays, ETag constants, manifest rows and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from jinja2 import Environment

from ..config import FeatureMode, ResolvedConfig
from ..identifiers import default_route_for, route_for
from ..models import FileRecord
from .render import create_environment


@dataclass(frozen=True)
class Feature:
    """A tri-state feature as seen by the templates."""

    mode: FeatureMode
    guard: str

    @property
    def active(self) -> bool:
        return self.mode is not FeatureMode.DISABLED

    @property
    def deferred(self) -> bool:
        return self.mode is FeatureMode.DEFERRED


@dataclass(frozen=True)
class ManifestEntry:
    """One row of the generated ``<PREFIX>_FILES`` table."""

    path: str
    mime: str
    size: int


@dataclass(frozen=True)
class FileBlock:
    """Rendered fragments for a single file."""

    filename: str
    symbol: str
    routes: Tuple[str, ...]
    declarations: str
    manifest_entry: ManifestEntry
    handlers: str


def feature_flags(config: ResolvedConfig) -> Tuple[Feature, Feature]:
    """Return the ``(etag, gzip)`` features with their ``#ifdef`` guard names."""
    prefix = config.symbol_prefix
    return (
        Feature(config.etag, f"{prefix}_ENABLE_ETAG"),
        Feature(config.gzip, f"{prefix}_ENABLE_GZIP"),
    )


def cache_control(cache_seconds: int) -> str:
    if cache_seconds > 0:
        return f"max-age={cache_seconds:d}"
    return "no-cache"


class FileEmitter:
    """Renders the per-file fragments for one resolved configuration."""

    DATA_TEMPLATE = "file_data.j2"
    HANDLER_TEMPLATE = "handler.j2"

    def __init__(self, config: ResolvedConfig, env: Environment | None = None) -> None:
        self.config = config
        self._env = env or create_environment()
        self.etag, self.gzip = feature_flags(config)
        self._cache_control = cache_control(config.cache_seconds)

    def serves_gzip(self, record: FileRecord) -> bool:
        """Whether a compressed payload is emitted for ``record``."""
        return self.gzip.active and record.is_gzip and bool(record.content_gzip)

    def routes(self, record: FileRecord) -> Tuple[str, ...]:
        routes = [route_for(record.filename, self.config.base_path)]
        default_route = default_route_for(record.filename, self.config.base_path)
        if default_route is not None:
            routes.append(default_route)
        return tuple(routes)

    def emit(self, record: FileRecord, symbol: str) -> FileBlock:
        routes = self.routes(record)
        context = {
            "record": record,
            "symbol": symbol,
            "prefix": self.config.symbol_prefix,
            "etag": self.etag,
            "gzip": self.gzip,
            "serve_gzip": self.serves_gzip(record),
            "cache_control": self._cache_control,
        }
        declarations = self._env.get_template(self.DATA_TEMPLATE).render(**context)
        handler_template = self._env.get_template(self.HANDLER_TEMPLATE)
        handlers = "\n\n".join(handler_template.render(route=route, **context) for route in routes)
        return FileBlock(
            filename=record.filename,
            symbol=symbol,
            routes=routes,
            declarations=declarations,
            manifest_entry=ManifestEntry(path=routes[0], mime=record.mime, size=record.size),
            handlers=handlers,
        )
