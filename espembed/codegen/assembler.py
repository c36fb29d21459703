"""Assembles the complete WebServer header from per-file fragments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from jinja2 import Environment

from ..config import FeatureMode, ResolvedConfig
from ..identifiers import check_unique_symbols, upper_symbol_for
from ..logging import get_logger
from ..models import ExtensionGroup, FileRecord
from .emitter import Feature, FileBlock, FileEmitter
from .render import create_environment

CHUNK_SIZE = 4096


@dataclass(frozen=True)
class FlagWarning:
    guard: str
    state: str


class CppCodeGenerator:
    """Turns file records into a single C++ header for the Arduino WebServer."""

    TEMPLATE = "webserver.h.j2"

    def __init__(self, config: ResolvedConfig, env: Environment | None = None) -> None:
        self.config = config
        self._env = env or create_environment()
        self.emitter = FileEmitter(config, self._env)
        self.logger = get_logger("codegen")

    def generate(
        self,
        records: Sequence[FileRecord],
        groups: Iterable[ExtensionGroup] = (),
    ) -> str:
        """Return the header text; identical inputs give byte-identical output."""
        symbols = check_unique_symbols(record.filename for record in records)
        blocks: List[FileBlock] = [
            self.emitter.emit(record, symbols[record.filename]) for record in records
        ]
        self.logger.debug(
            "Rendering %d file(s) with etag=%s gzip=%s",
            len(blocks),
            self.config.etag.value,
            self.config.gzip.value,
        )

        text = self._env.get_template(self.TEMPLATE).render(
            config=self.config,
            prefix=self.config.symbol_prefix,
            etag=self.emitter.etag,
            warnings=_flag_warnings((self.emitter.etag, self.emitter.gzip)),
            blocks=blocks,
            total_size=sum(record.size for record in records),
            total_gzip_size=sum(
                record.gzip_size for record in records if self.emitter.serves_gzip(record)
            ),
            extension_counts=_extension_counts(groups),
            chunk_size=CHUNK_SIZE,
        )
        return text.rstrip() + "\n"


def generate_cpp(
    records: Sequence[FileRecord],
    groups: Iterable[ExtensionGroup],
    config: ResolvedConfig,
) -> str:
    """Convenience wrapper around :class:`CppCodeGenerator`."""
    return CppCodeGenerator(config).generate(records, groups)


def _flag_warnings(features: Iterable[Feature]) -> List[FlagWarning]:
    warnings: List[FlagWarning] = []
    for feature in features:
        if feature.mode is FeatureMode.ENABLED:
            warnings.append(FlagWarning(feature.guard, "ON"))
        elif feature.mode is FeatureMode.DISABLED:
            warnings.append(FlagWarning(feature.guard, "OFF"))
    return warnings


def _extension_counts(groups: Iterable[ExtensionGroup]) -> List[Tuple[str, int]]:
    return [
        (upper_symbol_for(group.extension), group.count)
        for group in groups
        if group.extension
    ]
