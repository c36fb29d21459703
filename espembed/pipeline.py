"""Scan -> generate -> write orchestration for the espembed CLI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .codegen import CppCodeGenerator
from .config import EmbedOptions, ResolvedConfig, resolve_config, validate_options
from .logging import get_logger
from .scanner import AssetScanner, group_by_extension


@dataclass
class EmbedResult:
    """Outcome of a pipeline run."""

    output_path: Path
    file_count: int
    total_size: int
    total_gzip_size: int
    text: str
    written: bool


class EmbedPipeline:
    """Runs the scanner, the code generator and the file-write step."""

    def __init__(
        self,
        scanner: AssetScanner | None = None,
        generator_factory: Callable[[ResolvedConfig], CppCodeGenerator] = CppCodeGenerator,
    ) -> None:
        self.scanner = scanner or AssetScanner()
        self._generator_factory = generator_factory
        self.logger = get_logger("pipeline")

    def run(
        self,
        options: EmbedOptions,
        *,
        dry_run: bool = False,
        now: Optional[datetime] = None,
    ) -> EmbedResult:
        validate_options(options)

        config = resolve_config(options, now=now)
        records = self.scanner.scan(options.source_path, options.exclude)
        groups = group_by_extension(records)
        generator = self._generator_factory(config)
        text = generator.generate(records, groups)

        output_path = Path(options.output_file)
        result = EmbedResult(
            output_path=output_path,
            file_count=len(records),
            total_size=sum(record.size for record in records),
            total_gzip_size=sum(
                record.gzip_size for record in records if generator.emitter.serves_gzip(record)
            ),
            text=text,
            written=False,
        )

        if dry_run:
            self.logger.info("Dry run: %s not written", output_path)
            return result

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
        result.written = True
        self.logger.info(
            "Wrote %s (%d files, %d bytes, %d bytes gzip)",
            output_path,
            result.file_count,
            result.total_size,
            result.total_gzip_size,
        )
        return result
