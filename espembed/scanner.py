"""Source directory scanning: reads, hashes and compresses web assets."""

from __future__ import annotations

import gzip
import hashlib
import mimetypes
import os
from collections import Counter
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger
from .models import ExtensionGroup, FileRecord

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_PRECOMPRESSED_SUFFIXES = (".gz", ".br")

DEFAULT_MIME = "text/plain"

# A compressed copy is kept only for files above this size ...
GZIP_MIN_SIZE = 1024
# ... that shrink below this fraction of their original size.
GZIP_MAX_RATIO = 0.85


class ScanError(RuntimeError):
    """Raised when the source directory yields no embeddable files."""


def _matches_any(rel_path: str, patterns: Sequence[str]) -> bool:
    name = rel_path.rsplit("/", 1)[-1]
    return any(fnmatchcase(rel_path, pattern) or fnmatchcase(name, pattern) for pattern in patterns)


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            yield current_dir / filename


def _hash_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _compress(data: bytes) -> bytes:
    # mtime=0 keeps the gzip header, and therefore the generated header, reproducible
    return gzip.compress(data, compresslevel=9, mtime=0)


def _detect_mime(rel_path: str) -> str:
    mime, _ = mimetypes.guess_type(rel_path, strict=False)
    return mime or DEFAULT_MIME


def build_record(rel_path: str, content: bytes) -> FileRecord:
    """Hash, compress and classify a single file's content."""
    compressed = _compress(content)
    is_gzip = len(content) > GZIP_MIN_SIZE and len(compressed) < len(content) * GZIP_MAX_RATIO
    return FileRecord(
        filename=rel_path,
        content=content,
        content_gzip=compressed if is_gzip else b"",
        is_gzip=is_gzip,
        mime=_detect_mime(rel_path),
        sha256=_hash_bytes(content),
    )


def group_by_extension(records: Sequence[FileRecord]) -> List[ExtensionGroup]:
    """Count records per upper-case extension, sorted by extension."""
    counts = Counter(record.extension for record in records)
    return [ExtensionGroup(extension=ext, count=counts[ext]) for ext in sorted(counts)]


class AssetScanner:
    """Walks a build output directory and produces file records."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path, exclude: Sequence[str] = ()) -> List[FileRecord]:
        """Return records for every file below ``root`` in path order."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        paths = {path.relative_to(root_path).as_posix(): path for path in _iter_files(root_path)}

        included = set()
        for rel_path in sorted(paths):
            if _matches_any(rel_path, exclude):
                self.logger.debug("Excluded %s", rel_path)
            else:
                included.add(rel_path)

        records: List[FileRecord] = []
        for rel_path in sorted(included):
            if rel_path.endswith(_PRECOMPRESSED_SUFFIXES) and rel_path[:-3] in included:
                self.logger.warning(
                    "Skipping %s: pre-compressed copy of %s", rel_path, rel_path[:-3]
                )
                continue

            record = build_record(rel_path, paths[rel_path].read_bytes())
            if record.is_gzip:
                ratio = round(record.gzip_size * 100 / record.size)
                self.logger.info(
                    "%s: %d -> %d bytes (gzip, %d%%)", rel_path, record.size, record.gzip_size, ratio
                )
            else:
                self.logger.info("%s: %d bytes", rel_path, record.size)
            records.append(record)

        if not records:
            raise ScanError(f"No files to embed in {root_path}")
        return records


__all__ = [
    "AssetScanner",
    "DEFAULT_MIME",
    "GZIP_MAX_RATIO",
    "GZIP_MIN_SIZE",
    "ScanError",
    "build_record",
    "group_by_extension",
]
