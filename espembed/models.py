"""Core data models shared across espembed components."""

from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class FileRecord:
    """A web asset read into memory, ready for code generation."""

    filename: str
    content: bytes
    content_gzip: bytes
    is_gzip: bool
    mime: str
    sha256: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def gzip_size(self) -> int:
        return len(self.content_gzip)

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename).suffix
        return suffix[1:].upper() if suffix else ""


@dataclass(frozen=True)
class ExtensionGroup:
    """Number of embedded files sharing one extension."""

    extension: str
    count: int
