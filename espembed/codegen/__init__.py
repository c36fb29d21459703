"""C++ code generation for the Arduino WebServer engine."""

from ..identifiers import DuplicateFileError, GenerationError, SymbolCollisionError
from .assembler import CHUNK_SIZE, CppCodeGenerator, generate_cpp
from .emitter import FileBlock, FileEmitter, ManifestEntry

__all__ = [
    "CHUNK_SIZE",
    "CppCodeGenerator",
    "DuplicateFileError",
    "FileBlock",
    "FileEmitter",
    "GenerationError",
    "ManifestEntry",
    "SymbolCollisionError",
    "generate_cpp",
]
