"""Embed static web assets into a C++ header for the ESP32 Arduino WebServer."""

from .codegen import CppCodeGenerator, generate_cpp
from .config import EmbedOptions, FeatureMode, ResolvedConfig, resolve_config
from .models import ExtensionGroup, FileRecord

__all__ = [
    "CppCodeGenerator",
    "EmbedOptions",
    "ExtensionGroup",
    "FeatureMode",
    "FileRecord",
    "ResolvedConfig",
    "generate_cpp",
    "resolve_config",
]
