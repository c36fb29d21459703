"""CLI entrypoint for espembed."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .codegen import GenerationError
from .config import DEFAULT_CONFIG_NAME, ConfigError, EmbedOptions, load_config, merge_options
from .logging import configure_logging
from .pipeline import EmbedPipeline
from .scanner import ScanError

_TRI_STATE = ("true", "false", "compiler")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="espembed",
        description="Embed static web assets into a C++ header for the ESP32 Arduino WebServer.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only print warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Also write a full debug log of the run to PATH.",
    )
    parser.add_argument(
        "-s",
        "--sourcepath",
        type=Path,
        help="Directory holding the built web assets.",
    )
    parser.add_argument(
        "-o",
        "--outputfile",
        type=Path,
        help="Header file to generate (defaults to svelteesp32.h).",
    )
    parser.add_argument(
        "-e",
        "--engine",
        choices=("webserver",),
        help="Target web server library.",
    )
    parser.add_argument(
        "--etag",
        choices=_TRI_STATE,
        help="ETag support: always on, always off, or decided by the firmware build.",
    )
    parser.add_argument(
        "--gzip",
        choices=_TRI_STATE,
        help="Serve gzip-compressed payloads: always, never, or decided by the firmware build.",
    )
    parser.add_argument(
        "--cachetime",
        type=int,
        help="Cache-Control max-age in seconds (0 sends no-cache).",
    )
    parser.add_argument(
        "--created",
        action="store_true",
        default=None,
        help="Add a creation timestamp comment to the header.",
    )
    parser.add_argument(
        "--version",
        dest="version",
        help="Version string exposed as <DEFINE>_VERSION.",
    )
    parser.add_argument(
        "--espmethod",
        help="Name of the generated init function.",
    )
    parser.add_argument(
        "--define",
        help="Prefix for every generated macro and helper name.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Glob of files to leave out; may be repeated.",
    )
    parser.add_argument(
        "--basepath",
        help="URL prefix for every route, e.g. /ui.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help=f"Configuration file (defaults to {DEFAULT_CONFIG_NAME} in the current directory).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Generate the header without writing it.",
    )
    return parser


def _options_from_args(args: argparse.Namespace) -> EmbedOptions:
    base = load_config(args.config)
    return merge_options(
        base,
        {
            "source_path": args.sourcepath,
            "output_file": args.outputfile,
            "engine": args.engine,
            "etag": args.etag,
            "gzip": args.gzip,
            "cache_time": args.cachetime,
            "created": args.created,
            "version": args.version,
            "entry_point": args.espmethod,
            "define": args.define,
            "exclude": args.exclude,
            "base_path": args.basepath,
        },
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for espembed."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        options = _options_from_args(args)
        result = EmbedPipeline().run(options, dry_run=bool(args.dry_run))
    except ConfigError as exc:
        parser.exit(1, f"espembed: configuration error: {exc}\n")
    except (FileNotFoundError, NotADirectoryError, ScanError) as exc:
        parser.exit(1, f"espembed: {exc}\n")
    except GenerationError as exc:
        parser.exit(1, f"espembed: generation failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"espembed: could not write output: {exc}\n")

    if result.written:
        print(f"{_relativize(result.output_path)} created with {result.file_count} file(s)")
    else:
        print(f"{result.file_count} file(s) processed (dry-run, nothing written)")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
