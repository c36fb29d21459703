"""Tests for espembed.identifiers."""

from __future__ import annotations

import re

import pytest

from espembed.identifiers import (
    DuplicateFileError,
    SymbolCollisionError,
    check_unique_symbols,
    default_route_for,
    route_for,
    symbol_for,
    upper_symbol_for,
)

PATHOLOGICAL_NAMES = [
    "index.html",
    "assets/app-3f2a.js",
    "fonts/Open Sans.woff2",
    "ünïcödé.css",
    "a..b",
    ".hidden",
    "0.js",
    "we\"ird'name$.txt",
    "dir\\file.txt",
]


@pytest.mark.parametrize("filename", PATHOLOGICAL_NAMES)
def test_symbol_contains_only_identifier_characters(filename: str) -> None:
    assert re.fullmatch(r"[A-Za-z0-9_]+", symbol_for(filename))


def test_symbol_examples() -> None:
    assert symbol_for("index.html") == "index_html"
    assert symbol_for("assets/app-3f2a.js") == "assets_app_3f2a_js"
    assert upper_symbol_for("assets/app.js") == "ASSETS_APP_JS"


def test_distinct_names_map_to_distinct_symbols() -> None:
    symbols = check_unique_symbols(PATHOLOGICAL_NAMES)

    assert len(set(symbols.values())) == len(PATHOLOGICAL_NAMES)
    assert symbols["index.html"] == "index_html"


def test_collision_is_reported() -> None:
    with pytest.raises(SymbolCollisionError) as excinfo:
        check_unique_symbols(["img/a.png", "img_a.png"])

    assert excinfo.value.symbol == "img_a_png"
    assert (excinfo.value.first, excinfo.value.second) == ("img/a.png", "img_a.png")


def test_duplicate_filename_is_reported() -> None:
    with pytest.raises(DuplicateFileError):
        check_unique_symbols(["index.html", "index.html"])


def test_route_for_with_and_without_base_path() -> None:
    assert route_for("style.css") == "/style.css"
    assert route_for("css/style.css", "/ui") == "/ui/css/style.css"


def test_default_route_only_for_index_html() -> None:
    assert default_route_for("index.html") == "/"
    assert default_route_for("index.html", "/ui") == "/ui"
    assert default_route_for("index.htm") is None
    assert default_route_for("sub/index.html") is None
    assert default_route_for("style.css", "/ui") is None
