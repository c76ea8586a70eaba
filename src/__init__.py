"""
abbrex - Emmet-style abbreviation expander

Expands short abbreviations such as `ul>li.item$*3` or `m10+p5` into
markup and stylesheet code, and tracks abbreviations typed live in an
editor.
"""

__version__ = "1.0.0"

from .lib import (
    expand,
    extract_abbreviation,
    parse_markup,
    parse_stylesheet,
    stringify_markup,
    stringify_stylesheet,
    AbbreviationTrackingController,
    AbbreviationError,
    LOG,
    state_connectToLogger,
)
from .config import resolve_config, Config, SnippetCache

__all__ = [
    "expand",
    "extract_abbreviation",
    "parse_markup",
    "parse_stylesheet",
    "stringify_markup",
    "stringify_stylesheet",
    "resolve_config",
    "Config",
    "SnippetCache",
    "AbbreviationTrackingController",
    "AbbreviationError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
