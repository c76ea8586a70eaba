"""
abbrex library: parsing, resolution, transforms, output and tracking.
"""

from .scanner import AbbreviationError, ScannerError
from .expand import expand, parse_markup, parse_stylesheet, stringify_markup, stringify_stylesheet
from .extract import extract_abbreviation, ExtractedAbbreviation
from .tracker import AbbreviationTrackingController
from .log import LOG, state_connectToLogger

__all__ = [
    "AbbreviationError",
    "ScannerError",
    "expand",
    "parse_markup",
    "parse_stylesheet",
    "stringify_markup",
    "stringify_stylesheet",
    "extract_abbreviation",
    "ExtractedAbbreviation",
    "AbbreviationTrackingController",
    "LOG",
    "state_connectToLogger",
]
