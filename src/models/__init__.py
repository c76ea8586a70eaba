"""
Models package for abbrex

Data structures for abbreviation trees, stylesheet nodes, tracker states
and the CLI pipeline.
"""

from .state import ProgramState, pipeline
from .tracker import AbbreviationTracker, ErrorTracker, EditorAdapter, EditorState

__all__ = [
    "ProgramState",
    "pipeline",
    "AbbreviationTracker",
    "ErrorTracker",
    "EditorAdapter",
    "EditorState",
]
