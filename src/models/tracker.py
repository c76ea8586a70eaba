"""
Abbreviation tracker models

A tracker follows an abbreviation while it is being typed in an editor.
Its range covers the abbreviation text plus an activation prefix of
`offset` characters (the `<` of JSX abbreviations).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Protocol, Tuple

from ..config.resolve import Config

KIND_ABBREVIATION = 'abbreviation'
KIND_ERROR = 'error'


@dataclass
class TrackerError:
    """Parse failure shown as live feedback; pos is relative to the abbreviation"""
    message: str
    pos: Optional[int] = None


@dataclass
class Tracker:
    """
    Base tracker

    Attributes:
        abbreviation: Tracked abbreviation text, without prefix
        start: Range start in the document, prefix included
        end: Range end in the document
        config: Config the abbreviation is expanded with
        forced: Started by an explicit command, not by typing
        offset: Length of the activation prefix
    """
    abbreviation: str
    start: int
    end: int
    config: Config
    forced: bool = False
    offset: int = 0

    @property
    def range(self) -> Tuple[int, int]:
        return (self.start, self.end)

    @property
    def kind(self) -> str:
        return KIND_ABBREVIATION


@dataclass
class AbbreviationTracker(Tracker):
    """
    Tracker over a valid abbreviation

    Attributes:
        preview: Expanded text for live preview
        simple: Single element with no children, e.g. plain word typed
    """
    preview: str = ''
    simple: bool = False


@dataclass
class ErrorTracker(Tracker):
    error: TrackerError = field(default_factory=lambda: TrackerError(message=''))

    @property
    def kind(self) -> str:
        return KIND_ERROR


@dataclass
class EditorState:
    """
    Per-editor tracking state

    Attributes:
        tracker: Active tracker, if any
        last_pos: Caret offset after the previous event
        last_length: Document length after the previous event
        cache: Tracker stopped by the last edit, kept for undo restore
    """
    tracker: Optional[Tracker] = None
    last_pos: Optional[int] = None
    last_length: Optional[int] = None
    cache: Optional[Tracker] = None


class EditorAdapter(Protocol):
    """What the tracking controller needs from an editor integration"""

    def editor_id(self) -> Hashable:
        """Identity token of the editor instance"""
        ...

    def get_text(self) -> str:
        ...

    def get_caret(self) -> int:
        ...

    def substr(self, start: int, end: int) -> str:
        ...

    def replace(self, text: str, start: int, end: int) -> None:
        """Replace `start..end` with `text` and place the caret after it"""
        ...

    def set_caret(self, pos: int) -> None:
        ...

    def syntax_at(self, pos: int) -> Optional[str]:
        """Syntax name at `pos` (html, jsx, css...), None if not supported"""
        ...

    def output_options(self, pos: int) -> Dict[str, Any]:
        """Option overrides for output at `pos`: indent, base indent, quotes, field"""
        ...

    def activation_context(self, pos: int) -> Optional[Dict[str, Any]]:
        """Context `{name, attributes}` at `pos`; None if abbreviations are not allowed"""
        ...
