"""
Live abbreviation tracking for editor integrations

The controller watches document edits reported by an editor adapter and
keeps a tracker over the abbreviation being typed:

    Idle ──typed abbreviation start──▶ Tracking ──commit/cancel──▶ Idle
                                          │  ▲
                              parse error ▼  │ fixed
                                         Error

A tracker starts when a single character typed at a word bound may begin
an abbreviation (`ul`, `.nav`, `#id`, `(`...), or when a caller forces one
with ``tracker_start``. Edits inside the tracked range stretch or shrink
it; an edit wholly outside the range stops tracking, and so does a caret
leaving the range or a range that is no longer a single line of
abbreviation text. The last tracker stopped by an edit is kept so that
undoing that edit restores it.

The controller also carries the editor commands that work next to
tracking: inserting an indented line break between an empty tag pair and
toggling a comment around the element under the caret.
"""

import dataclasses
import re
from typing import Any, Dict, Hashable, Optional, Union

from .log import LOG
from .scanner import AbbreviationError
from .editing import (
    JSX_SYNTAXES,
    commentTokens_get,
    comment_find,
    comment_strip,
    emptyPair_is,
    lineIndent_get,
    property_find,
    tagPair_find,
)
from .expand import parse_markup, parse_stylesheet, stringify_markup, stringify_stylesheet
from ..config.options import (
    DEFAULT_OPTIONS,
    STYLESHEET_SYNTAXES,
    field_default,
    field_tabstop,
    text_default,
    text_snippetEscape,
)
from ..config.resolve import Config, SnippetCache, resolve_config
from ..models.tracker import (
    AbbreviationTracker,
    EditorAdapter,
    EditorState,
    ErrorTracker,
    Tracker,
    TrackerError,
)

RE_WORD_BOUND = re.compile(r'^[\s>;"\']?[a-zA-Z.#!@\[(]$')
RE_STYLESHEET_WORD_BOUND = re.compile(r'^[\s;"\']?[a-zA-Z!@]$')
RE_JSX_ABBR_START = re.compile(r'^[a-zA-Z.#\[(]$')
RE_CSS_EMPTY_PROPERTY = re.compile(r'^[\w-]*:\s*;?$')

JSX_PREFIX = '<'
CLOSING_CHARS = ')]}"\''

TrackerResult = Union[AbbreviationTracker, ErrorTracker, None]


def jsx_is(syntax: Optional[str]) -> bool:
    return syntax in JSX_SYNTAXES


def stylesheet_is(syntax: Optional[str]) -> bool:
    return syntax in STYLESHEET_SYNTAXES


class AbbreviationTrackingController:
    """
    Tracks abbreviations per editor

    Attributes:
        editors: Tracking state keyed by the editor's identity token
        cache: Compiled stylesheet snippets shared by every tracker config
        options: Extra options merged into every tracker config
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        self.editors: Dict[Hashable, EditorState] = {}
        self.cache = SnippetCache()
        self.options = dict(options or {})

    def state_get(self, editor: EditorAdapter) -> EditorState:
        key = editor.editor_id()
        if key not in self.editors:
            self.editors[key] = EditorState()
        return self.editors[key]

    def tracker_get(self, editor: EditorAdapter) -> Optional[Tracker]:
        return self.state_get(editor).tracker

    def editor_forget(self, editor: EditorAdapter) -> None:
        """Drop all state of a closed editor"""
        self.editors.pop(editor.editor_id(), None)

    def config_get(self, editor: EditorAdapter, pos: int) -> Optional[Config]:
        """
        Expansion config at `pos`, None when abbreviations are not allowed there
        """
        syntax = editor.syntax_at(pos)
        context = editor.activation_context(pos)
        if syntax is None or context is None:
            return None

        options = dict(self.options)
        options.update(editor.output_options(pos) or {})
        # Previews show bare placeholders; tabstops are for the committed snippet
        options['output.field'] = field_default
        options['output.text'] = text_default
        if jsx_is(syntax):
            options.setdefault('jsx.enabled', True)
        return resolve_config({
            'type': 'stylesheet' if stylesheet_is(syntax) else 'markup',
            'syntax': syntax,
            'options': options,
            'context': context or None,
            'cache': self.cache,
        })

    def commit_config(self, editor: EditorAdapter, tracker: Tracker) -> Config:
        """Tracker config with the editor's field and text hooks, tabstops by default"""
        editor_options = editor.output_options(tracker.start) or {}
        options = dict(tracker.config.options)
        options['output.field'] = editor_options.get('output.field', field_tabstop)
        options['output.text'] = editor_options.get('output.text', text_snippetEscape)
        return dataclasses.replace(tracker.config, options=options)

    # Tracker lifecycle

    def tracker_create(self, editor: EditorAdapter, start: int, end: int, forced: bool = False,
                       offset: int = 0, config: Optional[Config] = None) -> TrackerResult:
        """
        Build a tracker over `start..end` of the document

        Returns:
            AbbreviationTracker with a preview, ErrorTracker when the text does
            not parse, or None when the range holds no trackable abbreviation
        """
        if start > end or (start == end and not forced):
            return None

        abbreviation = editor.substr(start + offset, end)
        if not forced and not abbreviation:
            return None
        if '\n' in abbreviation or '\r' in abbreviation:
            return None

        if config is None:
            config = self.config_get(editor, start)
            if config is None:
                return None

        try:
            if config.stylesheet_is():
                properties = parse_stylesheet(abbreviation, config)
                preview = stringify_stylesheet(properties, config)
                simple = len(properties) == 1
            else:
                parsed = parse_markup(abbreviation, config)
                preview = stringify_markup(parsed, config)
                simple = (len(parsed.children) == 1 and not parsed.children[0].children
                          and (not parsed.children[0].name or parsed.children[0].name[0].isalpha()))
        except AbbreviationError as e:
            LOG(f"Tracked abbreviation '{abbreviation}' does not parse: {e.message}", level=3)
            return ErrorTracker(abbreviation=abbreviation, start=start, end=end, config=config,
                                forced=forced, offset=offset,
                                error=TrackerError(message=e.message, pos=e.pos))

        if (not forced and config.stylesheet_is() and config.context is not None
                and config.context.name == '@@section'
                and (not preview.strip() or RE_CSS_EMPTY_PROPERTY.match(preview.strip()))):
            # A plain word inside a section expands into nothing or an empty property;
            # most likely a selector is being typed
            return None

        return AbbreviationTracker(abbreviation=abbreviation, start=start, end=end, config=config,
                                   forced=forced, offset=offset, preview=preview, simple=simple)

    def tracker_start(self, editor: EditorAdapter, start: Optional[int] = None,
                      end: Optional[int] = None, forced: bool = True, offset: int = 0) -> TrackerResult:
        """
        Start tracking `start..end`; by default an empty forced range at the caret

        A forced tracker may be empty and survives parse errors. Cancelling
        it removes the typed text.
        """
        state = self.state_get(editor)
        pos = editor.get_caret()
        start = pos if start is None else start
        end = pos if end is None else end

        tracker = self.tracker_create(editor, start, end, forced=forced, offset=offset)
        state.tracker = tracker
        if tracker is not None:
            LOG(f"Tracking '{tracker.abbreviation}' at {tracker.start}..{tracker.end}", level=2)
        self.snapshot_take(editor)
        return tracker

    def tracker_stop(self, editor: EditorAdapter, edit: bool = False) -> None:
        """
        Stop tracking

        Args:
            edit: Tracking stopped because of a document edit; the tracker is
                kept so that undoing the edit restores it
        """
        state = self.state_get(editor)
        if state.tracker is not None:
            LOG(f"Stop tracking '{state.tracker.abbreviation}'", level=2)
            if edit:
                state.cache = state.tracker
        state.tracker = None

    def tracker_commit(self, editor: EditorAdapter) -> bool:
        """
        Replace the tracked range with the expansion

        Returns:
            True if the abbreviation was expanded
        """
        state = self.state_get(editor)
        tracker = state.tracker
        if not isinstance(tracker, AbbreviationTracker):
            return False

        config = self.commit_config(editor, tracker)
        if config.stylesheet_is():
            snippet = stringify_stylesheet(parse_stylesheet(tracker.abbreviation, config), config)
        else:
            snippet = stringify_markup(parse_markup(tracker.abbreviation, config), config)

        editor.replace(snippet, tracker.start, tracker.end)
        LOG(f"Expanded '{tracker.abbreviation}' at {tracker.start}", level=1)
        state.tracker = None
        state.cache = None
        self.snapshot_take(editor)
        return True

    def tracker_cancel(self, editor: EditorAdapter) -> None:
        """Stop tracking; a forced tracker also removes its text"""
        state = self.state_get(editor)
        tracker = state.tracker
        if tracker is None:
            return
        state.tracker = None
        if tracker.forced and tracker.end > tracker.start:
            editor.replace('', tracker.start, tracker.end)
        self.snapshot_take(editor)

    def tracker_restore(self, editor: EditorAdapter) -> Optional[Tracker]:
        """
        Restore the tracker stopped by the last edit if the document holds
        its text again at the same place
        """
        state = self.state_get(editor)
        cached = state.cache
        if cached is None:
            return None

        pos = editor.get_caret()
        text = editor.substr(cached.start + cached.offset, cached.end)
        state.cache = None
        if text != cached.abbreviation or not cached.start <= pos <= cached.end:
            return None

        tracker = self.tracker_create(editor, cached.start, cached.end, forced=cached.forced,
                                      offset=cached.offset, config=cached.config)
        state.tracker = tracker
        if tracker is not None:
            LOG(f"Restored tracker '{tracker.abbreviation}'", level=2)
        return tracker

    # Editing commands

    def option_get(self, editor: EditorAdapter, pos: int, name: str) -> Any:
        options = editor.output_options(pos) or {}
        return options.get(name, self.options.get(name, DEFAULT_OPTIONS[name]))

    def line_break_insert(self, editor: EditorAdapter) -> bool:
        """
        Split an empty tag pair `<div>|</div>` (or `{|}` in stylesheets) over
        three lines, leaving the caret indented on the middle one

        Returns:
            False when the caret is not inside such a pair; the editor should
            then insert a plain line break
        """
        pos = editor.get_caret()
        syntax = editor.syntax_at(pos)
        text = editor.get_text()
        if syntax is None or not emptyPair_is(text, pos, stylesheet_is(syntax)):
            return False

        newline = self.option_get(editor, pos, 'output.newline')
        base_indent = lineIndent_get(text, pos)
        head = newline + base_indent + self.option_get(editor, pos, 'output.indent')

        self.tracker_stop(editor)
        editor.replace(head + newline + base_indent, pos, pos)
        editor.set_caret(pos + len(head))
        self.snapshot_take(editor)
        LOG(f"Line break inserted at {pos}", level=3)
        return True

    def comment_toggle(self, editor: EditorAdapter) -> bool:
        """
        Comment out the element (stylesheet property) under the caret with the
        comment tokens of its syntax, or uncomment the comment around the caret

        Returns:
            True if the document was changed
        """
        pos = editor.get_caret()
        syntax = editor.syntax_at(pos)
        tokens = commentTokens_get(syntax)
        if tokens is None:
            return False

        text = editor.get_text()
        comment = comment_find(text, pos, tokens)
        if comment is not None:
            start, end = comment
            inner, lead = comment_strip(text[start:end], tokens)
            caret = min(max(start, pos - lead), start + len(inner))
            replacement = inner
        else:
            found = property_find(text, pos) if stylesheet_is(syntax) else tagPair_find(text, pos)
            if found is None:
                return False
            start, end = found
            open_token, close_token = tokens
            replacement = f'{open_token} {text[start:end]} {close_token}'
            caret = pos + len(open_token) + 1

        self.tracker_stop(editor)
        editor.replace(replacement, start, end)
        editor.set_caret(caret)
        self.snapshot_take(editor)
        LOG(f"{'Uncommented' if comment else 'Commented'} {start}..{end}", level=2)
        return True

    # Editor events

    def snapshot_take(self, editor: EditorAdapter) -> None:
        state = self.state_get(editor)
        state.last_pos = editor.get_caret()
        state.last_length = len(editor.get_text())

    def change_handle(self, editor: EditorAdapter) -> Optional[Tracker]:
        """
        Process a document change

        Must be called after every edit, with the caret already placed after
        the edit. Returns the tracker active after the change.
        """
        state = self.state_get(editor)
        pos = editor.get_caret()
        length = len(editor.get_text())
        last_pos, last_length = state.last_pos, state.last_length

        if state.tracker is not None:
            self.tracker_update(editor, state, pos, length)
        elif last_pos is not None and last_length is not None:
            if self.tracker_restore(editor) is None and length - last_length == 1 and pos - last_pos == 1:
                self.typing_detect(editor, pos)

        state.last_pos = pos
        state.last_length = length
        return state.tracker

    def selection_handle(self, editor: EditorAdapter) -> None:
        """Process a caret move without an edit"""
        state = self.state_get(editor)
        pos = editor.get_caret()
        tracker = state.tracker
        if tracker is not None and not tracker.start <= pos <= tracker.end:
            self.tracker_stop(editor)
        state.last_pos = pos

    def typing_detect(self, editor: EditorAdapter, pos: int) -> Optional[Tracker]:
        """Start tracking if the character just typed may begin an abbreviation"""
        state = self.state_get(editor)
        syntax = editor.syntax_at(pos)
        prefix = editor.substr(max(0, pos - 2), pos)
        start = -1
        offset = 0

        if jsx_is(syntax):
            # JSX abbreviations are prefixed so plain code can be typed freely
            if len(prefix) == 2 and prefix[0] == JSX_PREFIX and RE_JSX_ABBR_START.match(prefix[1]):
                start = pos - 2
                offset = len(JSX_PREFIX)
        elif stylesheet_is(syntax):
            if RE_STYLESHEET_WORD_BOUND.match(prefix):
                start = pos - 1
        elif RE_WORD_BOUND.match(prefix):
            start = pos - 1

        if start < 0:
            return None

        state.tracker = self.tracker_create(editor, start, pos, offset=offset)
        if state.tracker is not None:
            LOG(f"Typing abbreviation '{state.tracker.abbreviation}' at {start}", level=2)
        return state.tracker

    def tracker_update(self, editor: EditorAdapter, state: EditorState, pos: int, length: int) -> None:
        tracker = state.tracker
        delta = length - (state.last_length if state.last_length is not None else length)
        start, end = tracker.start, tracker.end

        # The caret sits after inserted text and at the start of removed text
        if delta < 0:
            removed_start, removed_end = pos, pos - delta
            if removed_end <= start or removed_start >= end:
                self.tracker_stop(editor, edit=True)
                return
            start = position_remap(start, removed_start, removed_end)
            end = position_remap(end, removed_start, removed_end)
        elif delta > 0:
            if not start <= pos - delta <= end:
                self.tracker_stop(editor, edit=True)
                return
            end += delta

        if not (start <= pos <= end) or (start >= end and not tracker.forced):
            self.tracker_stop(editor, edit=True)
            return

        updated = self.tracker_create(editor, start, end, forced=tracker.forced,
                                      offset=tracker.offset, config=tracker.config)
        if updated is None:
            self.tracker_stop(editor, edit=True)
            return

        if (isinstance(updated, ErrorTracker) and not updated.forced and delta > 0
                and updated.error.pos is not None):
            typed = pos - 1
            if typed == start + updated.offset + updated.error.pos:
                ch = editor.substr(typed, pos)
                if ch not in CLOSING_CHARS:
                    # The character just typed broke the abbreviation
                    LOG(f"Typed '{ch}' ends abbreviation '{updated.abbreviation}'", level=3)
                    self.tracker_stop(editor, edit=True)
                    return

        state.tracker = updated


def position_remap(pos: int, removed_start: int, removed_end: int) -> int:
    """Document offset after `removed_start..removed_end` was deleted"""
    if pos <= removed_start:
        return pos
    if pos <= removed_end:
        return removed_start
    return pos - (removed_end - removed_start)
