"""
Abbreviation tracking tests

Drives AbbreviationTrackingController with an in-memory editor that
reports every keystroke the way an editor integration would.
"""

from typing import Any, Dict, Optional

import pytest

from abbrex import AbbreviationTrackingController
from abbrex.models.tracker import AbbreviationTracker, ErrorTracker, KIND_ERROR


class FakeEditor:
    """Single-line editor buffer implementing the adapter protocol"""

    def __init__(self, controller: AbbreviationTrackingController, text: str = "",
                 syntax: Optional[str] = "html", context: Optional[Dict[str, Any]] = None):
        self.controller = controller
        self.text = text
        self.caret = len(text)
        self.syntax = syntax
        self.context = {} if context is None else context
        controller.snapshot_take(self)

    # Adapter protocol

    def editor_id(self):
        return id(self)

    def get_text(self) -> str:
        return self.text

    def get_caret(self) -> int:
        return self.caret

    def substr(self, start: int, end: int) -> str:
        return self.text[start:end]

    def replace(self, text: str, start: int, end: int) -> None:
        self.text = self.text[:start] + text + self.text[end:]
        self.caret = start + len(text)

    def set_caret(self, pos: int) -> None:
        self.caret = pos

    def syntax_at(self, pos: int) -> Optional[str]:
        return self.syntax

    def output_options(self, pos: int) -> Dict[str, Any]:
        return {}

    def activation_context(self, pos: int) -> Optional[Dict[str, Any]]:
        return self.context

    # Simulated user input

    def type(self, chars: str):
        for ch in chars:
            self.text = self.text[:self.caret] + ch + self.text[self.caret:]
            self.caret += 1
            self.controller.change_handle(self)
        return self.controller.tracker_get(self)

    def backspace(self):
        self.text = self.text[:self.caret - 1] + self.text[self.caret:]
        self.caret -= 1
        self.controller.change_handle(self)
        return self.controller.tracker_get(self)

    def move(self, pos: int):
        self.caret = pos
        self.controller.selection_handle(self)
        return self.controller.tracker_get(self)

    def insert(self, pos: int, text: str):
        """Insert at `pos` without a prior caret move, like a paste or a script"""
        self.text = self.text[:pos] + text + self.text[pos:]
        self.caret = pos + len(text)
        self.controller.change_handle(self)
        return self.controller.tracker_get(self)

    def delete(self, start: int, end: int):
        self.text = self.text[:start] + self.text[end:]
        self.caret = start
        self.controller.change_handle(self)
        return self.controller.tracker_get(self)


@pytest.fixture
def controller():
    return AbbreviationTrackingController()


class TestTypingDetection:
    """Test tracker start on typing"""

    def test_typing_starts_tracker(self, controller):
        """Typed abbreviation is tracked with live preview"""
        editor = FakeEditor(controller)
        tracker = editor.type("ul>li")
        assert isinstance(tracker, AbbreviationTracker)
        assert tracker.range == (0, 5)
        assert tracker.abbreviation == "ul>li"
        assert tracker.preview == "<ul>\n\t<li></li>\n</ul>"
        assert not tracker.simple

    def test_single_word_is_simple(self, controller):
        """One element with no children is a simple abbreviation"""
        editor = FakeEditor(controller)
        assert editor.type("div").simple

    def test_no_tracker_inside_word(self, controller):
        """Letter typed right after a word does not start tracking"""
        editor = FakeEditor(controller, "foo")
        assert editor.type("b") is None

    def test_tracker_after_space(self, controller):
        """Letter typed after a space starts tracking"""
        editor = FakeEditor(controller, "foo ")
        tracker = editor.type("p")
        assert tracker.range == (4, 5)

    def test_not_allowed_context(self, controller):
        """No activation context means no tracking"""
        editor = FakeEditor(controller)
        editor.context = None
        assert editor.type("ul") is None

    def test_unsupported_syntax(self, controller):
        """Unknown syntax means no tracking"""
        editor = FakeEditor(controller, syntax=None)
        assert editor.type("ul") is None


class TestTrackerUpdate:
    """Test range maintenance on edits"""

    def test_backspace_shrinks_range(self, controller):
        """Deleting inside the range moves its end"""
        editor = FakeEditor(controller)
        editor.type("ul>li")
        tracker = editor.backspace()
        assert tracker.range == (0, 4)
        assert tracker.abbreviation == "ul>l"

    def test_deletion_before_range_stops(self, controller):
        """Deleting the character right before the range ends tracking"""
        editor = FakeEditor(controller, "x ")
        editor.type("ul")
        editor.move(2)
        assert editor.backspace() is None
        assert editor.text == "xul"

        # Undoing the deletion brings the tracker back
        tracker = editor.type(" ")
        assert tracker.range == (2, 4)

    def test_insertion_before_range_stops(self, controller):
        """Text inserted before the range ends tracking"""
        editor = FakeEditor(controller, "x ")
        editor.type("ul")
        assert editor.insert(0, "y") is None

    @pytest.mark.parametrize("start,end", [(0, 1), (5, 6)])
    def test_deletion_outside_range_stops(self, controller, start, end):
        """Deleting text on either side of the range ends tracking"""
        editor = FakeEditor(controller, "x  z")
        editor.move(2)
        assert editor.type("ul").range == (2, 4)
        assert editor.delete(start, end) is None

    @pytest.mark.parametrize("count", [1, 2, 5])
    @pytest.mark.parametrize("at", [0, 1, 3])
    def test_insertion_grows_range(self, controller, count, at):
        """Inserting inside the range moves its end by the inserted length"""
        typed = FakeEditor(controller)
        typed.type("div")
        typed.move(at)
        tracker = typed.type("x" * count)
        assert tracker.range == (0, 3 + count)
        assert tracker.abbreviation == "div"[:at] + "x" * count + "div"[at:]

        pasted = FakeEditor(controller)
        pasted.type("div")
        pasted.move(at)
        assert pasted.insert(at, "x" * count).range == (0, 3 + count)

    @pytest.mark.parametrize("count", [1, 2, 3])
    def test_deletion_inside_shrinks_range(self, controller, count):
        """Deleting inside the range moves its end by the deleted length"""
        editor = FakeEditor(controller)
        editor.type("section")
        tracker = editor.delete(2, 2 + count)
        assert tracker.range == (0, 7 - count)
        assert tracker.abbreviation == "se" + "ction"[count:]

    def test_caret_leaving_range_stops(self, controller):
        """Moving the caret outside stops tracking"""
        editor = FakeEditor(controller, "x ")
        editor.type("ul")
        assert editor.move(0) is None

    def test_invalid_character_drops_tracker(self, controller):
        """Typed character that breaks the abbreviation stops tracking"""
        editor = FakeEditor(controller)
        editor.type("a")
        assert editor.type("=") is None

    def test_closing_character_keeps_error_tracker(self, controller):
        """Unbalanced closing bracket gives an error tracker"""
        editor = FakeEditor(controller)
        tracker = editor.type("a)")
        assert isinstance(tracker, ErrorTracker)
        assert tracker.kind == KIND_ERROR
        assert tracker.error.pos == 1

    def test_undo_restores_tracker(self, controller):
        """Removing the character that stopped tracking restores it"""
        editor = FakeEditor(controller)
        editor.type("ul")
        assert editor.type(" ") is None
        tracker = editor.backspace()
        assert tracker is not None
        assert tracker.abbreviation == "ul"
        assert tracker.range == (0, 2)


class TestTrackerCommands:
    """Test commit, cancel and forced tracking"""

    def test_commit_expands_with_tabstops(self, controller):
        """Committed expansion replaces the range with snippet fields"""
        editor = FakeEditor(controller)
        editor.type("ul>li")
        assert controller.tracker_commit(editor)
        assert editor.text == "<ul>\n\t<li>${1}</li>\n</ul>"
        assert controller.tracker_get(editor) is None

    def test_commit_without_tracker(self, controller):
        """Nothing to commit without a valid tracker"""
        editor = FakeEditor(controller)
        assert not controller.tracker_commit(editor)

    def test_forced_tracker_allows_empty_range(self, controller):
        """Forced tracker starts on an empty range at the caret"""
        editor = FakeEditor(controller)
        tracker = controller.tracker_start(editor)
        assert tracker is not None
        assert tracker.forced
        assert tracker.range == (0, 0)

    def test_cancel_forced_removes_text(self, controller):
        """Cancelling a forced tracker removes what was typed"""
        editor = FakeEditor(controller, "x")
        controller.tracker_start(editor)
        tracker = editor.type("div")
        assert tracker.range == (1, 4)
        controller.tracker_cancel(editor)
        assert editor.text == "x"
        assert controller.tracker_get(editor) is None

    def test_editor_forget(self, controller):
        """Forgetting an editor drops its state"""
        editor = FakeEditor(controller)
        editor.type("ul")
        controller.editor_forget(editor)
        assert controller.tracker_get(editor) is None


class TestSyntaxes:
    """Test stylesheet and JSX tracking"""

    def test_stylesheet_preview(self, controller):
        """Stylesheet abbreviations preview as properties"""
        editor = FakeEditor(controller, syntax="css")
        tracker = editor.type("p10")
        assert tracker.preview == "padding: 10px;"

    def test_section_word_not_tracked(self, controller):
        """Plain word in a stylesheet section is likely a selector"""
        editor = FakeEditor(controller, syntax="css", context={"name": "@@section"})
        assert editor.type("a") is None

    def test_jsx_requires_prefix(self, controller):
        """JSX abbreviations start after `<`"""
        editor = FakeEditor(controller, syntax="jsx")
        assert editor.type("d") is None

        other = FakeEditor(controller, syntax="jsx")
        tracker = other.type("<div")
        assert tracker.abbreviation == "div"
        assert tracker.offset == 1
        assert tracker.range == (0, 4)

    def test_jsx_commit_replaces_prefix(self, controller):
        """Commit replaces the prefix together with the abbreviation"""
        editor = FakeEditor(controller, syntax="jsx")
        editor.type("<div.a")
        controller.tracker_commit(editor)
        assert editor.text.startswith('<div className="a">')


class TestEditingCommands:
    """Test line break and comment commands"""

    def test_line_break_between_tags(self, controller):
        """Empty tag pair opens up with an indented middle line"""
        editor = FakeEditor(controller, "<div></div>")
        editor.move(5)
        assert controller.line_break_insert(editor)
        assert editor.text == "<div>\n\t\n</div>"
        assert editor.caret == 7

    def test_line_break_keeps_line_indent(self, controller):
        """New lines follow the indentation of the current line"""
        editor = FakeEditor(controller, "\t<ul class=\"nav\"></ul>")
        editor.move(17)
        assert controller.line_break_insert(editor)
        assert editor.text == "\t<ul class=\"nav\">\n\t\t\n\t</ul>"
        assert editor.caret == 20

    def test_line_break_in_stylesheet_rule(self, controller):
        """Empty stylesheet rule opens up the same way"""
        editor = FakeEditor(controller, "a {}", syntax="css")
        editor.move(3)
        assert controller.line_break_insert(editor)
        assert editor.text == "a {\n\t\n}"

    @pytest.mark.parametrize("text,pos", [
        ("<div>x</div>", 5),
        ("<div></span>", 5),
        ("<br></br>", 3),
    ])
    def test_line_break_not_applicable(self, controller, text, pos):
        """Anything but an empty pair is left to the editor"""
        editor = FakeEditor(controller, text)
        editor.move(pos)
        assert not controller.line_break_insert(editor)
        assert editor.text == text

    def test_comment_element(self, controller):
        """Innermost element under the caret is commented"""
        editor = FakeEditor(controller, "<p><b>x</b></p>")
        editor.move(6)
        assert controller.comment_toggle(editor)
        assert editor.text == "<p><!-- <b>x</b> --></p>"
        assert editor.caret == 11

    def test_uncomment_element(self, controller):
        """Toggling inside a comment removes it"""
        editor = FakeEditor(controller, "<p><!-- <b>x</b> --></p>")
        editor.move(11)
        assert controller.comment_toggle(editor)
        assert editor.text == "<p><b>x</b></p>"
        assert editor.caret == 6

    def test_comment_void_element(self, controller):
        """Void element is commented on its own"""
        editor = FakeEditor(controller, "<p>a<br>b</p>")
        editor.move(6)
        controller.comment_toggle(editor)
        assert editor.text == "<p>a<!-- <br> -->b</p>"

    def test_comment_stylesheet_property(self, controller):
        """Stylesheet property under the caret is commented with block comments"""
        editor = FakeEditor(controller, "a { padding: 0; margin: 0; }", syntax="css")
        editor.move(18)
        assert controller.comment_toggle(editor)
        assert editor.text == "a { padding: 0; /* margin: 0; */ }"

        assert controller.comment_toggle(editor)
        assert editor.text == "a { padding: 0; margin: 0; }"

    def test_comment_jsx(self, controller):
        """JSX uses expression comments"""
        editor = FakeEditor(controller, "<div />", syntax="jsx")
        editor.move(2)
        controller.comment_toggle(editor)
        assert editor.text == "{/* <div /> */}"

    def test_comment_outside_element(self, controller):
        """Plain text has nothing to comment"""
        editor = FakeEditor(controller, "plain text")
        editor.move(3)
        assert not controller.comment_toggle(editor)
        assert editor.text == "plain text"

    def test_comment_unsupported_syntax(self, controller):
        """Indent-based markup has no comment tokens here"""
        editor = FakeEditor(controller, "<p></p>", syntax="pug")
        editor.move(1)
        assert not controller.comment_toggle(editor)
