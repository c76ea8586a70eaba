"""
Abbreviation extraction tests
"""

from abbrex import extract_abbreviation


class TestExtract:
    """Test backward scan from the caret"""

    def test_extract_after_plain_text(self):
        """Scan stops at the space before the abbreviation"""
        result = extract_abbreviation("Hello ul>li.item")
        assert result.abbreviation == "ul>li.item"
        assert (result.location, result.start, result.end) == (6, 6, 16)

    def test_attribute_with_space(self):
        """Attribute sets are taken whole, spaces included"""
        result = extract_abbreviation('x a[title="Hello world"]')
        assert result.abbreviation == 'a[title="Hello world"]'

    def test_text_node_with_space(self):
        """Text nodes are taken whole"""
        result = extract_abbreviation("see p{Hi there}")
        assert result.abbreviation == "p{Hi there}"

    def test_stops_at_html_tag(self):
        """A tag right before the abbreviation ends the scan"""
        result = extract_abbreviation("<div>ul>li")
        assert result.abbreviation == "ul>li"
        assert result.location == 5

    def test_look_ahead_skips_auto_closed(self):
        """Brackets auto-closed after the caret are included"""
        result = extract_abbreviation("ul>li[]", 6)
        assert result.abbreviation == "ul>li[]"
        assert result.end == 7

    def test_no_look_ahead(self):
        """Without look-ahead an open bracket stops extraction"""
        assert extract_abbreviation("ul>li[]", 6, lookAhead=False) is None

    def test_prefix_required(self):
        """Prefix marks the start and is part of the replaced range"""
        result = extract_abbreviation("return <div.x", prefix="<")
        assert result.abbreviation == "div.x"
        assert result.start == 7
        assert result.location == 8

    def test_missing_prefix(self):
        """No prefix in the line gives nothing"""
        assert extract_abbreviation("return div.x", prefix="<") is None

    def test_nothing_before_caret(self):
        """Whitespace before the caret gives nothing"""
        assert extract_abbreviation("foo ", 4) is None

    def test_unbalanced_brackets(self):
        """Unmatched closing bracket gives nothing"""
        assert extract_abbreviation("ul>li]", lookAhead=False) is None

    def test_leading_operators_dropped(self):
        """Operators at the abbreviation start are stripped"""
        result = extract_abbreviation("a >ul")
        assert result.abbreviation == "ul"
        assert result.location == 3

    def test_stylesheet(self):
        """Stylesheet abbreviations stop at whitespace"""
        result = extract_abbreviation("  p10", type="stylesheet")
        assert result.abbreviation == "p10"

    def test_bracket_inside_quoted_value(self):
        """Brackets inside a quoted attribute value do not count"""
        result = extract_abbreviation('a[title="x]y"]', 14)
        assert result.abbreviation == 'a[title="x]y"]'

        result = extract_abbreviation("see p[data-x='[1'].a")
        assert result.abbreviation == "p[data-x='[1'].a"
        assert result.location == 4
