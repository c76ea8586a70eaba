"""
Stylesheet expansion tests

Tests fuzzy snippet matching, keyword and unit resolution, colors, raw
snippets, gradients, contexts and the JSON output mode.
"""

import pytest

from abbrex import expand, SnippetCache
from abbrex.config.options import field_tabstop
from abbrex.lib.stylesheet.score import scoreMatch, bestMatch_find
from abbrex.lib.stylesheet.colors import color, frac
from abbrex.lib.stylesheet.resolver import snippets_convert, unmatchedPart_get
from abbrex.models.css import CSSColor

CSS = {"type": "stylesheet"}


def css(abbr, **extra):
    return expand(abbr, {**CSS, **extra})


class TestScore:
    """Test fuzzy matching score"""

    def test_exact_match_scores_one(self):
        """Identical strings score exactly 1"""
        assert scoreMatch("margin", "margin") == 1

    def test_first_character_must_match(self):
        """Different first characters never match"""
        assert scoreMatch("x", "margin") == 0
        assert scoreMatch("", "margin") == 0

    def test_score_within_unit_interval(self):
        """Partial matches fall strictly between 0 and 1"""
        score = scoreMatch("bgc", "background-color")
        assert 0 < score < 1

    def test_word_initials_preferred(self):
        """Characters after a dash weigh more"""
        assert scoreMatch("bgc", "background-color") > scoreMatch("bgc", "background-clip")

    def test_missing_character_fails_unless_partial(self):
        """Unmatched tail fails, or lowers the score in partial mode"""
        assert scoreMatch("mz", "margin") == 0
        assert 0 < scoreMatch("mz", "margin", partial=True) < 1

    def test_best_match_exact_wins(self):
        """Exact key returns immediately"""
        assert bestMatch_find("p", ["pos", "p", "pad"]) == "p"

    def test_best_match_threshold(self):
        """Best score below min_score gives no match"""
        assert bestMatch_find("pd", ["padding"], min_score=0.99) is None
        assert bestMatch_find("pd", ["padding"]) == "padding"

    def test_unmatched_part(self):
        """Tail not found in key, in order"""
        assert unmatchedPart_get("dn", "d") == "n"
        assert unmatchedPart_get("bgc", "bgc") == ""


class TestColors:
    """Test color rendering"""

    def test_short_hex(self):
        """Repeated-digit colors shrink to three digits"""
        assert color(CSSColor(255, 255, 255), short_hex=True) == "#fff"
        assert color(CSSColor(255, 255, 255)) == "#ffffff"

    def test_transparent(self):
        """Fully transparent black"""
        assert color(CSSColor(0, 0, 0, 0)) == "transparent"

    def test_alpha_as_rgba(self):
        """Translucent colors are written as rgba()"""
        assert color(CSSColor(0, 0, 0, 0.5)) == "rgba(0, 0, 0, 0.5)"

    def test_frac(self):
        """Trailing zeros and dot are dropped"""
        assert frac(10.0) == "10"
        assert frac(0.5) == "0.5"
        assert frac(1.23456) == "1.2346"

    def test_color_abbreviation(self):
        """`c#f` expands to short hex white"""
        assert css("c#f") == "color: #fff;"

    def test_long_hex_option(self):
        """stylesheet.shortHex off keeps six digits"""
        result = css("c#f", options={"stylesheet.shortHex": False})
        assert result == "color: #ffffff;"


class TestResolver:
    """Test snippet resolution and value handling"""

    def test_property_with_number(self):
        """Integer values receive the integer unit"""
        assert css("p10") == "padding: 10px;"

    def test_dash_separates_values(self):
        """`-` between numbers starts a negative second value"""
        assert css("m10-20") == "margin: 10px -20px;"

    def test_keyword_value(self):
        """`d:n` resolves `n` against the snippet keywords"""
        assert css("d:n") == "display: none;"

    def test_important(self):
        """`!` appends the important flag"""
        assert css("p10!") == "padding: 10px !important;"

    def test_important_without_value(self):
        """No space is doubled when the empty value field writes nothing"""
        assert css("p!") == "padding: !important;"
        tabstops = {"output.field": field_tabstop}
        assert css("p!", options=tabstops) == "padding: ${0} !important;"

    def test_siblings(self):
        """`+` separates properties, one per line"""
        assert css("p10+m5") == "padding: 10px;\nmargin: 5px;"

    def test_snippet_default_value(self):
        """Default value comes from the snippet field"""
        assert css("bgc") == "background-color: #fff;"

    def test_keyword_alias(self):
        """Keyword aliases resolve when the snippet has no keywords"""
        assert css("w:a") == "width: auto;"

    def test_unit_alias(self):
        """`p` unit alias becomes percent"""
        assert css("w50p") == "width: 50%;"

    def test_float_unit(self):
        """Float values receive the float unit"""
        assert css("m1.5") == "margin: 1.5em;"

    def test_unitless_property(self):
        """Unitless properties keep bare numbers"""
        assert css("op0.5", snippets={"op": "opacity"}) == "opacity: 0.5;"

    def test_raw_snippet(self):
        """Raw snippets are written as text with fields filled"""
        assert css("@m") == "@media screen {\n\t\n}"

    def test_gradient(self):
        """`lg` becomes background-image with a linear gradient"""
        assert css("lg") == "background-image: linear-gradient();"

    def test_unknown_property_kept(self):
        """No snippet matches: name is written as given"""
        assert css("zz10") == "zz: 10px;"

    def test_value_context(self):
        """Inside a property value only keywords are resolved"""
        assert css("n", context={"name": "display"}) == "none"

    def test_json_mode(self):
        """JSON mode writes camelCase names and bare numbers"""
        result = css("mt10", options={"stylesheet.json": True})
        assert result == "marginTop: 10,"

    @pytest.mark.parametrize("syntax,expected", [
        ("scss", "padding: 10px;"),
        ("sass", "padding: 10px"),
        ("stylus", "padding 10px"),
    ])
    def test_syntax_punctuation(self, syntax, expected):
        """Property separators follow the syntax"""
        assert expand("p10", {"syntax": syntax}) == expected


class TestSnippetCache:
    """Test compiled snippet cache"""

    def test_cache_reused_for_same_table(self):
        """Same table compiles once"""
        calls = []

        def build(table):
            calls.append(table)
            return snippets_convert(table)

        cache = SnippetCache()
        table = {"p": "padding"}
        first = cache.stylesheet_get(table, build)
        second = cache.stylesheet_get(dict(table), build)
        assert first is second
        assert len(calls) == 1

    def test_cache_rebuilt_on_change(self):
        """Different table or clear() triggers a rebuild"""
        calls = []

        def build(table):
            calls.append(table)
            return snippets_convert(table)

        cache = SnippetCache()
        cache.stylesheet_get({"p": "padding"}, build)
        cache.stylesheet_get({"m": "margin"}, build)
        cache.clear()
        cache.stylesheet_get({"m": "margin"}, build)
        assert len(calls) == 3

    def test_expand_uses_cache(self):
        """A shared cache gives the same result as no cache"""
        cache = SnippetCache()
        assert css("p10", cache=cache) == css("p10")
        assert css("m5", cache=cache) == "margin: 5px;"
