"""
Markup expansion tests

Tests the full markup pipeline through expand(): snippet resolution,
transforms (implicit tags, attribute merge, lorem, BEM, JSX, XSL) and the
HTML, Pug, Haml and Slim formatters.
"""

import re

import pytest

from abbrex import expand
from abbrex.lib.expand import parse_markup
from abbrex.config import resolve_config
from abbrex.config.options import field_tabstop, text_snippetEscape


class TestHTMLOutput:
    """Test HTML formatter"""

    def test_list_with_numbered_items(self):
        """Repeated items are indented one level with numbering"""
        assert expand("ul>li.item$*2") == (
            '<ul>\n\t<li class="item1"></li>\n\t<li class="item2"></li>\n</ul>'
        )

    def test_single_element(self):
        """Bare element expands to open/close tag pair"""
        assert expand("div") == "<div></div>"

    def test_id_and_class(self):
        """`#` and `.` shorthands become attributes"""
        assert expand("div#main.box.wide") == '<div id="main" class="box wide"></div>'

    def test_siblings_at_top_level(self):
        """Top-level block siblings go on separate lines"""
        assert expand("h1+p") == "<h1></h1>\n<p></p>"

    def test_inline_siblings_stay_on_line(self):
        """Two inline elements do not reach the inline break threshold"""
        assert expand("p>b+i") == "<p><b></b><i></i></p>"

    def test_inline_break(self):
        """Three adjacent inline elements are put on own lines"""
        assert expand("p>b*3") == "<p>\n\t<b></b>\n\t<b></b>\n\t<b></b>\n</p>"

    def test_text_value(self):
        """Text node content is written inline"""
        assert expand("p{Hello}") == "<p>Hello</p>"

    def test_self_closing_styles(self):
        """Self-closing style follows the syntax"""
        assert expand("br") == "<br>"
        assert expand("br", {"syntax": "xhtml"}) == "<br />"
        assert expand("br", {"syntax": "xml"}) == "<br/>"

    def test_boolean_attribute(self):
        """Boolean attribute repeats its name unless compactBoolean is set"""
        assert expand("input[disabled.]") == '<input type="text" disabled="disabled">'
        compact = {"options": {"output.compactBoolean": True}}
        assert expand("input[disabled.]", compact) == '<input type="text" disabled>'
        assert expand("input[disabled.]", {"syntax": "xhtml"}) == (
            '<input type="text" disabled="disabled" />'
        )

    def test_single_attribute_quotes(self):
        """output.attributeQuotes switches quote character"""
        result = expand("a.x", {"options": {"output.attributeQuotes": "single"}})
        assert result == "<a href='' class='x'></a>"

    def test_tag_case(self):
        """output.tagCase upper-cases tags"""
        assert expand("div", {"options": {"output.tagCase": "upper"}}) == "<DIV></DIV>"

    def test_fields_rendered_as_tabstops(self):
        """Custom field hook receives unique tabstop indexes"""
        result = expand("a+a", {"options": {"output.field": field_tabstop}})
        assert result == '<a href="${1}">${2}</a><a href="${3}">${4}</a>'

    def test_explicit_empty_attribute_value(self):
        """`[title=""]` stays empty, only a missing value gets a field"""
        options = {"output.field": field_tabstop}
        assert expand('div[title=""]', {"options": options}) == '<div title="">${1}</div>'
        assert expand("div[title]", {"options": options}) == '<div title="${1}">${2}</div>'

    def test_text_hook(self):
        """output.text hook sees every written chunk"""
        result = expand("p{\\$5}", {"options": {"output.text": text_snippetEscape}})
        assert result == "<p>\\$5</p>"

    def test_comment_addon(self):
        """comment.enabled writes a closing comment after elements with id/class"""
        result = expand("div.box", {"options": {"comment.enabled": True}})
        assert result == '<div class="box"></div>\n<!-- /.box -->'

    def test_base_indent_and_newline(self):
        """output.baseIndent prefixes every new line"""
        result = expand("ul>li", {"options": {"output.baseIndent": "  "}})
        assert result == "<ul>\n  \t<li></li>\n  </ul>"

    def test_format_disabled(self):
        """output.format off writes everything on one line"""
        result = expand("ul>li*2", {"options": {"output.format": False}})
        assert result == "<ul><li></li><li></li></ul>"

    def test_determinism(self):
        """Same abbreviation and config produce identical output"""
        abbr = "div#page>header>nav>ul>li.item$*3>a{Item $}^^main"
        assert expand(abbr) == expand(abbr)


class TestSnippets:
    """Test markup snippet resolution"""

    def test_snippet_attributes(self):
        """`a` snippet adds empty href"""
        assert expand("a") == '<a href=""></a>'

    def test_snippet_with_children(self):
        """Snippet body may hold nested elements"""
        assert expand("list", {"snippets": {"list": "ul>li"}}) == "<ul>\n\t<li></li>\n</ul>"

    def test_plus_suffixed_snippet(self):
        """`ul+` resolves the list snippet, `div+` is a plain div"""
        assert expand("ul+") == "<ul>\n\t<li></li>\n</ul>"
        assert expand("div+") == "<div></div>"

    def test_snippet_field_default(self):
        """Snippet field placeholder is kept as default text"""
        assert expand("input") == '<input type="text">'

    def test_attributes_merged_onto_snippet(self):
        """Attributes of the referencing node go onto the snippet"""
        assert expand("img.logo") == '<img src="" alt="" class="logo">'

    def test_circular_snippet_terminates(self):
        """Self-referencing snippet is left unresolved"""
        assert expand("a", {"snippets": {"a": "a"}}) == "<a></a>"

    def test_mutually_recursive_snippets(self):
        """Cycle through two snippets terminates"""
        result = expand("x", {"snippets": {"x": "y", "y": "x"}})
        assert result == "<x></x>"

    def test_alias_keys(self):
        """`|` in snippet keys defines aliases"""
        config = {"snippets": {"foo|bar": "span.foo"}}
        assert expand("bar", config) == '<span class="foo"></span>'

    def test_unresolved_name_kept(self):
        """Unknown names are plain elements"""
        assert expand("custom-el") == "<custom-el></custom-el>"


class TestTransforms:
    """Test tree transforms"""

    def test_implicit_div(self):
        """Class-only node becomes div"""
        assert expand(".box") == '<div class="box"></div>'

    def test_implicit_list_item(self):
        """Class-only node under ul becomes li"""
        assert expand("ul>.item") == '<ul>\n\t<li class="item"></li>\n</ul>'

    def test_implicit_span_in_inline_parent(self):
        """Class-only node under an inline element becomes span"""
        assert expand("em>.x") == '<em><span class="x"></span></em>'

    def test_implicit_tag_from_context(self):
        """Top-level implicit tag uses the activation context"""
        assert expand(".row", {"context": {"name": "table"}}) == '<tr class="row"></tr>'

    def test_class_merge(self):
        """Duplicate class attributes are joined"""
        assert expand("div.a[class=b]") == '<div class="a b"></div>'

    def test_lorem_word_count(self):
        """`lorem3` inside div yields exactly three words"""
        result = expand("div>lorem3")
        m = re.match(r"^<div>(.*)</div>$", result)
        assert m is not None
        words = m.group(1).split()
        assert len(words) == 3
        assert words[0].startswith("Lorem")

    def test_lorem_range(self):
        """`lorem2-4` yields between 2 and 4 words"""
        for _ in range(5):
            text = re.sub(r"</?p>", "", expand("p>lorem2-4"))
            assert 2 <= len(text.split()) <= 4

    def test_repeated_lorem_gets_implicit_tag(self):
        """Repeated lorem under ul produces list items"""
        result = expand("ul>lorem4*3")
        assert result.count("<li>") == 3

    def test_lorem_seed_is_deterministic(self):
        """Seeded lorem output repeats exactly"""
        config = {"options": {"lorem.seed": 7}}
        assert expand("p*2>lorem", config) == expand("p*2>lorem", config)

    def test_jsx_rename(self):
        """JSX renames class and for"""
        result = expand("label.a[for=x]", {"syntax": "jsx"})
        assert result == '<label className="a" htmlFor="x"></label>'

    def test_jsx_expression_attribute(self):
        """`attr={expr}` keeps braces in JSX"""
        result = expand("div[onClick={handle}]", {"syntax": "jsx"})
        assert result == "<div onClick={handle}></div>"

    def test_bem_element_and_modifier(self):
        """`-e_m` expands against the parent block"""
        result = expand(".b>.-e_m", {"options": {"bem.enabled": True}})
        assert result == '<div class="b">\n\t<div class="b__e b__e_m"></div>\n</div>'

    def test_bem_modifier_on_block(self):
        """`block_mod` keeps the block class"""
        result = expand(".b_m", {"options": {"bem.enabled": True}})
        assert result == '<div class="b b_m"></div>'

    def test_xsl_drops_select(self):
        """xsl:variable with body loses its select attribute"""
        result = expand("xsl:variable[name=a select=b]>p", {"syntax": "xsl"})
        assert "select" not in result

    def test_parse_markup_returns_tree(self):
        """parse_markup exposes the transformed tree"""
        tree = parse_markup("ul>.item", resolve_config())
        assert tree.children[0].children[0].name == "li"


class TestIndentOutput:
    """Test Pug, Haml and Slim formatters"""

    @pytest.mark.parametrize("syntax,expected", [
        ("pug", "ul\n\tli.item1\n\tli.item2"),
        ("haml", "%ul\n\t%li.item1\n\t%li.item2"),
        ("slim", "ul\n\tli.item1\n\tli.item2"),
    ])
    def test_numbered_list(self, syntax, expected):
        """Classes use dot shorthand under every indent syntax"""
        assert expand("ul>li.item$*2", {"syntax": syntax}) == expected

    def test_pug_attributes_and_text(self):
        """Secondary attributes in parentheses, text after a space"""
        assert expand("a[href=x]{hi}", {"syntax": "pug"}) == 'a(href="x") hi'

    def test_implicit_div_omitted(self):
        """div with class is written as bare class"""
        assert expand(".box", {"syntax": "pug"}) == ".box"

    def test_haml_self_closing(self):
        """Haml marks self-closing elements with `/`"""
        assert expand("br", {"syntax": "haml"}) == "%br/"

    def test_slim_attributes(self):
        """Slim separates attributes with spaces"""
        assert expand("a[href=x title=y]", {"syntax": "slim"}) == 'a href="x" title="y"'
