"""
Markup front end tests

Tests the scanner, tokenizer, recursive-descent parser and the converter
that unrolls repeaters into the final abbreviation tree.
"""

import pytest

from abbrex.lib.scanner import Scanner, ScannerError, AbbreviationError, eatPair, eatQuoted
from abbrex.lib.markup import abbreviation_parse, tokenize, Parser
from abbrex.lib.markup.parser import TokenScannerError
from abbrex.models.tokens import Field, Literal, Operator, Repeater, RepeaterNumber


class TestScanner:
    """Test character scanner primitives"""

    def test_eat_while_accumulates_token(self):
        """eatWhile consumes a run and current() returns it"""
        scanner = Scanner("ul>li")
        assert scanner.eatWhile(str.isalpha)
        assert scanner.current() == "ul"
        assert scanner.peek() == ">"

    def test_failed_eat_keeps_position(self):
        """A failed eat leaves the position untouched"""
        scanner = Scanner("abc")
        assert not scanner.eat("x")
        assert not scanner.eatWhile(str.isdigit)
        assert scanner.pos == 0

    def test_eof_and_peek_at_end(self):
        """peek() returns empty string once the end is reached"""
        scanner = Scanner("a")
        scanner.next()
        assert scanner.eof()
        assert scanner.peek() == ""

    def test_limit_shares_backing_string(self):
        """A limited scanner stops at its own end"""
        scanner = Scanner("hello world").limit(6, 11)
        assert scanner.string == "hello world"
        scanner.eatWhile(lambda ch: True)
        assert scanner.current() == "world"

    def test_eat_quoted(self):
        """Quoted strings are consumed including escaped quotes"""
        scanner = Scanner('"a\\"b" rest')
        assert eatQuoted(scanner)
        assert scanner.current() == '"a\\"b"'

    def test_unterminated_quote_rewinds(self):
        """Unterminated quote rewinds silently unless asked to throw"""
        scanner = Scanner('"abc')
        assert not eatQuoted(scanner)
        assert scanner.pos == 0

        with pytest.raises(ScannerError):
            eatQuoted(Scanner('"abc'), throws=True)

    def test_eat_pair_balances_nested(self):
        """eatPair skips nested pairs and quoted content"""
        scanner = Scanner('(a(b)")")x')
        assert eatPair(scanner, "(", ")")
        assert scanner.current() == '(a(b)")")'

    def test_error_pointer(self):
        """Scanner errors carry position and a caret pointer"""
        error = Scanner("ab").error("Unexpected character", 1)
        assert isinstance(error, AbbreviationError)
        assert error.pos == 1
        assert str(error).endswith("ab\n-^")


class TestTokenizer:
    """Test markup tokenizer"""

    def test_child_operator(self):
        """Element names and child operator"""
        tokens = tokenize("ul>li")
        assert tokens == [
            Literal(value="ul", start=0, end=2),
            Operator(operator="child", start=2, end=3),
            Literal(value="li", start=3, end=5),
        ]

    def test_repeater_and_numbering(self):
        """`$` numbering and `*N` repeater tokens"""
        tokens = tokenize("li.item$$*3")
        assert isinstance(tokens[-2], RepeaterNumber)
        assert tokens[-2].size == 2
        assert isinstance(tokens[-1], Repeater)
        assert tokens[-1].count == 3
        assert not tokens[-1].implicit

    def test_implicit_repeater(self):
        """Bare `*` is an implicit repeater"""
        tokens = tokenize("li*")
        assert tokens[-1].implicit

    def test_numbering_modifiers(self):
        """`$@-5` counts down from base 5"""
        number = [t for t in tokenize("li{$@-5}*2") if isinstance(t, RepeaterNumber)][0]
        assert number.reverse
        assert number.base == 5

    def test_field_inside_attribute(self):
        """Fields are recognized inside attribute sets"""
        fields = [t for t in tokenize("a[href=${1:url}]") if isinstance(t, Field)]
        assert fields == [Field(index=1, name="url", start=7, end=15)]

    def test_operators_are_text_inside_quotes(self):
        """`>` inside quoted value is literal text"""
        tokens = tokenize('a[title="a>b"]')
        assert not any(isinstance(t, Operator) and t.operator == "child" for t in tokens)

    def test_plus_suffix_kept_on_element_name(self):
        """Trailing `+` before the end stays on the element name"""
        assert tokenize("ul+")[0] == Literal(value="ul+", start=0, end=3)
        assert isinstance(tokenize("ul+li")[1], Operator)
        assert tokenize(".a+")[1].value == "a"

    def test_unterminated_field(self):
        """Unterminated field raises `Expecting }`"""
        with pytest.raises(ScannerError, match="Expecting }"):
            tokenize("a{${1:hi")


class TestParser:
    """Test recursive-descent parser"""

    def test_sibling_and_child(self):
        """`+` keeps level, `>` descends"""
        group = Parser(tokenize("div>p+span")).parse()
        assert len(group.elements) == 1
        div = group.elements[0]
        assert len(div.elements) == 2

    def test_climb(self):
        """`^` climbs one level up"""
        group = Parser(tokenize("div>p^span")).parse()
        assert len(group.elements) == 2

    def test_group_with_repeat(self):
        """Parenthesized group carries repeater"""
        group = Parser(tokenize("(a+b)*2")).parse()
        inner = group.elements[0]
        assert inner.repeat.count == 2
        assert len(inner.elements) == 2

    def test_trailing_tokens_raise(self):
        """Unparsed trailing tokens raise with a token offset"""
        with pytest.raises(TokenScannerError) as info:
            Parser(tokenize("ul>li)")).parse()
        assert info.value.pos == 5

    def test_self_close(self):
        """`/` marks element as self-closing"""
        group = Parser(tokenize("br/")).parse()
        assert group.elements[0].selfClose


class TestConverter:
    """Test repeater unrolling and tree conversion"""

    def test_repeat_produces_copies(self):
        """`li*3` unrolls into three sibling copies"""
        abbr = abbreviation_parse("li*3")
        assert [node.name for node in abbr.children] == ["li", "li", "li"]

    def test_numbering(self):
        """`$` resolves to one-based iteration index"""
        abbr = abbreviation_parse("ul>li.item$*2")
        items = abbr.children[0].children
        assert [item.attributes[0].value for item in items] == [["item1"], ["item2"]]

    def test_zero_padded_numbering(self):
        """Several `$` pad with zeros"""
        abbr = abbreviation_parse("li.i$$$*2")
        assert abbr.children[1].attributes[0].value == ["i002"]

    def test_reverse_numbering(self):
        """`$@-` counts down"""
        abbr = abbreviation_parse("li{$@-}*3")
        assert [node.value for node in abbr.children] == [["3"], ["2"], ["1"]]

    def test_group_repeat_attached(self):
        """Group repeater is attached to every produced item"""
        abbr = abbreviation_parse("(dt+dd)*2")
        assert len(abbr.children) == 4
        assert all(node.repeat is not None for node in abbr.children)

    def test_text_node_children_flattened(self):
        """Text-only node hands its children up as siblings"""
        abbr = abbreviation_parse("{Hello}>p")
        assert len(abbr.children) == 2
        assert abbr.children[0].value == ["Hello"]
        assert abbr.children[1].name == "p"

    def test_implicit_repeat_over_text_lines(self):
        """`li*` repeats once per wrapped text line"""
        abbr = abbreviation_parse("ul>li*", text=["one", "two"])
        items = abbr.children[0].children
        assert [item.value for item in items] == [["one"], ["two"]]

    def test_unconsumed_text_goes_to_deepest_node(self):
        """Wrapped text lands in the deepest last node"""
        abbr = abbreviation_parse("div>p", text="Hi")
        assert abbr.children[0].children[0].value == ["Hi"]

    def test_href_from_wrapped_url(self):
        """Wrapping a URL with `a` fills href"""
        abbr = abbreviation_parse("a", href=True, text="www.example.com")
        attrs = {attr.name: attr.value for attr in abbr.children[0].attributes}
        assert attrs["href"] == ["http://www.example.com"]

    def test_max_repeat_guard(self):
        """Repeat limit stops unrolling"""
        abbr = abbreviation_parse("li*10", max_repeat=2)
        assert len(abbr.children) == 2

    def test_attribute_flags(self):
        """`!attr` is implied, `attr.` is boolean"""
        abbr = abbreviation_parse("input[!name disabled.]")
        name, disabled = abbr.children[0].attributes
        assert name.name == "name" and name.implied
        assert disabled.name == "disabled" and disabled.boolean

    def test_variables(self):
        """`${name}` inside text resolves from variables"""
        abbr = abbreviation_parse("p{${charset}}", variables={"charset": "UTF-8"})
        assert abbr.children[0].value == ["UTF-8"]

    def test_parse_error_carries_source(self):
        """Errors raised from parsing know the abbreviation"""
        with pytest.raises(AbbreviationError) as info:
            abbreviation_parse("ul>li)")
        assert info.value.source == "ul>li)"
