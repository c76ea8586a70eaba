"""
Pygments lexers for abbreviation sources and expanded output

Used by the CLI `--highlight` report to colour each abbreviation next to
its expansion on the console.

Markup token types:
- Name.Tag: Element names (ul, li, a)
- Name.Class / Name.Variable: `.class` and `#id` shorthands
- Operator: Structure operators `> + ^ /`
- Number: Repeaters (`*3`) and numbering (`$$@-2`)
- Name.Attribute / String: Attribute sets `[href="x"]`
- String: Text nodes `{Hello}`
- Comment.Preproc: Fields `${1:name}`
"""

from pygments.lexer import Lexer, RegexLexer, bygroups
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)
from pygments.util import ClassNotFound


class MarkupAbbreviationLexer(RegexLexer):
    """
    Lexer for markup abbreviations

    Example:
        ul#nav>li.item$*3>a[href="#"]{Item $}

    Tokens:
        ul → Name.Tag
        #nav → Name.Variable
        > → Operator
        .item → Name.Class
        $*3 → Number
        [ → Punctuation, href → Name.Attribute, "#" → String
        {Item $} → String
    """

    name = 'Abbreviation'
    aliases = ['abbreviation', 'abbr']
    filenames = ['*.abbr']

    tokens = {
        'root': [
            (r'\$\{[^}]*\}', Comment.Preproc),
            (r'\$+(@\^*-?\d*)?', Number),
            (r'\*\d*', Number),
            (r'[>+^/]', Operator),
            (r'[()]', Punctuation),
            (r'(\.)([\w\-:$@!]+)', bygroups(Punctuation, Name.Class)),
            (r'(#)([\w\-:$@!]+)', bygroups(Punctuation, Name.Variable)),
            (r'\[', Punctuation, 'attributes'),
            (r'\{', String, 'text'),
            (r'[a-zA-Z!][\w\-:!]*', Name.Tag),
            (r'\s+', Text),
            (r'.', Text),
        ],

        'attributes': [
            (r'\]', Punctuation, '#pop'),
            (r'"[^"]*"|\'[^\']*\'', String),
            (r'\{', String, 'text'),
            (r'\$\{[^}]*\}', Comment.Preproc),
            (r'(!?[\w\-:@.]+)(=)?', bygroups(Name.Attribute, Operator)),
            (r'[^\]\s"\'{]+', String),
            (r'\s+', Text),
        ],

        'text': [
            # Nested braces stay inside the text node
            (r'\{', String, '#push'),
            (r'\}', String, '#pop'),
            (r'\$\{[^}]*\}', Comment.Preproc),
            (r'[^{}$]+', String),
            (r'\$', String),
        ],
    }


class StylesheetAbbreviationLexer(RegexLexer):
    """
    Lexer for stylesheet abbreviations

    Example:
        m10-auto+bgc#f!

    Tokens:
        m → Keyword, 10 → Number, auto → Name.Constant,
        + → Operator, #f → Number.Hex, ! → Keyword
    """

    name = 'Stylesheet abbreviation'
    aliases = ['css-abbreviation', 'cssabbr']
    filenames = []

    tokens = {
        'root': [
            (r'\$\{[^}]*\}', Comment.Preproc),
            (r'@[\w-]+', Keyword.Pseudo),
            (r'#[0-9a-fA-F]{1,6}(\.\d+)?|#t\b', Number.Hex),
            (r'-?\d*\.?\d+[a-zA-Z%]*', Number),
            (r'[+!;,]', Operator),
            (r'[()]', Punctuation),
            (r':', Punctuation),
            (r'"[^"]*"|\'[^\']*\'', String),
            (r'(?<=[\d:])[a-zA-Z][\w-]*', Name.Constant),
            (r'[a-zA-Z][a-zA-Z-]*', Keyword),
            (r'-', Operator),
            (r'\s+', Text),
            (r'.', Text),
        ],
    }


def get_lexer(stylesheet: bool = False) -> RegexLexer:
    """
    Get the abbreviation lexer for the given abbreviation type

    Returns:
        MarkupAbbreviationLexer or StylesheetAbbreviationLexer instance
    """
    return StylesheetAbbreviationLexer() if stylesheet else MarkupAbbreviationLexer()


def output_lexer(syntax: str) -> Lexer:
    """Pygments lexer for expanded text of `syntax`, plain text if unknown"""
    try:
        return get_lexer_by_name(syntax)
    except ClassNotFound:
        return TextLexer()
