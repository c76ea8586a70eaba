"""
Default option tables and per-syntax overlays.

``DEFAULT_OPTIONS`` is the flat table of named toggles every expansion starts
from. ``SYNTAX_OVERLAYS`` holds the partial tables layered on top for an
abbreviation type ("markup"/"stylesheet") and for each concrete syntax. The
overlays reference snippet tables by data file name; ``resolve`` loads them.
"""

from typing import Any, Dict, List

MARKUP_SYNTAXES: List[str] = ["html", "xml", "xhtml", "xsl", "jsx", "vue", "pug", "haml", "slim"]
STYLESHEET_SYNTAXES: List[str] = ["css", "scss", "less", "sass", "stylus", "sss"]

DEFAULT_SYNTAXES: Dict[str, str] = {
    "markup": "html",
    "stylesheet": "css",
}

INLINE_ELEMENTS: List[str] = [
    "a", "abbr", "acronym", "applet", "b", "basefont", "bdo",
    "big", "br", "button", "cite", "code", "del", "dfn", "em", "font", "i",
    "iframe", "img", "input", "ins", "kbd", "label", "map", "object", "q",
    "s", "samp", "select", "small", "span", "strike", "strong", "sub", "sup",
    "textarea", "tt", "u", "var",
]

BOOLEAN_ATTRIBUTES: List[str] = [
    "contenteditable", "seamless", "async", "autofocus",
    "autoplay", "checked", "controls", "defer", "disabled", "formnovalidate",
    "hidden", "ismap", "loop", "multiple", "muted", "novalidate", "readonly",
    "required", "reversed", "selected", "typemustmatch",
]


def field_default(index: int, placeholder: str, offset: int = 0, line: int = 0, column: int = 0) -> str:
    """Default field renderer: keep the placeholder text, drop the tabstop."""
    return placeholder


def text_default(text: str, offset: int = 0, line: int = 0, column: int = 0) -> str:
    return text


def field_tabstop(index: int, placeholder: str, offset: int = 0, line: int = 0, column: int = 0) -> str:
    """Editor snippet field: `${1:name}`, or `${1}` without a placeholder."""
    return f"${{{index}:{placeholder}}}" if placeholder else f"${{{index}}}"


def text_snippetEscape(text: str, offset: int = 0, line: int = 0, column: int = 0) -> str:
    """``output.text`` hook for editor snippet output: escape `\\` and `$`."""
    return text.replace("\\", "\\\\").replace("$", "\\$")


DEFAULT_OPTIONS: Dict[str, Any] = {
    "inlineElements": INLINE_ELEMENTS,
    "output.indent": "\t",
    "output.baseIndent": "",
    "output.newline": "\n",
    "output.tagCase": "",
    "output.attributeCase": "",
    "output.attributeQuotes": "double",
    "output.format": True,
    "output.formatLeafNode": False,
    "output.formatSkip": ["html"],
    "output.formatForce": ["body"],
    "output.inlineBreak": 3,
    "output.compactBoolean": False,
    "output.booleanAttributes": BOOLEAN_ATTRIBUTES,
    "output.reverseAttributes": False,
    "output.selfClosingStyle": "html",
    "output.field": field_default,
    "output.text": text_default,

    "markup.href": True,

    "comment.enabled": False,
    "comment.trigger": ["id", "class"],
    "comment.before": "",
    "comment.after": "\n<!-- /[#ID][.CLASS] -->",

    "bem.enabled": False,
    "bem.element": "__",
    "bem.modifier": "_",

    "jsx.enabled": False,

    "stylesheet.keywords": ["auto", "inherit", "unset", "none"],
    "stylesheet.unitless": [
        "z-index", "line-height", "opacity", "font-weight", "zoom",
        "flex", "flex-grow", "flex-shrink",
    ],
    "stylesheet.shortHex": True,
    "stylesheet.between": ": ",
    "stylesheet.after": ";",
    "stylesheet.intUnit": "px",
    "stylesheet.floatUnit": "em",
    "stylesheet.unitAliases": {"e": "em", "p": "%", "x": "ex", "r": "rem"},
    "stylesheet.keywordAliases": {
        "a": "auto", "i": "inherit", "s": "solid", "da": "dashed",
        "do": "dotted", "t": "transparent",
    },
    "stylesheet.json": False,
    "stylesheet.jsonDoubleQuotes": False,
    "stylesheet.fuzzySearchMinScore": 0,
}

DEFAULT_VARIABLES: Dict[str, str] = {
    "lang": "en",
    "locale": "en-US",
    "charset": "UTF-8",
    "indentation": "\t",
    "newline": "\n",
}

# Each overlay may carry "snippets" (a data file name), "options" and "variables".
SYNTAX_OVERLAYS: Dict[str, Dict[str, Any]] = {
    "markup": {"snippets": "snippets-html.yaml"},
    "xhtml": {"options": {"output.selfClosingStyle": "xhtml"}},
    "xml": {"options": {"output.selfClosingStyle": "xml"}},
    "xsl": {
        "snippets": "snippets-xsl.yaml",
        "options": {"output.selfClosingStyle": "xml"},
    },
    "jsx": {"options": {"jsx.enabled": True}},
    "stylesheet": {"snippets": "snippets-css.yaml"},
    "sass": {"options": {"stylesheet.after": ""}},
    "stylus": {"options": {"stylesheet.between": " ", "stylesheet.after": ""}},
}


def options_default() -> Dict[str, Any]:
    """Fresh copy of the default option table, with list/dict values copied."""
    result: Dict[str, Any] = {}
    for key, value in DEFAULT_OPTIONS.items():
        if isinstance(value, (list, dict)):
            value = value.copy()
        result[key] = value
    return result


