"""
Stylesheet abbreviation models

Tokens produced by lib.stylesheet.tokenizer, the property list built by
lib.stylesheet.parser, and the compiled snippet entries the resolver
matches against. Tokens synthesized during resolution carry no source
offsets (start/end stay None).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass
class CSSLiteral:
    value: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSNumber:
    """
    Numeric value with optional unit

    Attributes:
        value: Parsed number
        unit: Unit as written (`px`, `%`, alias such as `p`), may be empty
        rawValue: Number text as written, used to tell `1.` from `1`
    """
    value: float
    unit: str = ''
    rawValue: str = ''
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSColor:
    """RGB channels (0-255) and alpha (0-1); raw is the text after `#`"""
    r: int
    g: int
    b: int
    a: float = 1.0
    raw: str = ''
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSString:
    value: str
    quote: str = 'double'
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSField:
    index: Optional[int]
    name: str = ''
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSCustomProperty:
    value: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSBracket:
    open: bool
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSOperator:
    """
    Operator token

    Attributes:
        operator: sibling (+), important (!), argumentDelimiter (,),
            propertyDelimiter (:) or valueDelimiter (-)
    """
    operator: str
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class CSSWhiteSpace:
    start: Optional[int] = None
    end: Optional[int] = None


CSSToken = Union[CSSLiteral, CSSNumber, CSSColor, CSSString, CSSField,
                 CSSCustomProperty, CSSBracket, CSSOperator, CSSWhiteSpace]


@dataclass
class CSSValue:
    """Space-separated run of value tokens; comma separates CSSValues"""
    value: List['CSSValueToken'] = field(default_factory=list)


@dataclass
class FunctionCall:
    name: str
    arguments: List[CSSValue] = field(default_factory=list)


CSSValueToken = Union[CSSLiteral, CSSNumber, CSSColor, CSSString, CSSField,
                      CSSCustomProperty, FunctionCall]


@dataclass
class CSSSnippetRaw:
    """Snippet expanded verbatim, e.g. `@media` blocks"""
    key: str
    value: str


@dataclass
class CSSSnippetProperty:
    """
    Property snippet

    Attributes:
        key: Abbreviation the snippet is matched by
        property: CSS property name
        value: Alternative default values, one CSSValue list per `|` option
        keywords: Keyword name -> token usable as this property's value
        dependencies: Longhand property snippets nested under this one
    """
    key: str
    property: str
    value: List[List[CSSValue]] = field(default_factory=list)
    keywords: Dict[str, CSSValueToken] = field(default_factory=dict)
    dependencies: List['CSSSnippetProperty'] = field(default_factory=list)


CSSSnippet = Union[CSSSnippetRaw, CSSSnippetProperty]


@dataclass
class CSSProperty:
    """
    Parsed (and later resolved) property

    Attributes:
        name: Property abbreviation, replaced with the full name on resolve
        value: Comma-separated value list
        important: `!` was given
        snippet: Snippet the property was resolved with, if any
    """
    name: Optional[str] = None
    value: List[CSSValue] = field(default_factory=list)
    important: bool = False
    snippet: Optional[CSSSnippet] = None
