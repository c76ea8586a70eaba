"""
Markup abbreviation token models

Tokens produced by lib.markup.tokenizer. Each token carries the source
offsets it was read from so parser errors can point back into the
abbreviation.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class Literal:
    value: str
    start: int = 0
    end: int = 0


@dataclass
class Quote:
    single: bool
    start: int = 0
    end: int = 0


@dataclass
class Bracket:
    """
    Bracket token

    Attributes:
        open: True for opening bracket
        context: 'group' for (), 'attribute' for [], 'expression' for {}
    """
    open: bool
    context: str
    start: int = 0
    end: int = 0


@dataclass
class Operator:
    """
    Operator token

    Attributes:
        operator: one of child, sibling, climb, class, id, close, equal
    """
    operator: str
    start: int = 0
    end: int = 0


@dataclass
class Repeater:
    """
    Repeater token (*N)

    Attributes:
        count: Number of copies
        value: Zero-based iteration index, set while unrolling
        implicit: True for bare `*` bound to the wrapped text lines
    """
    count: int
    value: int = 0
    implicit: bool = False
    start: int = 0
    end: int = 0


@dataclass
class RepeaterPlaceholder:
    """`$#` - replaced with the current line of wrapped text"""
    value: Optional[str] = None
    start: int = 0
    end: int = 0


@dataclass
class RepeaterNumber:
    """
    `$` numbering token, e.g. `$$@-3`

    Attributes:
        size: Zero-padded width (count of `$`)
        reverse: Count down instead of up
        base: Starting number
        parent: How many repeaters up to take the index from
    """
    size: int
    reverse: bool = False
    base: int = 1
    parent: int = 0
    start: int = 0
    end: int = 0


@dataclass
class Field:
    """
    Tabstop field `${index:name}` or variable `${name}` (index is None)
    """
    index: Optional[int]
    name: str = ''
    start: int = 0
    end: int = 0


@dataclass
class WhiteSpace:
    value: str = ' '
    start: int = 0
    end: int = 0


Token = Union[Literal, Quote, Bracket, Operator, Repeater, RepeaterPlaceholder,
              RepeaterNumber, Field, WhiteSpace]

OPERATORS = {
    'child': '>',
    'class': '.',
    'climb': '^',
    'id': '#',
    'equal': '=',
    'close': '/',
    'sibling': '+',
}
