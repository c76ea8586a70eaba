"""
Markup abbreviation front end: tokenize, parse and unroll into a node tree.
"""

from typing import Dict, List, Optional, Union

from ..scanner import AbbreviationError
from .tokenizer import tokenize
from .parser import Parser
from .convert import Converter
from ...models.nodes import Abbreviation


def abbreviation_parse(abbr: str, jsx: bool = False, href: bool = False,
                       text: Union[str, List[str], None] = None,
                       variables: Optional[Dict[str, str]] = None,
                       max_repeat: Optional[int] = None) -> Abbreviation:
    """
    Parse markup abbreviation into an unrolled Abbreviation tree

    Args:
        abbr: Abbreviation source, e.g. `ul>li.item$*3`
        jsx: Accept JSX component names and expressions
        href: Fill `href` of a wrapping `<a>` from URL-like text
        text: Text to wrap with the abbreviation
        variables: Values for `${name}` variable fields
        max_repeat: Upper bound on repeated copies

    Returns:
        Abbreviation tree

    Raises:
        AbbreviationError: On malformed input; the error carries the source
    """
    try:
        group = Parser(tokenize(abbr), jsx=jsx).parse()
    except AbbreviationError as e:
        e.source = abbr
        raise
    return Converter(text=text, variables=variables, href=href, max_repeat=max_repeat).convert(group)


__all__ = ["abbreviation_parse", "tokenize", "Parser", "Converter"]
