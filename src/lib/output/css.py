"""
Stylesheet formatter

Writes resolved properties as `name: value;` lines, or as JavaScript
object members in `stylesheet.json` mode (`marginTop: 10,`).
"""

import re
from typing import List, Optional

from .stream import OutputStream
from ..stylesheet.colors import color, frac
from ..stylesheet.resolver import SCOPE_SECTION
from ...config.resolve import Config
from ...models.css import (
    CSSColor,
    CSSCustomProperty,
    CSSField,
    CSSLiteral,
    CSSNumber,
    CSSProperty,
    CSSString,
    CSSValue,
    CSSValueToken,
    FunctionCall,
)

RE_DASH_LETTER = re.compile(r'-(\w)')


def css(abbr: List[CSSProperty], config: Config) -> str:
    """
    Format resolved stylesheet abbreviation

    In a section context (`@@section`) only properties that matched a
    snippet are written.
    """
    out = OutputStream(config.options)
    fmt = config.option('output.format')

    if config.context is not None and config.context.name == SCOPE_SECTION:
        abbr = [node for node in abbr if node.snippet is not None]

    for i, node in enumerate(abbr):
        if fmt and i != 0:
            out.pushNewline(True)
        property_output(node, out, config)
    return out.value


def property_output(node: CSSProperty, out: OutputStream, config: Config) -> None:
    json_mode = config.option('stylesheet.json')
    if node.name:
        name = camelCase(node.name) if json_mode else node.name
        out.pushString(name + config.option('stylesheet.between'))

        value_start = out.offset
        if node.value:
            propertyValue_output(node, out, config)
        else:
            out.pushField(0, '')

        if json_mode:
            # JSON mode: `!important` is not supported
            out.push(',')
        else:
            important_output(node, out, out.offset != value_start)
            out.push(config.option('stylesheet.after'))
    else:
        for css_value in node.value:
            for token in css_value.value:
                token_output(token, out, config)
        important_output(node, out, bool(node.value))


def propertyValue_output(node: CSSProperty, out: OutputStream, config: Config) -> None:
    json_mode = config.option('stylesheet.json')
    num = singleNumeric_get(node) if json_mode else None

    if num is not None and (not num.unit or num.unit == 'px'):
        out.push(frac(num.value, 4))
        return

    quote = '"' if config.option('stylesheet.jsonDoubleQuotes') else "'"
    if json_mode:
        out.push(quote)
    for i, css_value in enumerate(node.value):
        if i:
            out.push(', ')
        value_output(css_value, out, config)
    if json_mode:
        out.push(quote)


def important_output(node: CSSProperty, out: OutputStream, separator: bool) -> None:
    if node.important:
        if separator:
            out.push(' ')
        out.push('!important')


def value_output(value: CSSValue, out: OutputStream, config: Config) -> None:
    prev_end: Optional[int] = None
    for i, token in enumerate(value.value):
        # A field written right after the previous token stays glued to it
        glued = isinstance(token, CSSField) and token.start is not None and token.start == prev_end
        if i and not glued:
            out.push(' ')
        token_output(token, out, config)
        prev_end = getattr(token, 'end', None)


def token_output(token: CSSValueToken, out: OutputStream, config: Config) -> None:
    if isinstance(token, CSSColor):
        out.push(color(token, config.option('stylesheet.shortHex')))
    elif isinstance(token, (CSSLiteral, CSSCustomProperty)):
        out.pushString(token.value)
    elif isinstance(token, CSSNumber):
        out.pushString(frac(token.value, 4) + token.unit)
    elif isinstance(token, CSSString):
        quote = '"' if token.quote == 'double' else "'"
        out.pushString(quote + token.value + quote)
    elif isinstance(token, CSSField):
        out.pushField(token.index or 0, token.name)
    elif isinstance(token, FunctionCall):
        out.push(token.name + '(')
        for i, arg in enumerate(token.arguments):
            if i:
                out.push(', ')
            value_output(arg, out, config)
        out.push(')')


def singleNumeric_get(node: CSSProperty) -> Optional[CSSNumber]:
    if len(node.value) == 1 and len(node.value[0].value) == 1:
        token = node.value[0].value[0]
        if isinstance(token, CSSNumber):
            return token
    return None


def camelCase(name: str) -> str:
    return RE_DASH_LETTER.sub(lambda m: m.group(1).upper(), name)
