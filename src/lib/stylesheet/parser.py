"""
Parser for stylesheet abbreviation tokens

    abbreviation := property ('+' property)*
    property     := name? valueDelimiter? (value | '!' | ',')*
    value        := (token | literal '(' arguments ')')+

A leading literal is the property name unless it opens a function call.
In value mode there is no name and every literal is a value.

Example:
    >>> props = Parser(tokenize("p10-20+m0")).parse()
    >>> [p.name for p in props]
    ['p', 'm']
"""

from typing import List, Optional

from .tokenizer import tokenize
from ..markup.parser import TokenScannerError
from ...models.css import (
    CSSBracket,
    CSSColor,
    CSSCustomProperty,
    CSSField,
    CSSLiteral,
    CSSNumber,
    CSSOperator,
    CSSProperty,
    CSSString,
    CSSToken,
    CSSValue,
    CSSWhiteSpace,
    FunctionCall,
)

VALUE_TOKENS = (CSSString, CSSColor, CSSNumber, CSSLiteral, CSSField, CSSCustomProperty)


def operator_is(token: Optional[CSSToken], op: Optional[str] = None) -> bool:
    return isinstance(token, CSSOperator) and (not op or token.operator == op)


def bracket_is(token: Optional[CSSToken], open: Optional[bool] = None) -> bool:
    return isinstance(token, CSSBracket) and (open is None or token.open == open)


def value_delimiter_is(token: Optional[CSSToken]) -> bool:
    return operator_is(token, 'propertyDelimiter') or operator_is(token, 'valueDelimiter')


def white_space_is(token: Optional[CSSToken]) -> bool:
    return isinstance(token, CSSWhiteSpace)


class Parser:
    """
    Parser for stylesheet token streams

    Attributes:
        tokens: Token list to parse
        pos: Index of the next token
        value_mode: Tokens form a property value, not a property abbreviation
    """

    def __init__(self, tokens: List[CSSToken], value_mode: bool = False):
        self.tokens = tokens
        self.pos = 0
        self.value_mode = value_mode

    def parse(self) -> List[CSSProperty]:
        """
        Parse whole token list

        Raises:
            TokenScannerError: On a token that starts no property
        """
        result: List[CSSProperty] = []
        while self.hasNext():
            prop = self.property()
            if prop is not None:
                result.append(prop)
            elif not self.consume(lambda t: operator_is(t, 'sibling')):
                raise self.error('Unexpected token')
        return result

    def peek(self) -> Optional[CSSToken]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def hasNext(self) -> bool:
        return self.pos < len(self.tokens)

    def consume(self, test) -> bool:
        token = self.peek()
        if token is not None and test(token):
            self.pos += 1
            return True
        return False

    def error(self, message: str, token: Optional[CSSToken] = None) -> TokenScannerError:
        token = token if token is not None else self.peek()
        pos = None
        if token is not None and token.start is not None:
            pos = token.start
            message += f' at {token.start}'
        return TokenScannerError(message, pos)

    def function_starts(self) -> bool:
        if self.pos + 1 >= len(self.tokens):
            return False
        return isinstance(self.tokens[self.pos], CSSLiteral) and isinstance(self.tokens[self.pos + 1], CSSBracket)

    def property(self) -> Optional[CSSProperty]:
        name: Optional[str] = None
        important = False
        value: List[CSSValue] = []
        token = self.peek()

        if not self.value_mode and isinstance(token, CSSLiteral) and not self.function_starts():
            self.pos += 1
            name = token.value
            # Value delimiter right after the name, e.g. `d:n` or `p-10`
            self.consume(value_delimiter_is)

        if self.value_mode:
            self.consume(white_space_is)

        while self.hasNext():
            if self.consume(lambda t: operator_is(t, 'important')):
                important = True
                continue
            fragment = self.value(self.value_mode)
            if fragment is not None:
                value.append(fragment)
            elif not self.consume(lambda t: operator_is(t, 'argumentDelimiter')):
                break

        if name or value or important:
            return CSSProperty(name=name, value=value, important=important)
        return None

    def value(self, in_argument: bool) -> Optional[CSSValue]:
        result = []
        while self.hasNext():
            token = self.peek()
            if isinstance(token, VALUE_TOKENS):
                self.pos += 1
                args = self.arguments() if isinstance(token, CSSLiteral) else None
                if args is not None:
                    result.append(FunctionCall(name=token.value, arguments=args))
                else:
                    result.append(token)
            elif value_delimiter_is(token) or (in_argument and white_space_is(token)):
                self.pos += 1
            else:
                break

        return CSSValue(value=result) if result else None

    def arguments(self) -> Optional[List[CSSValue]]:
        if not self.consume(lambda t: bracket_is(t, True)):
            return None

        args: List[CSSValue] = []
        while self.hasNext() and not self.consume(lambda t: bracket_is(t, False)):
            value = self.value(True)
            if value is not None:
                args.append(value)
            elif not self.consume(white_space_is) and not self.consume(lambda t: operator_is(t, 'argumentDelimiter')):
                raise self.error('Unexpected token')
        return args


def parse(abbr: str, value_mode: bool = False) -> List[CSSProperty]:
    """
    Tokenize and parse a stylesheet abbreviation

    Args:
        abbr: Abbreviation source
        value_mode: Parse as a property value

    Returns:
        Parsed properties

    Raises:
        AbbreviationError: On malformed input; the error carries the source
    """
    try:
        return Parser(tokenize(abbr, value_mode), value_mode).parse()
    except TokenScannerError as e:
        e.source = abbr
        raise
