"""
Stylesheet abbreviation tokenizer

Splits abbreviations such as `p10+m5-a`, `bd1-s#f.5` or `trf:scale(1.2)`
into value tokens. Outside of brackets literals are read in "short" mode
(letters only) so that `p10` splits into a name and a number; inside
brackets and in value mode dashes and digits belong to the literal.
"""

from typing import List, Optional

from ..scanner import (
    Scanner,
    isAlpha,
    isAlphaNumericWord,
    isAlphaWord,
    isNumber,
    isQuote,
    isSpace,
)
from ..markup.tokenizer import placeholder_consume
from ...models.css import (
    CSSBracket,
    CSSColor,
    CSSCustomProperty,
    CSSField,
    CSSLiteral,
    CSSNumber,
    CSSOperator,
    CSSString,
    CSSToken,
    CSSWhiteSpace,
)

OPERATOR_TYPES = {
    '+': 'sibling',
    '!': 'important',
    ',': 'argumentDelimiter',
    ':': 'propertyDelimiter',
    '-': 'valueDelimiter',
}


def tokenize(abbr: str, value_mode: bool = False) -> List[CSSToken]:
    """
    Tokenize stylesheet abbreviation

    Args:
        abbr: Abbreviation source
        value_mode: Source is a property value, not a property abbreviation

    Returns:
        Token list

    Raises:
        ScannerError: On an unexpected character or unbalanced bracket
    """
    brackets = 0
    scanner = Scanner(abbr)
    tokens: List[CSSToken] = []

    while not scanner.eof():
        token = token_get(scanner, brackets == 0 and not value_mode)
        if token is None:
            raise scanner.error('Unexpected character')

        if isinstance(token, CSSBracket):
            if not brackets and token.open:
                tokens_merge(scanner, tokens)
            brackets += 1 if token.open else -1
            if brackets < 0:
                raise scanner.error('Unexpected bracket', token.start)

        tokens.append(token)

        # A dash right after a color or unit-less number separates values
        if dash_forced(token, scanner):
            op = operator(scanner)
            if op is not None:
                tokens.append(op)

    return tokens


def token_get(scanner: Scanner, short: bool) -> Optional[CSSToken]:
    return (field(scanner)
            or custom_property(scanner)
            or number_value(scanner)
            or color_value(scanner)
            or string_value(scanner)
            or bracket(scanner)
            or operator(scanner)
            or white_space(scanner)
            or literal(scanner, short))


def field(scanner: Scanner) -> Optional[CSSField]:
    start = scanner.pos
    if scanner.eat('$') and scanner.eat('{'):
        scanner.start = scanner.pos
        index: Optional[int] = None
        name = ''

        if scanner.eatWhile(isNumber):
            index = int(scanner.current())
            name = placeholder_consume(scanner) if scanner.eat(':') else ''
        elif isAlpha(scanner.peek()):
            name = placeholder_consume(scanner)

        if scanner.eat('}'):
            return CSSField(index=index, name=name, start=start, end=scanner.pos)

        raise scanner.error('Expecting }')

    scanner.pos = start
    return None


def literal(scanner: Scanner, short: bool) -> Optional[CSSLiteral]:
    start = scanner.pos
    if scanner.eat(ident_prefix_is):
        # SCSS/LESS variable: keyword characters unless it opens the abbreviation
        scanner.eatWhile(keyword_is if start else literal_is)
    elif scanner.eat(isAlphaWord):
        scanner.eatWhile(literal_is if short else keyword_is)
    else:
        # Dots are allowed only at the beginning of literal
        scanner.eat('.')
        scanner.eatWhile(literal_is)

    if start != scanner.pos:
        scanner.start = start
        return CSSLiteral(value=scanner.substring(start), start=start, end=scanner.pos)
    return None


def number_value(scanner: Scanner) -> Optional[CSSNumber]:
    start = scanner.pos
    if number_consume(scanner):
        raw = scanner.substring(start)
        unit_start = scanner.pos
        scanner.eat('%') or scanner.eatWhile(isAlphaWord)
        return CSSNumber(value=float(raw), unit=scanner.substring(unit_start), rawValue=raw,
                         start=start, end=scanner.pos)
    return None


def number_consume(scanner: Scanner) -> bool:
    """Consume `-?\\d*(\\.\\d*)?`, rejecting a lone dot or a lone dash"""
    start = scanner.pos
    scanner.eat('-')
    after_negative = scanner.pos
    has_decimal = scanner.eatWhile(isNumber)
    prev_pos = scanner.pos

    if scanner.eat('.'):
        # `1.` is valid and forces a float unit
        has_float = scanner.eatWhile(isNumber)
        if not has_decimal and not has_float:
            scanner.pos = prev_pos

    if scanner.pos == after_negative:
        scanner.pos = start
    return scanner.pos != start


def color_value(scanner: Scanner):
    """
    Color shorthands:

        #abc   -> #aabbcc
        #0     -> #000000
        #fff.5 -> rgba(255, 255, 255, 0.5)
        #t     -> transparent
    """
    start = scanner.pos
    if scanner.eat('#'):
        value_start = scanner.pos
        color = ''
        alpha = ''

        if scanner.eatWhile(hex_is):
            color = scanner.substring(value_start)
            alpha = color_alpha(scanner)
        elif scanner.eat('t'):
            color = '0'
            alpha = color_alpha(scanner) or '0'
        else:
            alpha = color_alpha(scanner)

        if color or alpha or scanner.eof():
            r, g, b, a = color_parse(color, alpha)
            return CSSColor(r=r, g=g, b=b, a=a, raw=scanner.substring(start + 1),
                            start=start, end=scanner.pos)

        # A bare `#` is not a color
        return CSSLiteral(value=scanner.substring(start), start=start, end=scanner.pos)

    scanner.pos = start
    return None


def color_alpha(scanner: Scanner) -> str:
    start = scanner.pos
    if scanner.eat('.'):
        scanner.start = start
        if scanner.eatWhile(isNumber):
            return scanner.current()
        return '1'
    return ''


def color_parse(value: str, alpha: str):
    """
    Expand hex shorthand into channels

    Returns:
        (r, g, b, a) tuple

    Example:
        >>> color_parse('f', '')
        (255, 255, 255, 1.0)
        >>> color_parse('0', '.5')
        (0, 0, 0, 0.5)
    """
    r = g = b = '0'
    a = float(alpha) if alpha else 1.0

    length = len(value)
    if length == 1:
        r = g = b = value + value
    elif length == 2:
        r = g = b = value
    elif length == 3:
        r, g, b = value[0] * 2, value[1] * 2, value[2] * 2
    elif length:
        value += value
        r, g, b = value[0:2], value[2:4], value[4:6]

    return int(r, 16), int(g, 16), int(b, 16), a


def string_value(scanner: Scanner) -> Optional[CSSString]:
    ch = scanner.peek()
    start = scanner.pos
    finished = False

    if isQuote(ch):
        scanner.pos += 1
        while not scanner.eof():
            if scanner.eat(ch):
                finished = True
                break
            scanner.pos += 1

        scanner.start = start
        return CSSString(value=scanner.substring(start + 1, scanner.pos - (1 if finished else 0)),
                         quote='single' if ch == "'" else 'double',
                         start=start, end=scanner.pos)
    return None


def white_space(scanner: Scanner) -> Optional[CSSWhiteSpace]:
    start = scanner.pos
    if scanner.eatWhile(isSpace):
        return CSSWhiteSpace(start=start, end=scanner.pos)
    return None


def custom_property(scanner: Scanner) -> Optional[CSSCustomProperty]:
    start = scanner.pos
    if scanner.eat('-') and scanner.eat('-'):
        scanner.start = start
        scanner.eatWhile(keyword_is)
        return CSSCustomProperty(value=scanner.current(), start=start, end=scanner.pos)

    scanner.pos = start
    return None


def bracket(scanner: Scanner) -> Optional[CSSBracket]:
    ch = scanner.peek()
    if ch in ('(', ')'):
        start = scanner.pos
        scanner.pos += 1
        return CSSBracket(open=ch == '(', start=start, end=scanner.pos)
    return None


def operator(scanner: Scanner) -> Optional[CSSOperator]:
    op = OPERATOR_TYPES.get(scanner.peek())
    if op:
        start = scanner.pos
        scanner.pos += 1
        return CSSOperator(operator=op, start=start, end=scanner.pos)
    return None


def tokens_merge(scanner: Scanner, tokens: List[CSSToken]) -> None:
    """
    Fold trailing literal/number tokens into one literal: the name of the
    function whose bracket opens next, e.g. `scale3d(`
    """
    start = end = 0
    while tokens:
        token = tokens[-1]
        if isinstance(token, (CSSLiteral, CSSNumber)):
            start = token.start
            if not end:
                end = token.end
            tokens.pop()
        else:
            break

    if start != end:
        tokens.append(CSSLiteral(value=scanner.substring(start, end), start=start, end=end))


def dash_forced(token: CSSToken, scanner: Scanner) -> bool:
    """
    Whether the character after `token` must be read as an operator.

    Always after a color. After a unit-less number only when it does not
    open a negative number, so `10-20` reads as 10 and -20 while `10-a`
    reads as 10, delimiter, a.
    """
    if isinstance(token, CSSColor):
        return True
    if isinstance(token, CSSNumber) and not token.unit:
        return not negative_starts(scanner)
    return False


def negative_starts(scanner: Scanner) -> bool:
    string = scanner.string
    pos = scanner.pos
    if pos >= scanner.end or string[pos] != '-':
        return False
    nxt = string[pos + 1] if pos + 1 < scanner.end else ''
    if isNumber(nxt):
        return True
    return nxt == '.' and pos + 2 < scanner.end and isNumber(string[pos + 2])


def ident_prefix_is(ch: str) -> bool:
    return ch in ('@', '$') if ch else False


def hex_is(ch: str) -> bool:
    return isNumber(ch) or ('a' <= ch.lower() <= 'f' if ch else False)


def keyword_is(ch: str) -> bool:
    return isAlphaNumericWord(ch) or ch == '-'


def literal_is(ch: str) -> bool:
    return isAlphaWord(ch) or ch in ('%', '/') if ch else False
