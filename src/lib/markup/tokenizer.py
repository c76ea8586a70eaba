"""
Markup abbreviation tokenizer

Converts an abbreviation string like `ul.nav>li.item$*3{Item $}` into a
flat list of tokens. Whether a character is structural or literal depends
on the bracket/quote context: `>` or `.` are operators at element level
but plain text inside quotes or `{}` expressions.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..scanner import (
    Scanner,
    isAlpha,
    isAlphaNumericWord,
    isNumber,
    isQuote,
    isSpace,
    isUmlaut,
)
from ...models.tokens import (
    Bracket,
    Field,
    Literal,
    Operator,
    Quote,
    Repeater,
    RepeaterNumber,
    RepeaterPlaceholder,
    Token,
    WhiteSpace,
)

OPERATOR_TYPES = {
    '>': 'child',
    '+': 'sibling',
    '^': 'climb',
    '.': 'class',
    '#': 'id',
    '/': 'close',
    '=': 'equal',
}

BRACKET_TYPES = {
    '(': 'group',
    ')': 'group',
    '[': 'attribute',
    ']': 'attribute',
    '{': 'expression',
    '}': 'expression',
}


@dataclass
class TokenizerContext:
    """Nesting depth of each bracket kind plus the open quote character"""
    group: int = 0
    attribute: int = 0
    expression: int = 0
    quote: str = ''


def tokenize(source: str) -> List[Token]:
    """
    Tokenize markup abbreviation

    Raises:
        ScannerError: On unexpected character or unterminated field
    """
    scanner = Scanner(source)
    result: List[Token] = []
    ctx = TokenizerContext()

    while not scanner.eof():
        ch = scanner.peek()
        token = token_get(scanner, ctx)

        if token is None:
            raise scanner.error('Unexpected character')

        if isinstance(token, Literal) and snippetSuffix_follows(scanner, ctx, result):
            # `ul+`, `table+>...`: trailing `+` belongs to the element name
            scanner.next()
            token.value += '+'
            token.end = scanner.pos

        result.append(token)
        if isinstance(token, Quote):
            ctx.quote = '' if ch == ctx.quote else ch
        elif isinstance(token, Bracket):
            delta = 1 if token.open else -1
            setattr(ctx, token.context, getattr(ctx, token.context) + delta)

    return result


def token_get(scanner: Scanner, ctx: TokenizerContext) -> Optional[Token]:
    return (field(scanner, ctx)
            or repeater_placeholder(scanner)
            or repeater_number(scanner)
            or repeater(scanner)
            or white_space(scanner)
            or literal(scanner, ctx)
            or operator(scanner)
            or quote(scanner)
            or bracket(scanner))


def snippetSuffix_follows(scanner: Scanner, ctx: TokenizerContext, tokens: List[Token]) -> bool:
    """
    A `+` right after an element name that is not followed by another
    element: end of input, `>`, `^`, `)` or a repeater
    """
    if ctx.quote or ctx.attribute or ctx.expression or scanner.peek() != '+':
        return False
    nxt = scanner.string[scanner.pos + 1] if scanner.pos + 1 < scanner.end else ''
    if nxt not in ('', '>', '^', ')', '*'):
        return False
    prev = tokens[-1] if tokens else None
    return (prev is None
            or (isinstance(prev, Operator) and prev.operator in ('child', 'sibling', 'climb'))
            or (isinstance(prev, Bracket) and prev.context == 'group' and prev.open))


def literal(scanner: Scanner, ctx: TokenizerContext) -> Optional[Literal]:
    start = scanner.pos
    expression_start = ctx.expression
    value = ''

    while not scanner.eof():
        # Escaped character is consumed in any context
        if scanner.eat('\\'):
            value += scanner.next()
            continue

        ch = scanner.peek()

        if ch == '/' and not ctx.quote and not ctx.expression and not ctx.attribute:
            # `/` between numbers is allowed in class names, e.g. `.w-1/2`
            prev = scanner.string[scanner.pos - 1] if scanner.pos else ''
            nxt = scanner.string[scanner.pos + 1] if scanner.pos + 1 < len(scanner.string) else ''
            if isNumber(prev) and isNumber(nxt):
                value += scanner.next()
                continue

        if ch == ctx.quote or ch == '$' or operator_allowed(ch, ctx):
            break

        if expression_start:
            # Nested expressions, e.g. span{{foo}}
            if ch == '{':
                ctx.expression += 1
            elif ch == '}':
                if ctx.expression > expression_start:
                    ctx.expression -= 1
                else:
                    break
        elif not ctx.quote:
            if not ctx.attribute and not element_name_char(ch):
                break
            if (space_allowed(ch, ctx) or repeater_allowed(ch, ctx)
                    or isQuote(ch) or ch in BRACKET_TYPES):
                break

        value += scanner.next()

    if start != scanner.pos:
        scanner.start = start
        return Literal(value=value, start=start, end=scanner.pos)
    return None


def white_space(scanner: Scanner) -> Optional[WhiteSpace]:
    start = scanner.pos
    if scanner.eatWhile(isSpace):
        return WhiteSpace(value=scanner.substring(start), start=start, end=scanner.pos)
    return None


def quote(scanner: Scanner) -> Optional[Quote]:
    ch = scanner.peek()
    if isQuote(ch):
        start = scanner.pos
        scanner.pos += 1
        return Quote(single=ch == "'", start=start, end=scanner.pos)
    return None


def bracket(scanner: Scanner) -> Optional[Bracket]:
    ch = scanner.peek()
    context = BRACKET_TYPES.get(ch) if ch else None
    if context:
        start = scanner.pos
        scanner.pos += 1
        return Bracket(open=ch in '([{', context=context, start=start, end=scanner.pos)
    return None


def operator(scanner: Scanner) -> Optional[Operator]:
    op = OPERATOR_TYPES.get(scanner.peek())
    if op:
        start = scanner.pos
        scanner.pos += 1
        return Operator(operator=op, start=start, end=scanner.pos)
    return None


def repeater(scanner: Scanner) -> Optional[Repeater]:
    start = scanner.pos
    if scanner.eat('*'):
        scanner.start = scanner.pos
        count = 1
        implicit = False

        if scanner.eatWhile(isNumber):
            count = int(scanner.current())
        else:
            implicit = True

        return Repeater(count=count, value=0, implicit=implicit, start=start, end=scanner.pos)
    return None


def repeater_placeholder(scanner: Scanner) -> Optional[RepeaterPlaceholder]:
    start = scanner.pos
    if scanner.eat('$') and scanner.eat('#'):
        return RepeaterPlaceholder(start=start, end=scanner.pos)
    scanner.pos = start
    return None


def repeater_number(scanner: Scanner) -> Optional[RepeaterNumber]:
    start = scanner.pos
    if scanner.eatWhile('$'):
        size = scanner.pos - start
        reverse = False
        base = 1
        parent = 0

        if scanner.eat('@'):
            # Numbering modifiers
            while scanner.eat('^'):
                parent += 1
            reverse = scanner.eat('-')
            scanner.start = scanner.pos
            if scanner.eatWhile(isNumber):
                base = int(scanner.current())

        scanner.start = start
        return RepeaterNumber(size=size, reverse=reverse, base=base, parent=parent,
                              start=start, end=scanner.pos)
    return None


def field(scanner: Scanner, ctx: TokenizerContext) -> Optional[Field]:
    start = scanner.pos
    # Fields are allowed inside expressions and attributes only
    if (ctx.expression or ctx.attribute) and scanner.eat('$') and scanner.eat('{'):
        scanner.start = scanner.pos
        index: Optional[int] = None
        name = ''

        if scanner.eatWhile(isNumber):
            index = int(scanner.current())
            name = placeholder_consume(scanner) if scanner.eat(':') else ''
        elif isAlpha(scanner.peek()):
            # Variable reference
            name = placeholder_consume(scanner)

        if scanner.eat('}'):
            return Field(index=index, name=name, start=start, end=scanner.pos)

        raise scanner.error('Expecting }')

    scanner.pos = start
    return None


def placeholder_consume(scanner: Scanner) -> str:
    """Consume field placeholder up to the unbalanced closing brace"""
    stack: List[int] = []
    scanner.start = scanner.pos

    while not scanner.eof():
        if scanner.eat('{'):
            stack.append(scanner.pos)
        elif scanner.eat('}'):
            if not stack:
                scanner.pos -= 1
                break
            stack.pop()
        else:
            scanner.pos += 1

    if stack:
        scanner.pos = stack.pop()
        raise scanner.error('Expecting }')

    return scanner.current()


def operator_allowed(ch: str, ctx: TokenizerContext) -> bool:
    op = OPERATOR_TYPES.get(ch) if ch else None
    if not op or ctx.quote or ctx.expression:
        return False
    # Inside attributes only `=` is structural
    return not ctx.attribute or op == 'equal'


def space_allowed(ch: str, ctx: TokenizerContext) -> bool:
    return isSpace(ch) and not ctx.expression


def repeater_allowed(ch: str, ctx: TokenizerContext) -> bool:
    return ch == '*' and not ctx.attribute and not ctx.expression


def element_name_char(ch: str) -> bool:
    return isAlphaNumericWord(ch) or isUmlaut(ch) or ch in ('-', ':', '!')
