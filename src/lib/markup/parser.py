"""
Recursive-descent parser for markup abbreviation tokens

Consumes the flat token list produced by the tokenizer and builds a
TokenGroup tree:

    statements  := (element | group) (('>' | '+' | '^'+) statements)*
    group       := '(' statements ')' repeater?
    element     := name? (repeater | text | shortAttribute | attributeSet)* '/'?

The `>` operator descends into the element just parsed, `+` stays at the
same level and every `^` climbs one level up the context stack.

Example:
    >>> group = Parser(tokenize("ul>li*2")).parse()
    >>> group.elements[0].elements[0].repeat.count
    2
"""

from typing import List, Optional, Union

from ..scanner import AbbreviationError
from ...models.nodes import TokenAttribute, TokenElement, TokenGroup
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


class TokenScannerError(AbbreviationError):
    """Raised by the parser, positioned by token offset"""
    pass


def bracket_is(token: Optional[Token], context: Optional[str] = None, open: Optional[bool] = None) -> bool:
    return (isinstance(token, Bracket)
            and (not context or token.context == context)
            and (open is None or token.open == open))


def operator_is(token: Optional[Token], op: Optional[str] = None) -> bool:
    return isinstance(token, Operator) and (not op or token.operator == op)


def quote_is(token: Optional[Token], single: Optional[bool] = None) -> bool:
    return isinstance(token, Quote) and (single is None or token.single == single)


def element_name_is(token: Optional[Token]) -> bool:
    return isinstance(token, (Literal, RepeaterNumber, RepeaterPlaceholder))


def capitalized_literal_is(token: Optional[Token]) -> bool:
    return isinstance(token, Literal) and 'A' <= token.value[:1] <= 'Z'


class Parser:
    """
    Parser for markup abbreviation token streams

    Attributes:
        tokens: Token list to parse
        pos: Index of the next token
        start: Index where the current slice started
        jsx: Allow JSX-specific constructs (`Foo.Bar` names, `.{expr}`)
    """

    def __init__(self, tokens: List[Token], jsx: bool = False):
        self.tokens = tokens
        self.pos = 0
        self.start = 0
        self.jsx = jsx

    def parse(self) -> TokenGroup:
        """
        Parse whole token list

        Raises:
            TokenScannerError: If tokens remain after the last statement
        """
        result = self.statements()
        if self.pos < len(self.tokens):
            raise self.error('Unexpected character')
        return result

    # Token stream primitives

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> Optional[Token]:
        token = self.peek()
        self.pos += 1
        return token

    def hasNext(self) -> bool:
        return self.pos < len(self.tokens)

    def consume(self, test) -> bool:
        token = self.peek()
        if token is not None and test(token):
            self.pos += 1
            return True
        return False

    def slice(self, start: Optional[int] = None, end: Optional[int] = None) -> List[Token]:
        start = self.start if start is None else start
        end = self.pos if end is None else end
        return self.tokens[start:end]

    def error(self, message: str, token: Optional[Token] = None) -> TokenScannerError:
        token = token if token is not None else self.peek()
        pos = None
        if token is not None:
            pos = token.start
            message += f' at {token.start}'
        return TokenScannerError(message, pos)

    # Grammar

    def statements(self) -> TokenGroup:
        result = TokenGroup()
        ctx: Union[TokenGroup, TokenElement] = result
        stack: List[Union[TokenGroup, TokenElement]] = []

        while self.hasNext():
            node = self.element() or self.group()
            if node is None:
                break

            ctx.elements.append(node)
            if self.consume(lambda t: operator_is(t, 'child')):
                stack.append(ctx)
                ctx = node
            elif self.consume(lambda t: operator_is(t, 'sibling')):
                continue
            elif self.consume(lambda t: operator_is(t, 'climb')):
                while True:
                    if stack:
                        ctx = stack.pop()
                    if not self.consume(lambda t: operator_is(t, 'climb')):
                        break

        return result

    def group(self) -> Optional[TokenGroup]:
        if self.consume(lambda t: bracket_is(t, 'group', True)):
            result = self.statements()
            token = self.next()
            if bracket_is(token, 'group', False):
                result.repeat = self.repeater()
            return result
        return None

    def element(self) -> Optional[TokenElement]:
        elem = TokenElement()

        if self.elementName():
            elem.name = self.slice()

        while self.hasNext():
            self.start = self.pos
            if not elem.repeat and not elem.empty_is() and self.consume(lambda t: isinstance(t, Repeater)):
                elem.repeat = self.tokens[self.pos - 1]
                continue
            if elem.value is None and self.text():
                elem.value = self.text_get()
                continue

            attr = (self.shortAttribute('id')
                    or self.shortAttribute('class')
                    or self.attributeSet())
            if attr is not None:
                attrs = attr if isinstance(attr, list) else [attr]
                elem.attributes = (elem.attributes if elem.attributes is not None else []) + attrs
                continue

            if not elem.empty_is() and self.consume(lambda t: operator_is(t, 'close')):
                elem.selfClose = True
                if not elem.repeat and self.consume(lambda t: isinstance(t, Repeater)):
                    elem.repeat = self.tokens[self.pos - 1]
            break

        return None if elem.empty_is() else elem

    def attributeSet(self) -> Optional[List[TokenAttribute]]:
        if self.consume(lambda t: bracket_is(t, 'attribute', True)):
            attributes: List[TokenAttribute] = []
            while self.hasNext():
                attr = self.attribute()
                if attr is not None:
                    attributes.append(attr)
                elif self.consume(lambda t: bracket_is(t, 'attribute', False)):
                    break
                elif not self.consume(lambda t: isinstance(t, WhiteSpace)):
                    raise self.error(f'Unexpected "{type(self.peek()).__name__}" token')
            return attributes
        return None

    def shortAttribute(self, kind: str) -> Optional[TokenAttribute]:
        if operator_is(self.peek(), kind):
            self.pos += 1
            count = 1
            while operator_is(self.peek(), kind):
                self.pos += 1
                count += 1

            attr = TokenAttribute(name=[Literal(value=kind)])
            if count > 1:
                attr.multiple = True

            # React-like components: `.{styles.foo}`
            if self.jsx and self.text():
                attr.value = self.text_get()
                attr.expression = True
            else:
                attr.value = self.slice() if self.literal() else None
            return attr
        return None

    def attribute(self) -> Optional[TokenAttribute]:
        if self.quoted():
            # Quoted value without name is a value of default attribute
            return TokenAttribute(value=self.slice())

        if self.literal(allow_brackets=True):
            name = self.slice()
            value = None
            if self.consume(lambda t: operator_is(t, 'equal')):
                if self.quoted() or self.literal(allow_brackets=True):
                    value = self.slice()
            return TokenAttribute(name=name, value=value)
        return None

    def repeater(self) -> Optional[Repeater]:
        token = self.peek()
        if isinstance(token, Repeater):
            self.pos += 1
            return token
        return None

    def quoted(self) -> bool:
        start = self.pos
        quote = self.peek()
        if quote_is(quote):
            self.pos += 1
            while self.hasNext():
                if quote_is(self.next(), quote.single):
                    self.start = start
                    return True
            raise self.error('Unclosed quote', quote)
        return False

    def literal(self, allow_brackets: bool = False) -> bool:
        start = self.pos
        brackets = {'attribute': 0, 'expression': 0, 'group': 0}

        while self.hasNext():
            token = self.peek()
            if brackets['expression']:
                # Inside expression everything is consumed
                if bracket_is(token, 'expression'):
                    brackets[token.context] += 1 if token.open else -1
            elif (quote_is(token) or operator_is(token)
                    or isinstance(token, (WhiteSpace, Repeater))):
                break
            elif bracket_is(token):
                if not allow_brackets:
                    break
                if token.open:
                    brackets[token.context] += 1
                elif not brackets[token.context]:
                    # Unmatched closing bracket belongs to parent consumer
                    break
                else:
                    brackets[token.context] -= 1
            self.pos += 1

        if start != self.pos:
            self.start = start
            return True
        return False

    def elementName(self) -> bool:
        start = self.pos

        if self.jsx and self.consume(capitalized_literal_is):
            # React component names like `Foo.Bar.Baz`
            while self.hasNext():
                pos = self.pos
                if (not self.consume(lambda t: operator_is(t, 'class'))
                        or not self.consume(capitalized_literal_is)):
                    self.pos = pos
                    break

        while self.hasNext() and self.consume(element_name_is):
            pass

        if self.pos != start:
            self.start = start
            return True
        return False

    def text(self) -> bool:
        start = self.pos
        if self.consume(lambda t: bracket_is(t, 'expression', True)):
            brackets = 0
            while self.hasNext():
                token = self.next()
                if bracket_is(token, 'expression'):
                    if token.open:
                        brackets += 1
                    elif not brackets:
                        break
                    else:
                        brackets -= 1
            self.start = start
            return True
        return False

    def text_get(self) -> List[Token]:
        start = self.start
        end = self.pos
        if bracket_is(self.tokens[start], 'expression', True):
            start += 1
        if end > start and bracket_is(self.tokens[end - 1], 'expression', False):
            end -= 1
        return self.slice(start, end)
