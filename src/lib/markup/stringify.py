"""
Token stringification

Turns parse-tree tokens back into text while unrolling repeaters: `$`
numbering tokens read the current iteration of the enclosing repeaters and
`$#` placeholders pull lines of the wrapped text.
"""

from typing import TYPE_CHECKING

from ...models.tokens import (
    OPERATORS,
    Bracket,
    Field,
    Literal,
    Operator,
    Quote,
    RepeaterNumber,
    RepeaterPlaceholder,
    Token,
    WhiteSpace,
)

if TYPE_CHECKING:
    from .convert import ConvertState

BRACKETS = {
    'attribute': ('[', ']'),
    'expression': ('{', '}'),
    'group': ('(', ')'),
}


def token_stringify(token: Token, state: 'ConvertState') -> str:
    """Text representation of a single token in current repeater state"""
    if isinstance(token, (Literal, WhiteSpace)):
        return token.value
    if isinstance(token, Quote):
        return "'" if token.single else '"'
    if isinstance(token, Bracket):
        opening, closing = BRACKETS[token.context]
        return opening if token.open else closing
    if isinstance(token, Operator):
        return OPERATORS[token.operator]
    if isinstance(token, Field):
        return field_stringify(token, state)
    if isinstance(token, RepeaterPlaceholder):
        return placeholder_stringify(state)
    if isinstance(token, RepeaterNumber):
        return number_stringify(token, state)
    raise TypeError(f'Unknown token {token!r}')


def field_stringify(token: Field, state: 'ConvertState') -> str:
    if token.index is not None:
        # TextMate-compatible field
        return f'${{{token.index}:{token.name}}}' if token.name else f'${{{token.index}}}'
    if token.name:
        return state.variable_get(token.name)
    return ''


def placeholder_stringify(state: 'ConvertState') -> str:
    # Closest implicit repeater
    repeater = None
    for item in reversed(state.repeaters):
        if item.implicit:
            repeater = item
            break

    state.inserted = True
    return state.text_get(repeater.value if repeater else None)


def number_stringify(token: RepeaterNumber, state: 'ConvertState') -> str:
    value = 1
    last_ix = len(state.repeaters) - 1

    if last_ix >= 0:
        repeater = state.repeaters[last_ix]
        if token.reverse:
            value = token.base + repeater.count - repeater.value - 1
        else:
            value = token.base + repeater.value

        if token.parent:
            parent_ix = max(0, last_ix - token.parent)
            if parent_ix != last_ix:
                value += repeater.count * state.repeaters[parent_ix].value

    return str(value).rjust(token.size, '0')
