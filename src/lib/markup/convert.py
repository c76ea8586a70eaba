"""
Abbreviation converter

Walks the TokenGroup tree produced by the parser and builds the final
Abbreviation tree. Repeated elements and groups are unrolled into sibling
copies, each one stringified with its own iteration index so numbering
tokens resolve to `1`, `2`, `3`...

Wrapped text (`text` option) is either distributed over an implicit
repeater (`li*`) line by line, consumed through `$#` placeholders, or, if
nothing consumed it, appended to the deepest last node.
"""

import dataclasses
import math
import re
from typing import Dict, List, Optional, Sequence, Union

from ..log import LOG
from .stringify import token_stringify
from ...models.nodes import (
    Abbreviation,
    AbbreviationAttribute,
    AbbreviationNode,
    TokenAttribute,
    TokenElement,
    TokenGroup,
    Value,
    deepest_find,
)
from ...models.tokens import Bracket, Field, Quote, Repeater, Token

TextInput = Union[str, List[str], None]


class ConvertState:
    """
    Mutable state of a single conversion pass

    Attributes:
        inserted: Text was consumed by an implicit repeater or placeholder
        repeaters: Stack of repeaters being unrolled
        text: Wrapped text, either a string or list of lines
        clean_text: Non-empty lines of wrapped text
        repeat_guard: Remaining number of repeated copies allowed
        variables: Values for `${name}` variable fields
    """

    def __init__(self, text: TextInput = None, variables: Optional[Dict[str, str]] = None,
                 max_repeat: Optional[int] = None):
        self.inserted = False
        self.text_inserted = False
        self.repeaters: List[Repeater] = []
        self.text = text
        self.clean_text: Union[str, List[str], None] = (
            [line for line in text if line.strip()] if isinstance(text, list) else text
        )
        self.repeat_guard: float = max_repeat if max_repeat else math.inf
        self.variables = variables or {}

    def text_get(self, pos: Optional[int] = None) -> str:
        self.text_inserted = True
        if isinstance(self.text, list):
            if pos is not None and 0 <= pos < len(self.clean_text):
                return self.clean_text[pos]
            if pos is not None and 0 <= pos < len(self.text):
                return self.text[pos]
            return '\n'.join(self.text)
        return self.text or ''

    def variable_get(self, name: str) -> str:
        value = self.variables.get(name)
        return value if value is not None else name


class Converter:
    """
    Converts parse tree into an Abbreviation tree

    Attributes:
        text: Text to wrap with the abbreviation
        variables: Variable values for `${name}` fields
        href: Auto-fill `href` of a wrapping `<a>` from URL/email text
        max_repeat: Upper bound for total repeated copies
    """

    def __init__(self, text: TextInput = None, variables: Optional[Dict[str, str]] = None,
                 href: bool = False, max_repeat: Optional[int] = None):
        self.text = text
        self.variables = variables
        self.href = href
        self.max_repeat = max_repeat

    def convert(self, group: TokenGroup) -> Abbreviation:
        state = ConvertState(self.text, self.variables, self.max_repeat)
        result = Abbreviation(children=self.group_convert(group, state))

        if self.text is not None and not state.text_inserted and result.children:
            # Text given but nothing consumed it: insert into deepest child
            deepest = deepest_find(result.children[-1])
            text = '\n'.join(self.text) if isinstance(self.text, list) else self.text
            text_insert(deepest, text)
            if deepest.name == 'a' and self.href:
                href_insert(deepest, text)

        LOG(f"Converted abbreviation into {len(result.children)} top-level nodes", level=3)
        return result

    def statement_convert(self, node: Union[TokenElement, TokenGroup],
                          state: ConvertState) -> List[AbbreviationNode]:
        result: List[AbbreviationNode] = []

        if node.repeat is None:
            return self.node_convert(node, state)

        original = node.repeat
        repeat = dataclasses.replace(original)
        if repeat.implicit and isinstance(state.text, list):
            repeat.count = len(state.clean_text)
        else:
            repeat.count = repeat.count or 1

        state.repeaters.append(repeat)
        for i in range(repeat.count):
            repeat.value = i
            node.repeat = repeat
            items = self.node_convert(node, state)

            if repeat.implicit and not state.inserted and items:
                # Implicit repeater without placeholders: insert text into deepest node
                deepest = deepest_find(items[-1])
                text_insert(deepest, state.text_get(repeat.value))

            result.extend(items)

            # At least one copy is produced even past the limit
            state.repeat_guard -= 1
            if state.repeat_guard <= 0:
                LOG("Repeat limit reached, stopping unroll", level=2)
                break

        state.repeaters.pop()
        node.repeat = original
        if repeat.implicit:
            state.inserted = True

        return result

    def node_convert(self, node: Union[TokenElement, TokenGroup],
                     state: ConvertState) -> List[AbbreviationNode]:
        if isinstance(node, TokenGroup):
            return self.group_convert(node, state)
        return self.element_convert(node, state)

    def element_convert(self, node: TokenElement, state: ConvertState) -> List[AbbreviationNode]:
        elem = AbbreviationNode(
            name=name_stringify(node.name, state) if node.name is not None else None,
            value=value_stringify(node.value, state) if node.value is not None else None,
            repeat=dataclasses.replace(node.repeat) if node.repeat is not None else None,
            selfClosing=node.selfClose,
        )

        children: List[AbbreviationNode] = []
        for child in node.elements:
            children.extend(self.statement_convert(child, state))

        if node.attributes is not None:
            elem.attributes = [attribute_convert(attr, state) for attr in node.attributes]

        # Text-only snippet without fields: children become siblings
        if (not elem.name and elem.attributes is None and elem.value is not None
                and not any(isinstance(v, Field) for v in elem.value)):
            return [elem] + children

        elem.children = children
        return [elem]

    def group_convert(self, node: TokenGroup, state: ConvertState) -> List[AbbreviationNode]:
        result: List[AbbreviationNode] = []
        for child in node.elements:
            result.extend(self.statement_convert(child, state))

        if node.repeat is not None:
            repeater_attach(result, node.repeat)
        return result


def attribute_convert(node: TokenAttribute, state: ConvertState) -> AbbreviationAttribute:
    implied = False
    boolean = False
    value_type = 'expression' if node.expression else 'raw'
    value: Optional[List[Value]] = None
    name = name_stringify(node.name, state) if node.name is not None else None

    if name and name[0] == '!':
        implied = True
    if name and name[-1] == '.':
        boolean = True

    if node.value is not None:
        tokens = list(node.value)
        if tokens and isinstance(tokens[0], Quote):
            # Quoted value: strip quotes but remember quote style
            quote = tokens.pop(0)
            if tokens and isinstance(tokens[-1], Quote):
                tokens.pop()
            value_type = 'singleQuote' if quote.single else 'doubleQuote'
        elif tokens and isinstance(tokens[0], Bracket) and tokens[0].context == 'expression' and tokens[0].open:
            value_type = 'expression'
            tokens.pop(0)
            if tokens and isinstance(tokens[-1], Bracket) and tokens[-1].context == 'expression' and not tokens[-1].open:
                tokens.pop()
        value = value_stringify(tokens, state)

    if name and (boolean or implied):
        name = name[1 if implied else 0:len(name) - 1 if boolean else len(name)]

    return AbbreviationAttribute(
        name=name,
        value=value,
        boolean=boolean,
        implied=implied,
        valueType=value_type,
        multiple=node.multiple,
    )


def name_stringify(tokens: Sequence[Token], state: ConvertState) -> str:
    return ''.join(token_stringify(token, state) for token in tokens)


def value_stringify(tokens: Sequence[Token], state: ConvertState) -> List[Value]:
    """Stringify tokens, keeping tabstop fields as separate items"""
    result: List[Value] = []
    text = ''
    for token in tokens:
        if isinstance(token, Field) and token.index is not None:
            if text:
                result.append(text)
                text = ''
            result.append(token)
        else:
            text += token_stringify(token, state)

    if text:
        result.append(text)
    return result


def text_insert(node: AbbreviationNode, text: str) -> None:
    if node.value:
        if isinstance(node.value[-1], str):
            node.value[-1] += text
        else:
            node.value.append(text)
    else:
        node.value = [text]


def href_insert(node: AbbreviationNode, text: str) -> None:
    """Fill empty `href` of `<a>` when wrapped text is an URL or email"""
    href = None
    if re.match(r'^((https?|ftp)://|www\.)', text.strip(), re.I):
        href = text.strip()
        if href.lower().startswith('www.'):
            href = 'http://' + href
    elif re.match(r'^[\w.+-]+@[\w-]+\.[\w.-]+$', text.strip()):
        href = 'mailto:' + text.strip()

    if href is None:
        return

    attributes = node.attributes if node.attributes is not None else []
    for attr in attributes:
        if attr.name == 'href':
            if not attr.value:
                attr.value = [href]
            return
    attributes.append(AbbreviationAttribute(name='href', value=[href]))
    node.attributes = attributes


def repeater_attach(items: List[AbbreviationNode], repeater: Repeater) -> List[AbbreviationNode]:
    for item in items:
        if item.repeat is None:
            item.repeat = dataclasses.replace(repeater)
    return items
