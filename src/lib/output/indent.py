"""
Indentation based markup formatters: Pug, Haml and Slim

All three share one walk; they differ in how the element name, attribute
list, text lines and self-closing marker are decorated.

    ul#nav>li.item*2  ->  pug:  ul#nav
                                  li.item
                                  li.item
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .stream import attrName, attrQuote, booleanAttribute_is, lines_split
from .walk import CARET, WalkState, attribute_shouldOutput, snippet_is, tokens_push, walk
from ...config.resolve import Config
from ...models.nodes import Abbreviation, AbbreviationAttribute, AbbreviationNode, Value

RE_SPACES = re.compile(r'\s+')


@dataclass
class IndentOptions:
    """Decoration of one indentation based syntax"""
    beforeName: str = ''
    beforeAttribute: str = ''
    afterAttribute: str = ''
    glueAttribute: str = ''
    beforeTextLine: str = ''
    afterTextLine: str = ''
    booleanValue: str = ''
    selfClose: str = ''


class IndentState(WalkState):
    def __init__(self, config: Config, options: IndentOptions):
        super().__init__(config)
        self.options = options


def indent_format(abbr: Abbreviation, config: Config, options: IndentOptions) -> str:
    state = IndentState(config, options)
    walk(abbr, element, state)
    return state.out.value


def pug(abbr: Abbreviation, config: Config) -> str:
    return indent_format(abbr, config, IndentOptions(
        beforeAttribute='(',
        afterAttribute=')',
        glueAttribute=', ',
        beforeTextLine='| ',
        selfClose='/' if config.option('output.selfClosingStyle') == 'xml' else '',
    ))


def haml(abbr: Abbreviation, config: Config) -> str:
    return indent_format(abbr, config, IndentOptions(
        beforeName='%',
        beforeAttribute='(',
        afterAttribute=')',
        glueAttribute=' ',
        afterTextLine=' |',
        booleanValue='true',
        selfClose='/',
    ))


def slim(abbr: Abbreviation, config: Config) -> str:
    return indent_format(abbr, config, IndentOptions(
        beforeAttribute=' ',
        glueAttribute=' ',
        beforeTextLine='| ',
        selfClose='/',
    ))


def element(node: AbbreviationNode, index: int, items: Sequence[AbbreviationNode], state: IndentState) -> None:
    out = state.out
    options = state.options
    primary, secondary = attributes_collect(node)

    level = 1 if state.parent is not None else 0
    out.level += level

    # First top-level element and snippets stay on the current line
    if not (state.parent is None and index == 0) and not snippet_is(node):
        out.pushNewline(True)

    if node.name and (node.name != 'div' or not primary):
        out.pushString(options.beforeName + node.name)

    primaryAttributes_push(primary, state)
    secondaryAttributes_push([attr for attr in secondary if attribute_shouldOutput(attr)], state)

    if node.selfClosing and not node.value and not node.children:
        if options.selfClose:
            out.pushString(options.selfClose)
    else:
        value_push(node, state)
        state.children_walk(node)

    out.level -= level


def attributes_collect(node: AbbreviationNode) -> Tuple[List[AbbreviationAttribute], List[AbbreviationAttribute]]:
    """Split attributes into shorthand ones (`class`, `id`) and the rest"""
    primary: List[AbbreviationAttribute] = []
    secondary: List[AbbreviationAttribute] = []
    for attr in node.attributes or []:
        if attr.name in ('class', 'id'):
            primary.append(attr)
        else:
            secondary.append(attr)
    return primary, secondary


def primaryAttributes_push(attrs: List[AbbreviationAttribute], state: IndentState) -> None:
    for attr in attrs:
        if not attr.value:
            continue
        if attr.name == 'class':
            state.out.pushString('.')
            # Class list separators become dots
            tokens = [RE_SPACES.sub('.', t) if isinstance(t, str) else t for t in attr.value]
            tokens_push(tokens, state)
        else:
            state.out.pushString('#')
            tokens_push(attr.value, state)


def secondaryAttributes_push(attrs: List[AbbreviationAttribute], state: IndentState) -> None:
    if not attrs:
        return

    out = state.out
    config = state.config
    options = state.options

    if options.beforeAttribute:
        out.pushString(options.beforeAttribute)

    for i, attr in enumerate(attrs):
        out.pushString(attrName(attr.name or '', config))
        if booleanAttribute_is(attr, config) and attr.value is None:
            if not config.option('output.compactBoolean') and options.booleanValue:
                out.pushString('=' + options.booleanValue)
        else:
            out.pushString('=' + attrQuote(attr, config, True))
            tokens_push(CARET if attr.value is None else attr.value, state)
            out.pushString(attrQuote(attr, config, False))

        if i != len(attrs) - 1 and options.glueAttribute:
            out.pushString(options.glueAttribute)

    if options.afterAttribute:
        out.pushString(options.afterAttribute)


def value_push(node: AbbreviationNode, state: IndentState) -> None:
    """Write node text, or the caret for an empty leaf"""
    if not node.value and node.children:
        return

    out = state.out
    options = state.options
    value = node.value or CARET
    lines = value_splitLines(value)

    if len(lines) == 1:
        if node.value and (node.name or node.attributes):
            out.push(' ')
        tokens_push(value, state)
        return

    # Multi-line text: one text line each, padded to the longest
    lengths = [value_length(line) for line in lines]
    max_length = max(lengths)

    out.level += 1
    for line, length in zip(lines, lengths):
        out.pushNewline(True)
        if options.beforeTextLine:
            out.push(options.beforeTextLine)
        tokens_push(line, state)
        if options.afterTextLine:
            out.push(' ' * (max_length - length))
            out.push(options.afterTextLine)
    out.level -= 1


def value_splitLines(tokens: List[Value]) -> List[List[Value]]:
    result: List[List[Value]] = []
    line: List[Value] = []
    for token in tokens:
        if isinstance(token, str):
            parts = lines_split(token)
            line.append(parts.pop(0))
            while parts:
                result.append(line)
                line = [parts.pop(0)]
        else:
            line.append(token)

    if line:
        result.append(line)
    return result


def value_length(tokens: List[Value]) -> int:
    return sum(len(t) if isinstance(t, str) else len(t.name) for t in tokens)
