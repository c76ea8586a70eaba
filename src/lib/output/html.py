"""
HTML/XML formatter

Writes an Abbreviation tree as markup. Block elements go on their own
lines; runs of inline elements stay on one line unless there are at least
`output.inlineBreak` of them. Optionally wraps elements with an `id` or
`class` in comments, e.g. `<!-- /#main.page -->`.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from .stream import attrName, attrQuote, booleanAttribute_is, selfClose, tagName
from .walk import (
    CARET,
    WalkState,
    attribute_shouldOutput,
    field_is,
    newline_has,
    snippet_is,
    tokens_push,
    walk,
)
from ..transforms.implicit_tag import inline_is
from ...config.resolve import Config
from ...models.nodes import Abbreviation, AbbreviationAttribute, AbbreviationNode, Value

RE_HTML_TAG = re.compile(r'^<([\w\-:]+)[\s>]')


@dataclass
class TemplatePlaceholder:
    """`[#ID]` inside a comment template: prefix `#`, attribute `ID`"""
    before: str
    name: str
    after: str


Template = List[Union[str, TemplatePlaceholder]]


def template_parse(text: str) -> Template:
    """
    Parse comment template

    Example:
        >>> template_parse('/[#ID]')
        ['/', TemplatePlaceholder(before='#', name='ID', after='')]
    """
    tokens: Template = []
    pos = 0
    offset = 0
    while pos < len(text):
        start = pos
        placeholder, pos = placeholder_consume(text, pos)
        if placeholder is not None:
            if offset != start:
                tokens.append(text[offset:start])
            tokens.append(placeholder)
            offset = pos
        else:
            pos += 1

    if offset != len(text):
        tokens.append(text[offset:])
    return tokens


def placeholder_consume(text: str, pos: int):
    if text[pos] != '[':
        return None, pos

    start = pos = pos + 1
    name_pos = after_pos = start
    stack = 1
    while pos < len(text):
        ch = text[pos]
        if 'A' <= ch <= 'Z':
            name_pos = pos
            while pos < len(text) and template_token_is(text[pos]):
                pos += 1
            after_pos = pos
        else:
            if ch == '[':
                stack += 1
            elif ch == ']':
                stack -= 1
                if not stack:
                    return TemplatePlaceholder(before=text[start:name_pos], name=text[name_pos:after_pos],
                                               after=text[after_pos:pos]), pos + 1
            pos += 1
    return None, start - 1


def template_token_is(ch: str) -> bool:
    return 'A' <= ch <= 'Z' or '0' <= ch <= '9' or ch in ('_', '-')


class CommentState:
    """Comment add-on settings of one formatting pass"""

    def __init__(self, config: Config):
        self.enabled = bool(config.option('comment.enabled'))
        self.trigger: List[str] = config.option('comment.trigger') or []
        before = config.option('comment.before')
        after = config.option('comment.after')
        self.before: Optional[Template] = template_parse(before) if before else None
        self.after: Optional[Template] = template_parse(after) if after else None

    def should_comment(self, node: AbbreviationNode) -> bool:
        if not self.enabled or not self.trigger or not node.name or not node.attributes:
            return False
        return any(attr.name and attr.name in self.trigger for attr in node.attributes)


class HTMLState(WalkState):
    def __init__(self, config: Config):
        super().__init__(config)
        self.comment = CommentState(config)


def html(abbr: Abbreviation, config: Config) -> str:
    """
    Format abbreviation tree as HTML

    Args:
        abbr: Resolved and transformed abbreviation
        config: Expansion config

    Returns:
        Markup text
    """
    state = HTMLState(config)
    walk(abbr, element, state)
    return state.out.value


def element(node: AbbreviationNode, index: int, items: Sequence[AbbreviationNode], state: HTMLState) -> None:
    out = state.out
    config = state.config
    fmt = format_should(node, index, items, state)

    level = indent_get(state)
    out.level += level
    if fmt:
        out.pushNewline(True)

    if node.name:
        name = tagName(node.name, config)
        comment_before(node, state)
        out.pushString(f"<{name}")

        for attr in node.attributes or []:
            if attribute_shouldOutput(attr):
                attribute_push(attr, state)

        if node.selfClosing and not node.children and not node.value:
            out.pushString(f"{selfClose(config)}>")
        else:
            out.pushString('>')
            if not snippet_push(node, state):
                if node.value:
                    inner = any(newline_has(v) for v in node.value) or blockTag_starts(node.value, config)
                    if inner:
                        out.level += 1
                        out.pushNewline(out.level)
                    tokens_push(node.value, state)
                    if inner:
                        out.level -= 1
                        out.pushNewline(out.level)

                state.children_walk(node)

                if not node.value and not node.children:
                    inner = (config.option('output.formatLeafNode')
                             or node.name in config.option('output.formatForce', []))
                    if inner:
                        out.level += 1
                        out.pushNewline(out.level)
                    tokens_push(CARET, state)
                    if inner:
                        out.level -= 1
                        out.pushNewline(out.level)

            out.pushString(f"</{name}>")
            comment_after(node, state)
    elif not snippet_push(node, state) and node.value:
        # Text-only node
        tokens_push(node.value, state)
        state.children_walk(node)

    if fmt and index == len(items) - 1 and state.parent is not None:
        offset = 0 if snippet_is(state.parent) else 1
        out.pushNewline(out.level - offset)

    out.level -= level


def attribute_push(attr: AbbreviationAttribute, state: WalkState) -> None:
    out = state.out
    config = state.config
    if not attr.name:
        return

    name = attrName(attr.name, config)
    l_quote = attrQuote(attr, config, True)
    r_quote = attrQuote(attr, config, False)
    value: Optional[List[Value]] = attr.value

    if value is None:
        if booleanAttribute_is(attr, config):
            # Boolean without value: XML style repeats the name
            if not config.option('output.compactBoolean'):
                value = [name]
        else:
            value = CARET

    out.pushString(' ' + name)
    if value is not None:
        out.pushString('=' + l_quote)
        tokens_push(value, state)
        out.pushString(r_quote)
    elif config.option('output.selfClosingStyle') != 'html':
        out.pushString('=' + l_quote + r_quote)


def snippet_push(node: AbbreviationNode, state: WalkState) -> bool:
    """
    Write a snippet value whose first field receives the children

    Returns:
        True if the node was written
    """
    if not node.value or not node.children:
        return False

    field_ix = next((i for i, v in enumerate(node.value) if field_is(v)), -1)
    if field_ix == -1:
        return False

    tokens_push(node.value[:field_ix], state)
    line = state.out.line
    pos = field_ix + 1
    state.children_walk(node)

    # Children added lines: drop leading whitespace of the remainder
    if state.out.line != line and pos < len(node.value) and isinstance(node.value[pos], str):
        state.out.pushString(node.value[pos].lstrip())
        pos += 1

    tokens_push(node.value[pos:], state)
    return True


def format_should(node: AbbreviationNode, index: int, items: Sequence[AbbreviationNode], state: WalkState) -> bool:
    config = state.config
    parent = state.parent

    if not config.option('output.format'):
        return False
    if index == 0 and parent is None:
        return False
    # First node of a snippet stays inline
    if parent is not None and snippet_is(parent) and len(items) == 1:
        return False

    if snippet_is(node):
        prev_node = items[index - 1] if index > 0 else None
        next_node = items[index + 1] if index + 1 < len(items) else None
        value = node.value or []
        if (snippet_is(prev_node) or snippet_is(next_node)
                or any(newline_has(v) for v in value)
                or (any(field_is(v) for v in value) and node.children)):
            return True

    if inline_is(node, config):
        if index == 0:
            # First in parent: format when followed by a block element
            if any(not inline_is(item, config) for item in items):
                return True
        elif not inline_is(items[index - 1], config):
            return True

        inline_break = config.option('output.inlineBreak')
        if inline_break:
            adjacent = 1
            before = index - 1
            after = index + 1
            while before >= 0 and inlineElement_is(items[before], config):
                adjacent += 1
                before -= 1
            while after < len(items) and inlineElement_is(items[after], config):
                adjacent += 1
                after += 1
            if adjacent >= inline_break:
                return True

        # Inline node holding a child that needs its own line
        for i, child in enumerate(node.children):
            if format_should(child, i, node.children, state):
                return True
        return False

    return True


def inlineElement_is(node: AbbreviationNode, config: Config) -> bool:
    return bool(node.name) and inline_is(node, config)


def indent_get(state: WalkState) -> int:
    parent = state.parent
    if parent is None or snippet_is(parent):
        return 0
    if parent.name and parent.name in state.config.option('output.formatSkip', []):
        return 0
    return 1


def blockTag_starts(value: List[Value], config: Config) -> bool:
    if value and isinstance(value[0], str):
        m = RE_HTML_TAG.match(value[0])
        if m and m.group(1).lower() not in config.option('inlineElements', []):
            return True
    return False


def comment_before(node: AbbreviationNode, state: HTMLState) -> None:
    if state.comment.should_comment(node) and state.comment.before:
        comment_output(node, state.comment.before, state)


def comment_after(node: AbbreviationNode, state: HTMLState) -> None:
    if state.comment.should_comment(node) and state.comment.after:
        comment_output(node, state.comment.after, state)


def comment_output(node: AbbreviationNode, template: Template, state: HTMLState) -> None:
    out = state.out
    attrs: Dict[str, List[Value]] = {}
    for attr in node.attributes or []:
        if attr.name and attr.value:
            attrs[attr.name.upper()] = attr.value

    for token in template:
        if isinstance(token, str):
            out.pushString(token)
        elif attrs.get(token.name):
            out.pushString(token.before)
            tokens_push(attrs[token.name], state)
            out.pushString(token.after)
