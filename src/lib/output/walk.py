"""
Tree walk shared by the markup formatters

The walk keeps the node being formatted, its parent and ancestors, and a
running field counter so tabstops stay unique across repeated snippets.
"""

from typing import Callable, List, Optional, Sequence

from .stream import OutputStream
from ...config.resolve import Config
from ...models.nodes import Abbreviation, AbbreviationNode, Value
from ...models.tokens import Field

CARET: List[Value] = [Field(index=0, name='')]


class WalkState:
    """
    Formatter walk state

    Attributes:
        config: Expansion config
        out: Output stream being written
        current: Node being formatted
        parent: Parent of the current node, None at top level
        ancestors: Nodes from the top level down to the parent
        field: Offset added to field indexes of the next token run
    """

    def __init__(self, config: Config):
        self.config = config
        self.out = OutputStream(config.options)
        self.current: Optional[AbbreviationNode] = None
        self.parent: Optional[AbbreviationNode] = None
        self.ancestors: List[Optional[AbbreviationNode]] = []
        self.field = 1
        self.visitor: Optional[Callable[..., None]] = None

    def next(self, node: AbbreviationNode, index: int, items: Sequence[AbbreviationNode]) -> None:
        """Format `node`, the `index`-th of its siblings `items`"""
        parent, current = self.parent, self.current
        self.parent = current
        self.ancestors.append(current)
        self.current = node
        self.visitor(node, index, items, self)
        self.current = current
        self.parent = parent
        self.ancestors.pop()

    def children_walk(self, node: AbbreviationNode) -> None:
        for i, child in enumerate(node.children):
            self.next(child, i, node.children)


def walk(abbr: Abbreviation, visitor: Callable[..., None], state: WalkState) -> None:
    state.visitor = visitor
    for i, child in enumerate(abbr.children):
        state.next(child, i, abbr.children)


def tokens_push(tokens: Sequence[Value], state: WalkState) -> None:
    """Write strings and fields; fields are renumbered past the running counter"""
    out = state.out
    largest = -1
    for token in tokens:
        if isinstance(token, str):
            out.pushString(token)
        else:
            index = token.index or 0
            out.pushField(state.field + index, token.name)
            if index > largest:
                largest = index

    if largest != -1:
        state.field += largest + 1


def snippet_is(node: Optional[AbbreviationNode]) -> bool:
    return node is not None and not node.name and not node.attributes


def field_is(value: Value) -> bool:
    return isinstance(value, Field)


def newline_has(value: Value) -> bool:
    return isinstance(value, str) and ('\n' in value or '\r' in value)


def attribute_shouldOutput(attr) -> bool:
    """Implied attributes are written only once they get a value"""
    return not attr.implied or attr.valueType != 'raw' or bool(attr.value)
