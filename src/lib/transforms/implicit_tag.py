"""
Implicit tag names: `.item` becomes `div.item`, `ul>.item` becomes `li.item`
"""

from typing import List, Optional, Union

from ...config.resolve import Config
from ...models.nodes import Abbreviation, AbbreviationNode

ELEMENT_MAP = {
    'p': 'span',
    'ul': 'li',
    'ol': 'li',
    'table': 'tr',
    'tr': 'td',
    'tbody': 'tr',
    'thead': 'tr',
    'tfoot': 'tr',
    'colgroup': 'col',
    'select': 'option',
    'optgroup': 'option',
    'audio': 'source',
    'video': 'source',
    'object': 'param',
    'map': 'area',
}

Ancestors = List[Union[Abbreviation, AbbreviationNode]]


def implicitTag(node: AbbreviationNode, ancestors: Ancestors, state) -> None:
    if not node.name and node.attributes:
        implicitTag_resolve(node, ancestors, state.config)


def implicitTag_resolve(node: AbbreviationNode, ancestors: Ancestors, config: Config) -> None:
    parent = parentElement_get(ancestors)
    if parent is not None:
        parent_name = (parent.name or '').lower()
        inline = inline_is(parent, config)
    else:
        parent_name = config.context.name.lower() if config.context is not None else ''
        inline = bool(parent_name) and name_inline(parent_name, config)
    node.name = ELEMENT_MAP.get(parent_name) or ('span' if inline else 'div')


def parentElement_get(ancestors: Ancestors) -> Optional[AbbreviationNode]:
    for elem in reversed(ancestors):
        if isinstance(elem, AbbreviationNode):
            return elem
    return None


def name_inline(name: str, config: Config) -> bool:
    return name.lower() in config.option('inlineElements', [])


def inline_is(node: AbbreviationNode, config: Config) -> bool:
    """Element is inline by name, or is a text-only node"""
    if node.name:
        return name_inline(node.name, config)
    return bool(node.value) and not node.attributes
