"""
Merge repeated attributes: `a.foo[class=bar]` gets `class="foo bar"`,
other duplicates keep the last value (first with reversed attributes)
"""

from typing import Dict, List, Optional

from ...models.nodes import AbbreviationAttribute, AbbreviationNode, Value


def attributes_merge(node: AbbreviationNode, ancestors, state) -> None:
    if not node.attributes:
        return

    reverse = bool(state.config.option('output.reverseAttributes'))
    attributes: List[AbbreviationAttribute] = []
    lookup: Dict[str, AbbreviationAttribute] = {}

    for attr in node.attributes:
        if not attr.name:
            attributes.append(attr)
            continue

        prev = lookup.get(attr.name)
        if prev is None:
            lookup[attr.name] = attr.clone()
            attributes.append(lookup[attr.name])
        elif attr.name == 'class':
            prev.value = value_merge(prev.value, attr.value, ' ')
        else:
            declarations_merge(prev, attr, reverse)

    node.attributes = attributes


def value_merge(prev: Optional[List[Value]], nxt: Optional[List[Value]], glue: str) -> Optional[List[Value]]:
    if prev and nxt:
        if glue:
            token_append(prev, glue)
        for token in nxt:
            token_append(prev, token)
        return prev

    result = prev or nxt
    return list(result) if result is not None else None


def declarations_merge(dest: AbbreviationAttribute, src: AbbreviationAttribute, reverse: bool) -> None:
    dest.name = src.name
    if not reverse:
        dest.value = list(src.value) if src.value is not None else None
    dest.implied = dest.implied or src.implied
    dest.boolean = dest.boolean or src.boolean
    if dest.valueType != 'expression':
        dest.valueType = src.valueType


def token_append(tokens: List[Value], value: Value) -> None:
    if tokens and isinstance(tokens[-1], str) and isinstance(value, str):
        tokens[-1] += value
    else:
        tokens.append(value)
