"""
BEM class name expansion

With `bem.enabled`, short element and modifier classes are expanded
against the nearest block class up the tree:

    .b>.-e_m     ->  <div class="b"><div class="b__e b__e_m"></div></div>
    .b_m         ->  <div class="b b_m"></div>

The number of leading dashes of an element picks how many levels up the
block is looked for. Parsed class data is cached per node in the walk
state.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...config.resolve import AbbreviationContext
from ...models.nodes import AbbreviationNode

RE_ELEMENT = re.compile(r'^(-+)([a-z0-9]+[a-z0-9-]*)', re.I)
RE_MODIFIER = re.compile(r'^(_+)([a-z0-9]+[a-z0-9-_]*)', re.I)
RE_BLOCK_DASHED = re.compile(r'^[a-z]-', re.I)
RE_BLOCK = re.compile(r'^[a-z]', re.I)


@dataclass
class BEMData:
    classNames: List[str] = field(default_factory=list)
    block: Optional[str] = None


def bem(node: AbbreviationNode, ancestors, state) -> None:
    classNames_expand(node, state)
    shortNotation_expand(node, ancestors, state)


def classNames_expand(node: AbbreviationNode, state) -> None:
    """Split `block_mod` into `block` and `_mod`"""
    data = data_get(node, state)
    class_names: List[str] = []
    for cl in data.classNames:
        ix = cl.find('_')
        if ix > 0 and not cl.startswith('-'):
            class_names.append(cl[:ix])
            class_names.append(cl[ix:])
        else:
            class_names.append(cl)

    if class_names:
        data.classNames = unique(class_names)
        data.block = blockName_find(data.classNames)
        class_update(node, ' '.join(data.classNames))


def shortNotation_expand(node: AbbreviationNode, ancestors, state) -> None:
    data = data_get(node, state)
    options = state.config.options
    class_names: List[str] = []
    path = list(ancestors[1:]) + [node]

    for cl in data.classNames:
        prefix = ''
        original = cl

        m = RE_ELEMENT.match(cl)
        if m:
            prefix = blockName_get(path, len(m.group(1)), state) + options['bem.element'] + m.group(2)
            class_names.append(prefix)
            cl = cl[len(m.group(0)):]

        m = RE_MODIFIER.match(cl)
        if m:
            if not prefix:
                prefix = data.block or ''
                class_names.append(prefix)
            class_names.append(f"{prefix}{options['bem.modifier']}{m.group(2)}")
            cl = cl[len(m.group(0)):]

        if cl == original:
            class_names.append(original)

    class_update(node, ' '.join(unique(class_names)))


def data_get(node: AbbreviationNode, state) -> BEMData:
    key = id(node)
    if key not in state.bem:
        class_value = ''
        for attr in node.attributes or []:
            if attr.name == 'class' and attr.value:
                class_value = ''.join(t if isinstance(t, str) else t.name for t in attr.value)
                break
        state.bem[key] = bem_parse(class_value)
    return state.bem[key]


def contextData_get(context: AbbreviationContext, state) -> BEMData:
    key = id(context)
    if key not in state.bem:
        state.bem[key] = bem_parse(context.attributes.get('class', ''))
    return state.bem[key]


def bem_parse(class_value: str) -> BEMData:
    class_names = class_value.split() if class_value else []
    return BEMData(classNames=class_names, block=blockName_find(class_names))


def blockName_get(path: List[AbbreviationNode], depth: int, state) -> str:
    """Nearest block class, starting `depth` levels up from the end of `path`"""
    ix = max(len(path) - depth, 0)
    while ix >= 0:
        if ix < len(path):
            data = data_get(path[ix], state)
            if data.block:
                return data.block
        ix -= 1

    context = state.config.context
    if context is not None:
        data = contextData_get(context, state)
        if data.block:
            return data.block
    return ''


def blockName_find(class_names: List[str]) -> Optional[str]:
    return candidate_find(class_names, RE_BLOCK_DASHED) or candidate_find(class_names, RE_BLOCK)


def candidate_find(class_names: List[str], pattern) -> Optional[str]:
    for cl in class_names:
        if RE_ELEMENT.match(cl) or RE_MODIFIER.match(cl):
            break
        if pattern.match(cl):
            return cl
    return None


def class_update(node: AbbreviationNode, value: str) -> None:
    for attr in node.attributes or []:
        if attr.name == 'class':
            attr.value = [value]
            break


def unique(items: List[str]) -> List[str]:
    return [item for item in dict.fromkeys(items) if item]
