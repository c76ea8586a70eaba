"""
Transform pass over a resolved markup abbreviation

Walks the tree in pre-order and applies, per node: implicit tag names,
attribute merging, lorem text, then the syntax specific XSL, JSX and BEM
rewrites when enabled.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Union

from ..log import LOG
from .implicit_tag import implicitTag
from .merge_attributes import attributes_merge
from .lorem import lorem
from .xsl import xsl
from .jsx import jsx
from .bem import bem
from ...config.resolve import Config
from ...models.nodes import Abbreviation, AbbreviationNode


@dataclass
class TransformState:
    """
    State shared by the transforms of one expansion

    Attributes:
        config: Expansion config
        rng: Random source for lorem text
        bem: Parsed BEM class data keyed by node identity
    """
    config: Config
    rng: random.Random = field(default_factory=random.Random)
    bem: Dict[int, Any] = field(default_factory=dict)

    @classmethod
    def state_create(cls, config: Config) -> "TransformState":
        return cls(config=config, rng=random.Random(config.option('lorem.seed')))


Transform = Callable[[AbbreviationNode, List[Union[Abbreviation, AbbreviationNode]], TransformState], None]


def transforms_select(config: Config) -> List[Transform]:
    """Transforms to run for this config, in application order"""
    result: List[Transform] = [implicitTag, attributes_merge, lorem]
    if config.syntax == 'xsl':
        result.append(xsl)
    if config.option('jsx.enabled'):
        result.append(jsx)
    if config.option('bem.enabled'):
        result.append(bem)
    return result


def transforms_apply(abbr: Abbreviation, config: Config) -> Abbreviation:
    """
    Apply transforms to every node of `abbr` in place

    Each transform sees the node's ancestors, root first.
    """
    state = TransformState.state_create(config)
    transforms = transforms_select(config)
    ancestors: List[Union[Abbreviation, AbbreviationNode]] = [abbr]
    LOG(f"Applying {len(transforms)} transforms", level=3)

    def node_visit(node: AbbreviationNode) -> None:
        for transform in transforms:
            transform(node, ancestors, state)
        ancestors.append(node)
        for child in node.children:
            node_visit(child)
        ancestors.pop()

    for child in abbr.children:
        node_visit(child)
    return abbr
