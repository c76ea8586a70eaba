"""
Markup tree models

Two trees are involved in markup expansion:

1. TokenGroup / TokenElement - the parse tree built by lib.markup.parser.
   Names and values are still token lists; repeaters are not unrolled.
2. Abbreviation / AbbreviationNode - the unrolled tree built by
   lib.markup.convert and consumed by snippet resolution, transforms
   and output formatters.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .tokens import Field, Repeater, Token

Value = Union[str, Field]


@dataclass
class TokenAttribute:
    name: Optional[List[Token]] = None
    value: Optional[List[Token]] = None
    expression: bool = False
    multiple: bool = False


@dataclass
class TokenElement:
    name: Optional[List[Token]] = None
    attributes: Optional[List[TokenAttribute]] = None
    value: Optional[List[Token]] = None
    repeat: Optional[Repeater] = None
    selfClose: bool = False
    elements: List[Union['TokenElement', 'TokenGroup']] = field(default_factory=list)

    def empty_is(self) -> bool:
        return self.name is None and self.value is None and self.attributes is None


@dataclass
class TokenGroup:
    elements: List[Union[TokenElement, 'TokenGroup']] = field(default_factory=list)
    repeat: Optional[Repeater] = None


@dataclass
class AbbreviationAttribute:
    """
    Attribute of an unrolled node

    Attributes:
        name: Attribute name, None for a default (unnamed) attribute
        value: Value tokens (strings and fields)
        boolean: Written as `attr.` - boolean attribute
        implied: Written as `!attr` - output only when it gets a value
        valueType: raw, singleQuote, doubleQuote or expression
    """
    name: Optional[str] = None
    value: Optional[List[Value]] = None
    boolean: bool = False
    implied: bool = False
    valueType: str = 'raw'
    multiple: bool = False

    def clone(self) -> 'AbbreviationAttribute':
        return AbbreviationAttribute(
            name=self.name,
            value=list(self.value) if self.value is not None else None,
            boolean=self.boolean,
            implied=self.implied,
            valueType=self.valueType,
            multiple=self.multiple,
        )


@dataclass
class AbbreviationNode:
    """
    Node of an unrolled abbreviation

    A node without name and attributes is a snippet (text or wrapper) node.
    """
    name: Optional[str] = None
    value: Optional[List[Value]] = None
    attributes: Optional[List[AbbreviationAttribute]] = None
    children: List['AbbreviationNode'] = field(default_factory=list)
    repeat: Optional[Repeater] = None
    selfClosing: bool = False

    def snippet_is(self) -> bool:
        return not self.name and not self.attributes

    def clone(self) -> 'AbbreviationNode':
        """Deep copy, so a sub-tree can be spliced in several places"""
        return copy.deepcopy(self)


@dataclass
class Abbreviation:
    """Root container of an unrolled abbreviation"""
    children: List[AbbreviationNode] = field(default_factory=list)


def deepest_find(node: Union[Abbreviation, AbbreviationNode]) -> Union[Abbreviation, AbbreviationNode]:
    """Last descendant reached by following last children"""
    while node.children:
        node = node.children[-1]
    return node


def field_is(value: object) -> bool:
    return isinstance(value, Field)
