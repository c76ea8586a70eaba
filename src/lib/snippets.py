"""
Markup snippet resolver

Replaces nodes whose name is a snippet key (`ul+`, `a:link`, `!`) with
the parsed snippet abbreviation. Snippets may reference other snippets;
a snippet already being expanded higher up the chain is left as is, so
self-referencing entries such as `input: input[type=text]/` terminate.
"""

import dataclasses
from typing import List, Optional, Union

from .log import LOG
from .scanner import AbbreviationError
from .markup import abbreviation_parse
from ..config.resolve import Config
from ..models.nodes import Abbreviation, AbbreviationNode, deepest_find


class SnippetResolver:
    """
    Resolves snippet references of one abbreviation

    Attributes:
        config: Expansion config holding the snippet table
        stack: Snippet sources currently being expanded
    """

    def __init__(self, config: Config):
        self.config = config
        self.stack: List[str] = []
        self.reversed = bool(config.option('output.reverseAttributes'))

    def resolve(self, abbr: Abbreviation) -> Abbreviation:
        self.children_resolve(abbr)
        return abbr

    def node_resolve(self, child: AbbreviationNode) -> Optional[Abbreviation]:
        snippet = self.config.snippets.get(child.name) if child.name else None
        if not snippet and child.name and child.name.endswith('+'):
            # Not a `name+` snippet: the `+` was a trailing sibling operator
            child.name = child.name[:-1] or None
            snippet = self.config.snippets.get(child.name) if child.name else None
        if not snippet or snippet in self.stack:
            return None

        try:
            snippet_abbr = abbreviation_parse(snippet, variables=self.config.variables,
                                              max_repeat=self.config.max_repeat)
        except AbbreviationError as e:
            LOG(f"Unable to parse \"{snippet}\" snippet: {e.message}", level=1)
            return None

        LOG(f"Snippet '{child.name}' -> '{snippet}'", level=3)
        self.stack.append(snippet)
        self.children_resolve(snippet_abbr)
        self.stack.pop()

        # Attributes of the referencing node go onto every top-level snippet node
        for top in snippet_abbr.children:
            if child.attributes:
                source = top.attributes or []
                extra = [attr.clone() for attr in child.attributes]
                top.attributes = extra + source if self.reversed else source + extra
            nodes_merge(child, top)

        return snippet_abbr

    def children_resolve(self, node: Union[Abbreviation, AbbreviationNode]) -> List[AbbreviationNode]:
        children: List[AbbreviationNode] = []
        for child in node.children:
            resolved = self.node_resolve(child)
            if resolved is not None:
                children.extend(resolved.children)
                deepest = deepest_find(resolved)
                if isinstance(deepest, AbbreviationNode):
                    deepest.children = deepest.children + self.children_resolve(child)
            else:
                children.append(child)
                child.children = self.children_resolve(child)

        node.children = children
        return children


def nodes_merge(source: AbbreviationNode, dest: AbbreviationNode) -> None:
    if source.selfClosing:
        dest.selfClosing = True
    if source.value is not None:
        dest.value = list(source.value)
    if source.repeat is not None:
        dest.repeat = dataclasses.replace(source.repeat)


def snippets_resolve(abbr: Abbreviation, config: Config) -> Abbreviation:
    """Resolve every snippet reference in `abbr` in place"""
    return SnippetResolver(config).resolve(abbr)
