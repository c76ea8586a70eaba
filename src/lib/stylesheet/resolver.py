"""
Stylesheet snippet resolver

Matches parsed properties against the snippet table: expands property
abbreviations (`bgc` -> `background-color`), resolves value keywords
(`d:n` -> `display: none`), raw snippets (`@m` -> `@media ...`),
gradients (`lg(...)`) and missing numeric units.
"""

import copy
import re
from typing import Dict, List, Optional

from ..log import LOG
from ..scanner import AbbreviationError
from .parser import parse
from .score import bestMatch_find
from .colors import color
from ...config.resolve import Config
from ...models.css import (
    CSSColor,
    CSSField,
    CSSLiteral,
    CSSNumber,
    CSSProperty,
    CSSSnippet,
    CSSSnippetProperty,
    CSSSnippetRaw,
    CSSString,
    CSSValue,
    CSSValueToken,
    FunctionCall,
)

RE_PROPERTY = re.compile(r'^([a-z-]+)(?:\s*:\s*([^\n\r;]+?);*)?$')
RE_FIELD = re.compile(r'\$\{(\d+)(:[^}]+)?\}')

SCOPE_SECTION = '@@section'
SCOPE_PROPERTY = '@@property'
SCOPE_VALUE = '@@value'


def snippet_create(key: str, value: str) -> CSSSnippet:
    """
    Compile one snippet table entry

    `property:value1|value2` entries become property snippets whose
    alternative values are parsed up front; anything else is raw text.
    """
    m = RE_PROPERTY.match(value)
    if not m:
        return CSSSnippetRaw(key=key, value=value)

    keywords: Dict[str, CSSValueToken] = {}
    parsed: List[List[CSSValue]] = []
    if m.group(2):
        for option in m.group(2).split('|'):
            props = parse(option.strip(), value_mode=True)
            values = props[0].value if props else []
            parsed.append(values)
            for css_value in values:
                keywords_collect(css_value, keywords)

    return CSSSnippetProperty(key=key, property=m.group(1), value=parsed, keywords=keywords)


def keywords_collect(css_value: CSSValue, keywords: Dict[str, CSSValueToken]) -> None:
    for token in css_value.value:
        if isinstance(token, CSSLiteral):
            keywords[token.value] = token
        elif isinstance(token, FunctionCall):
            keywords[token.name] = token
        elif isinstance(token, CSSField):
            name = token.name.strip()
            if name:
                keywords[name] = CSSLiteral(value=name)


def snippets_nest(snippets: List[CSSSnippet]) -> List[CSSSnippet]:
    """
    Sort snippets by key and link longhand properties to their shorthand,
    e.g. `background-position-x` under `background-position` under
    `background`.
    """
    snippets = sorted(snippets, key=lambda s: s.key)
    stack: List[CSSSnippetProperty] = []

    for cur in snippets:
        if not isinstance(cur, CSSSnippetProperty):
            continue
        while stack:
            prev = stack[-1]
            if cur.property.startswith(prev.property) and cur.property[len(prev.property):len(prev.property) + 1] == '-':
                prev.dependencies.append(cur)
                stack.append(cur)
                break
            stack.pop()
        if not stack:
            stack.append(cur)

    return snippets


def snippets_convert(table: Dict[str, str]) -> List[CSSSnippet]:
    """Compile a key -> template table, skipping templates that fail to parse"""
    snippets: List[CSSSnippet] = []
    for key, value in table.items():
        try:
            snippets.append(snippet_create(key, value))
        except AbbreviationError as e:
            LOG(f"Skipping stylesheet snippet '{key}': {e.message}", level=2)
    return snippets_nest(snippets)


def snippets_get(config: Config) -> List[CSSSnippet]:
    if config.cache is not None:
        return config.cache.stylesheet_get(config.snippets, snippets_convert)
    return snippets_convert(config.snippets)


def valueScope_is(config: Config) -> bool:
    if config.context is not None:
        return config.context.name == SCOPE_VALUE or not config.context.name.startswith('@@')
    return False


def stylesheet_resolve(abbr: List[CSSProperty], config: Config) -> List[CSSProperty]:
    """
    Resolve parsed properties against the configured snippets

    Args:
        abbr: Properties from ``parse``
        config: Resolved stylesheet configuration

    Returns:
        The same properties, resolved in place
    """
    snippets = snippets_get(config)
    if config.context is not None:
        if config.context.name == SCOPE_SECTION:
            snippets = [s for s in snippets if isinstance(s, CSSSnippetRaw)]
        elif config.context.name == SCOPE_PROPERTY:
            snippets = [s for s in snippets if isinstance(s, CSSSnippetProperty)]

    return [node_resolve(node, snippets, config) for node in abbr]


def node_resolve(node: CSSProperty, snippets: List[CSSSnippet], config: Config) -> CSSProperty:
    if not gradient_resolve(node, config):
        min_score = config.option('stylesheet.fuzzySearchMinScore', 0)
        if valueScope_is(config):
            prop_name = config.context.name
            snippet = next((s for s in snippets
                            if isinstance(s, CSSSnippetProperty) and s.property == prop_name), None)
            valueKeywords_resolve(node, config, snippet, min_score)
            node.snippet = snippet
        elif node.name:
            snippet = bestMatch_find(node.name, snippets, min_score, True, key=lambda s: s.key)
            node.snippet = snippet
            if isinstance(snippet, CSSSnippetProperty):
                LOG(f"'{node.name}' matched property snippet '{snippet.key}'", level=3)
                property_resolve(node, snippet, config)
            elif isinstance(snippet, CSSSnippetRaw):
                LOG(f"'{node.name}' matched raw snippet '{snippet.key}'", level=3)
                snippet_resolve(node, snippet)
            else:
                LOG(f"No snippet for '{node.name}'", level=3)

    if node.name or config.context is not None:
        numericValue_resolve(node, config)
    return node


def gradient_resolve(node: CSSProperty, config: Config) -> bool:
    """Expand `lg` / `lg(...)` into `linear-gradient(...)`"""
    gradient: Optional[FunctionCall] = None
    if len(node.value) == 1 and len(node.value[0].value) == 1:
        token = node.value[0].value[0]
        if isinstance(token, FunctionCall) and token.name == 'lg':
            gradient = token

    if gradient is None and node.name != 'lg':
        return False

    if gradient is None:
        gradient = FunctionCall(name='linear-gradient', arguments=[CSSValue(value=[CSSField(index=0, name='')])])
    else:
        gradient = FunctionCall(name='linear-gradient', arguments=gradient.arguments)

    if config.context is None:
        node.name = 'background-image'
    node.value = [CSSValue(value=[gradient])]
    return True


def unmatchedPart_get(abbr: str, key: str) -> str:
    """Tail of `abbr` that does not appear, in order, in `key`"""
    last_pos = 0
    for i, ch in enumerate(abbr):
        last_pos = key.find(ch, last_pos)
        if last_pos == -1:
            return abbr[i:]
        last_pos += 1
    return ''


def property_resolve(node: CSSProperty, snippet: CSSSnippetProperty, config: Config) -> CSSProperty:
    abbr = node.name or ''
    inline_value = unmatchedPart_get(abbr, snippet.key)

    if inline_value:
        if node.value:
            # Explicit value given: the unmatched part means the wrong snippet matched
            return node
        keyword = keyword_resolve(inline_value, config, snippet)
        if keyword is None:
            return node
        node.value.append(CSSValue(value=[keyword]))

    node.name = snippet.property

    if node.value:
        valueKeywords_resolve(node, config, snippet)
    elif snippet.value:
        default = copy.deepcopy(snippet.value[0])
        if len(snippet.value) == 1 or any(field_has(v) for v in default):
            node.value = default
        else:
            node.value = [field_wrap(v, config) for v in default]

    return node


def snippet_resolve(node: CSSProperty, snippet: CSSSnippetRaw) -> CSSProperty:
    """Expand raw snippet, filling its fields from the given value"""
    offset = 0
    input_value = node.value[0].value if node.value else []
    output: List[CSSValueToken] = []

    for m in RE_FIELD.finditer(snippet.value):
        if offset != m.start():
            output.append(CSSLiteral(value=snippet.value[offset:m.start()]))
        offset = m.end()
        if input_value:
            output.append(input_value.pop(0))
        else:
            output.append(CSSField(index=int(m.group(1)), name=m.group(2)[1:] if m.group(2) else ''))

    tail = snippet.value[offset:]
    if tail:
        output.append(CSSLiteral(value=tail))

    node.name = None
    node.value = [CSSValue(value=output)]
    return node


def valueKeywords_resolve(node: CSSProperty, config: Config,
                          snippet: Optional[CSSSnippetProperty] = None, min_score: float = 0) -> None:
    for css_value in node.value:
        value: List[CSSValueToken] = []
        for token in css_value.value:
            if isinstance(token, CSSLiteral):
                value.append(keyword_resolve(token.value, config, snippet, min_score) or token)
            elif isinstance(token, FunctionCall):
                match = keyword_resolve(token.name, config, snippet, min_score)
                if isinstance(match, FunctionCall):
                    value.append(FunctionCall(name=match.name,
                                              arguments=token.arguments + match.arguments[len(token.arguments):]))
                else:
                    value.append(token)
            else:
                value.append(token)
        css_value.value = value


def keyword_resolve(keyword: str, config: Config, snippet: Optional[CSSSnippetProperty] = None,
                    min_score: float = 0) -> Optional[CSSValueToken]:
    """
    Resolve abbreviated keyword: the snippet's own keywords first, then its
    longhand dependencies', then the global keyword list.
    """
    if snippet is not None:
        ref = bestMatch_find(keyword, snippet.keywords.keys(), min_score)
        if ref is not None:
            return copy.deepcopy(snippet.keywords[ref])
        for dep in snippet.dependencies:
            ref = bestMatch_find(keyword, dep.keywords.keys(), min_score)
            if ref is not None:
                return copy.deepcopy(dep.keywords[ref])

    alias = config.option('stylesheet.keywordAliases', {}).get(keyword)
    if alias:
        return CSSLiteral(value=alias)

    ref = bestMatch_find(keyword, config.option('stylesheet.keywords', []), min_score)
    if ref is not None:
        return CSSLiteral(value=ref)
    return None


def numericValue_resolve(node: CSSProperty, config: Config) -> None:
    aliases = config.option('stylesheet.unitAliases', {})
    unitless = config.option('stylesheet.unitless', [])

    for css_value in node.value:
        for token in css_value.value:
            if not isinstance(token, CSSNumber):
                continue
            if token.unit:
                token.unit = aliases.get(token.unit, token.unit)
            elif token.value != 0 and node.name not in unitless:
                token.unit = (config.option('stylesheet.floatUnit') if '.' in token.rawValue
                              else config.option('stylesheet.intUnit'))


def field_has(value: CSSValue) -> bool:
    return any(isinstance(token, CSSField) for token in value.value)


def field_wrap(value: CSSValue, config: Config, state: Optional[Dict[str, int]] = None) -> CSSValue:
    """Turn each token of a default value into a numbered field"""
    state = state if state is not None else {'index': 1}
    result: List[CSSValueToken] = []

    for token in value.value:
        text: Optional[str] = None
        if isinstance(token, CSSColor):
            text = color(token, config.option('stylesheet.shortHex'))
        elif isinstance(token, CSSLiteral):
            text = token.value
        elif isinstance(token, CSSNumber):
            text = f"{token.rawValue}{token.unit}"
        elif isinstance(token, CSSString):
            q = "'" if token.quote == 'single' else '"'
            text = q + token.value + q

        if text is None:
            result.append(token)
        else:
            result.append(CSSField(index=state['index'], name=text))
            state['index'] += 1

    return CSSValue(value=result)
