"""
Abbreviation expansion entry points

    expand('ul>li.item$*2')
    expand('p10+m5-a', {'type': 'stylesheet'})
    expand('ul>li', {'syntax': 'pug'})

``expand`` resolves the caller configuration, parses the abbreviation,
resolves snippets, applies transforms and formats the result for the
requested syntax. The individual stages are exported for callers that
need the intermediate trees.
"""

import dataclasses
from typing import Any, Dict, List, Optional, Union

from .log import LOG
from .markup import abbreviation_parse
from .snippets import snippets_resolve
from .transforms import transforms_apply
from .stylesheet.parser import parse as stylesheet_parseAbbreviation
from .stylesheet.resolver import stylesheet_resolve, valueScope_is
from .output.html import html
from .output.indent import haml, pug, slim
from .output.css import css
from ..config.resolve import Config, resolve_config
from ..models.nodes import Abbreviation
from ..models.css import CSSProperty

UserConfig = Union[Config, Dict[str, Any], None]

MARKUP_FORMATTERS = {
    'pug': pug,
    'slim': slim,
    'haml': haml,
}


def expand(abbr: str, config: UserConfig = None, globals_: Optional[Dict[str, Any]] = None) -> str:
    """
    Expand abbreviation into markup or stylesheet text

    Args:
        abbr: Abbreviation source
        config: Caller configuration mapping (see ``resolve_config``) or a
            resolved ``Config``
        globals_: Per-type/per-syntax overrides

    Returns:
        Expanded text

    Raises:
        AbbreviationError: If the abbreviation cannot be parsed

    Example:
        >>> expand('a.link')
        '<a href="" class="link"></a>'
    """
    resolved = resolve_config(config, globals_)
    LOG(f"Expanding '{abbr}' as {resolved.type}/{resolved.syntax}", level=2)
    if resolved.stylesheet_is():
        return stringify_stylesheet(parse_stylesheet(abbr, resolved), resolved)
    return stringify_markup(parse_markup(abbr, resolved), resolved)


def parse_markup(abbr: Union[str, Abbreviation], config: UserConfig = None) -> Abbreviation:
    """
    Parse markup abbreviation, resolve snippets and apply transforms

    Args:
        abbr: Abbreviation source or an already parsed tree
        config: Caller configuration or resolved ``Config``

    Returns:
        Transformed abbreviation tree
    """
    config = resolve_config(config)
    if isinstance(abbr, str):
        abbr = abbreviation_parse(
            abbr,
            jsx=bool(config.option('jsx.enabled')),
            href=bool(config.option('markup.href')),
            text=config.text,
            variables=config.variables,
            max_repeat=config.max_repeat,
        )
        # Wrapped text is consumed by the parse; snippets must not see it
        config = dataclasses.replace(config, text=None)

    snippets_resolve(abbr, config)
    transforms_apply(abbr, config)
    return abbr


def stringify_markup(abbr: Abbreviation, config: UserConfig = None) -> str:
    """Format a parsed markup tree for the config's syntax"""
    config = resolve_config(config)
    formatter = MARKUP_FORMATTERS.get(config.syntax, html)
    return formatter(abbr, config)


def parse_stylesheet(abbr: Union[str, List[CSSProperty]], config: UserConfig = None) -> List[CSSProperty]:
    """
    Parse stylesheet abbreviation and resolve it against snippets

    Inside a property value context the abbreviation is parsed as a value.
    """
    config = resolve_config(dict(type='stylesheet') if config is None else config)
    if isinstance(abbr, str):
        abbr = stylesheet_parseAbbreviation(abbr, value_mode=valueScope_is(config))
    return stylesheet_resolve(abbr, config)


def stringify_stylesheet(abbr: List[CSSProperty], config: UserConfig = None) -> str:
    config = resolve_config(dict(type='stylesheet') if config is None else config)
    return css(abbr, config)
