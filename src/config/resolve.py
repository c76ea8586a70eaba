"""
Per-expansion configuration.

``resolve_config`` layers the option, variable and snippet tables in a fixed
order (defaults, abbreviation type, syntax, global type overrides, global
syntax overrides, caller overrides) and freezes the result in a ``Config``.
Snippet tables shipped with the package live in ``abbrex/data`` as YAML.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import yaml

from .settings import appsettings
from .options import (
    DEFAULT_SYNTAXES,
    DEFAULT_VARIABLES,
    STYLESHEET_SYNTAXES,
    SYNTAX_OVERLAYS,
    options_default,
)

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"


class DataError(Exception):
    """Raised when a bundled data table is missing or malformed"""
    pass


@lru_cache(maxsize=None)
def data_load(filename: str) -> Dict[str, Any]:
    """
    Load and parse a YAML table from the package data directory.

    Args:
        filename: File name under ``abbrex/data``

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        DataError: If the file is missing or is not a YAML mapping
    """
    path: Path = DATA_DIR / filename
    if not path.exists():
        raise DataError(f"Data table '{filename}' not found. Expected file: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            table: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataError(f"Failed to parse {filename}: {e}")
    if table is None:
        table = {}
    if not isinstance(table, dict):
        raise DataError(f"{filename} must hold a mapping, got {type(table).__name__}")
    return table


def snippets_split(snippets: Optional[Dict[str, str]]) -> Dict[str, str]:
    """
    Expand ``|``-delimited alias keys into one entry per alias.

    Example:
        >>> snippets_split({'op|opa': 'opacity'})
        {'op': 'opacity', 'opa': 'opacity'}
    """
    result: Dict[str, str] = {}
    for key, value in (snippets or {}).items():
        for name in str(key).split('|'):
            result[name] = value
    return result


@dataclass(frozen=True)
class AbbreviationContext:
    """Syntactic position of an abbreviation: parent tag or CSS property/section."""
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)


class SnippetCache:
    """
    Memo for compiled stylesheet snippets.

    The compiled form depends only on the snippet table, so the cache keeps
    the table it was built from and rebuilds when a different one arrives.
    One cache may be shared by every ``Config`` of an editor session.
    """

    def __init__(self) -> None:
        self._signature: Optional[Tuple[Tuple[str, str], ...]] = None
        self._compiled: Optional[List[Any]] = None

    def stylesheet_get(self, snippets: Dict[str, str], build: Callable[[Dict[str, str]], List[Any]]) -> List[Any]:
        """
        Compiled snippets for ``snippets``, built with ``build`` on a miss.

        Args:
            snippets: Flat key -> template table
            build: Compiler turning the table into snippet objects

        Returns:
            The compiled snippet list
        """
        signature: Tuple[Tuple[str, str], ...] = tuple(sorted(snippets.items()))
        if self._compiled is None or signature != self._signature:
            self._compiled = build(snippets)
            self._signature = signature
        return self._compiled

    def clear(self) -> None:
        self._signature = None
        self._compiled = None


TextInput = Union[str, List[str], None]


@dataclass(frozen=True)
class Config:
    """Fully resolved configuration of a single expansion."""
    type: str = "markup"
    syntax: str = "html"
    variables: Dict[str, str] = field(default_factory=dict)
    snippets: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)
    context: Optional[AbbreviationContext] = None
    text: TextInput = None
    max_repeat: Optional[int] = None
    cache: Optional[SnippetCache] = None

    def option(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)

    def stylesheet_is(self) -> bool:
        return self.type == "stylesheet"


def type_forSyntax(syntax: Optional[str]) -> str:
    """Abbreviation type implied by a syntax name."""
    return "stylesheet" if syntax in STYLESHEET_SYNTAXES else "markup"


def layer_get(source: Optional[Dict[str, Any]], key: str) -> Dict[str, Any]:
    """Table ``key`` of one configuration layer, loading data-file references."""
    if not source:
        return {}
    value: Any = source.get(key)
    if value is None:
        return {}
    if key == "snippets":
        if isinstance(value, str):
            value = data_load(value)
        return snippets_split(value)
    return dict(value)


def data_merge(kind: str, syntax: str, key: str, user: Dict[str, Any],
               globals_: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge one table across every configuration layer.

    Args:
        kind: Abbreviation type ("markup" or "stylesheet")
        syntax: Concrete syntax
        key: Table name ("options", "variables" or "snippets")
        user: Caller configuration
        globals_: Per-type/per-syntax global overrides

    Returns:
        The merged table, later layers winning key by key
    """
    if key == "options":
        merged: Dict[str, Any] = options_default()
        merged["output.indent"] = appsettings.indent
        merged["stylesheet.fuzzySearchMinScore"] = appsettings.fuzzy_min_score
        merged["lorem.seed"] = appsettings.lorem_seed
    elif key == "variables":
        merged = dict(DEFAULT_VARIABLES)
    else:
        merged = {}

    for layer in (SYNTAX_OVERLAYS.get(kind), SYNTAX_OVERLAYS.get(syntax),
                  globals_.get(kind), globals_.get(syntax), user):
        merged.update(layer_get(layer, key))
    return merged


def resolve_config(config: Union[Config, Dict[str, Any], None] = None,
                   globals_: Optional[Dict[str, Any]] = None) -> Config:
    """
    Build a ``Config`` from a caller configuration mapping.

    Args:
        config: Caller mapping with any of ``type``, ``syntax``, ``variables``,
            ``snippets``, ``options``, ``context``, ``text``, ``max_repeat``,
            ``cache``. A ``Config`` is returned as is.
        globals_: Overrides keyed by type or syntax name, each holding
            ``options``/``variables``/``snippets`` tables

    Returns:
        Resolved configuration

    Example:
        >>> resolve_config({'syntax': 'xhtml'}).options['output.selfClosingStyle']
        'xhtml'
        >>> resolve_config({'type': 'stylesheet'}).syntax
        'css'
    """
    if isinstance(config, Config):
        return config
    user: Dict[str, Any] = dict(config or {})
    globals_ = globals_ or {}

    syntax: Optional[str] = user.get("syntax")
    kind: str = user.get("type") or type_forSyntax(syntax)
    if not syntax:
        syntax = appsettings.syntax_default(kind) or DEFAULT_SYNTAXES[kind]

    context: Any = user.get("context")
    if isinstance(context, dict):
        context = AbbreviationContext(context.get("name", ""), dict(context.get("attributes") or {}))

    max_repeat: Optional[int] = user.get("max_repeat", appsettings.max_repeat)

    return Config(
        type=kind,
        syntax=syntax,
        variables=data_merge(kind, syntax, "variables", user, globals_),
        snippets=data_merge(kind, syntax, "snippets", user, globals_),
        options=data_merge(kind, syntax, "options", user, globals_),
        context=context,
        text=user.get("text"),
        max_repeat=max_repeat,
        cache=user.get("cache"),
    )
