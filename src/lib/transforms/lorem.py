"""
Lorem ipsum generator

`lorem`, `lorem10`, `lorem5-15`, `loremru20`: replaces the node with a
paragraph of placeholder text. Word banks are loaded from the YAML files in
``abbrex/data``; unknown languages fall back to latin.
"""

import math
import random
import re
from functools import lru_cache
from typing import Dict, List, Optional

from .implicit_tag import implicitTag_resolve
from ...config.resolve import data_load
from ...models.nodes import AbbreviationNode
from ...models.tokens import Repeater

RE_LOREM = re.compile(r'^lorem([a-z]*)(\d*)(-\d*)?$', re.I)
RE_COMMA = re.compile(r',$')

LANGUAGES = ('latin', 'ru', 'sp')
DEFAULT_WORD_COUNT = 30


@lru_cache(maxsize=None)
def vocabulary_load(lang: str) -> Dict[str, List[str]]:
    """Word bank for `lang` with duplicate words removed"""
    if lang not in LANGUAGES:
        lang = 'latin'
    table = data_load(f"lorem-{lang}.yaml")
    return {
        'common': [str(w) for w in table.get('common') or []],
        'words': list(dict.fromkeys(str(w) for w in table.get('words') or [])),
    }


def lorem(node: AbbreviationNode, ancestors, state) -> None:
    if not node.name:
        return
    m = RE_LOREM.match(node.name)
    if not m:
        return

    rng: random.Random = state.rng
    db = vocabulary_load(m.group(1).lower() or 'latin')
    min_count = max(1, int(m.group(2))) if m.group(2) else DEFAULT_WORD_COUNT
    max_count = max(min_count, int(m.group(3)[1:])) if m.group(3) and m.group(3)[1:] else min_count
    word_count = rand(rng, min_count, max_count)
    repeat = node.repeat or repeater_find(ancestors)

    node.name = None
    node.attributes = None
    node.value = [paragraph(rng, db, word_count, repeat is None or repeat.value == 0)]

    # Repeated paragraphs become elements of their own
    if node.repeat is not None:
        implicitTag_resolve(node, ancestors, state.config)


def rand(rng: random.Random, start: int, end: int) -> int:
    return math.floor(rng.random() * (end - start) + start)


def sample(rng: random.Random, words: List[str], count: int) -> List[str]:
    """`count` distinct random words"""
    iterations = min(len(words), count)
    result: List[str] = []
    while len(result) < iterations:
        word = words[rand(rng, 0, len(words))]
        if word not in result:
            result.append(word)
    return result


def choice(rng: random.Random, values: str) -> str:
    return values[rand(rng, 0, len(values) - 1)]


def sentence(rng: random.Random, words: List[str], end: Optional[str] = None) -> str:
    if words:
        words = [capitalize(words[0])] + words[1:]
    return ' '.join(words) + (end or choice(rng, '?!...'))


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def commas_insert(rng: random.Random, words: List[str]) -> List[str]:
    """Sprinkle a few commas, never after the last word"""
    if len(words) < 2:
        return words

    words = list(words)
    length = len(words)
    if 3 < length <= 6:
        total = rand(rng, 0, 1)
    elif 6 < length <= 12:
        total = rand(rng, 0, 2)
    else:
        total = rand(rng, 1, 4)

    for _ in range(total):
        pos = rand(rng, 0, length - 2)
        if not RE_COMMA.search(words[pos]):
            words[pos] += ','
    return words


def paragraph(rng: random.Random, db: Dict[str, List[str]], word_count: int, common_start: bool) -> str:
    """
    Generate `word_count` words of text

    Args:
        rng: Random source
        db: Word bank with `common` opener and `words` pool
        word_count: Exact number of words to produce
        common_start: Open with the language's classic phrase
    """
    result: List[str] = []
    total = 0

    if common_start and db['common']:
        words = db['common'][:word_count]
        total += len(words)
        result.append(sentence(rng, commas_insert(rng, words), '.'))

    while total < word_count and db['words']:
        words = sample(rng, db['words'], min(rand(rng, 2, 30), word_count - total))
        total += len(words)
        result.append(sentence(rng, commas_insert(rng, words)))

    return ' '.join(result)


def repeater_find(ancestors) -> Optional[Repeater]:
    for elem in reversed(ancestors):
        if isinstance(elem, AbbreviationNode) and elem.repeat is not None:
            return elem.repeat
    return None
