"""
Extract the abbreviation ending at the caret from a line of editor text

    >>> extract_abbreviation('Hello ul>li.item', 16).abbreviation
    'ul>li.item'

The scan runs backwards from the caret over characters that may appear in
an abbreviation. Attribute sets and text nodes are skipped as a whole, so
`a[title="Hello world"]` is extracted although it contains a space. A
closing HTML tag such as `<div>` in front of the abbreviation ends the scan.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .scanner import isQuote

RE_HTML_TAG_END = re.compile(
    r"""</?[\w:\-]+(?:\s+[\w:\-@.]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>'"]+))?)*\s*/?>$"""
)
RE_LEADING_OPERATORS = re.compile(r'^[*+>^]+')

BRACE_PAIRS = {
    '(': ')',
    '[': ']',
    '{': '}',
}

ABBREVIATION_CHARS = set('#.*:$-_!@%^+>/')


@dataclass
class ExtractedAbbreviation:
    """
    Attributes:
        abbreviation: Extracted abbreviation text
        location: Offset of the abbreviation in the line
        start: Offset where the replaced range starts (includes the prefix)
        end: Offset where the replaced range ends
    """
    abbreviation: str
    location: int
    start: int
    end: int


def extract_abbreviation(line: str, pos: Optional[int] = None, type: str = 'markup',
                         lookAhead: bool = True, prefix: str = '') -> Optional[ExtractedAbbreviation]:
    """
    Extract abbreviation left of `pos`

    Args:
        line: Line of text
        pos: Caret offset, defaults to the end of line
        type: "markup" or "stylesheet"; stylesheets only pair `()`
        lookAhead: Move past quotes and brackets auto-closed after the caret
        prefix: Abbreviation must be preceded by this text (e.g. `<` for JSX)

    Returns:
        Extracted abbreviation, or None if nothing was found
    """
    pos = len(line) if pos is None else min(len(line), max(0, pos))
    if lookAhead:
        pos = autoClosed_skip(line, pos, type)

    start = startOffset_get(line, pos, prefix)
    if start == -1:
        return None

    scan = pos
    stack: List[str] = []
    while scan > start:
        ch = line[scan - 1]
        if '}' in stack:
            if ch == '}':
                stack.append(ch)
                scan -= 1
                continue
            if ch != '{':
                scan -= 1
                continue

        if isQuote(ch) and ']' in stack:
            # Quoted attribute value is taken whole, brackets inside included
            opening = line.rfind(ch, start, scan - 1)
            if opening == -1:
                break
            scan = opening
            continue

        if closeBrace_is(ch, type):
            stack.append(ch)
        elif openBrace_is(ch, type):
            if not stack or stack.pop() != BRACE_PAIRS[ch]:
                break
        elif ']' in stack or '}' in stack:
            # Attribute sets and text nodes are taken as is
            scan -= 1
            continue
        elif (ch == '>' and htmlTag_ends(line, scan)) or not abbreviation_char(ch):
            break
        scan -= 1

    if stack or scan == pos:
        return None

    abbreviation = RE_LEADING_OPERATORS.sub('', line[scan:pos])
    return ExtractedAbbreviation(
        abbreviation=abbreviation,
        location=pos - len(abbreviation),
        start=start - len(prefix) if prefix else pos - len(abbreviation),
        end=pos,
    )


def autoClosed_skip(line: str, pos: int, type: str) -> int:
    # A closing quote may only be the very next character
    if pos < len(line) and line[pos] in ('"', "'"):
        pos += 1
    while pos < len(line) and closeBrace_is(line[pos], type):
        pos += 1
    return pos


def startOffset_get(line: str, pos: int, prefix: str) -> int:
    """Offset right after the nearest `prefix` left of `pos`, or -1"""
    if not prefix:
        return 0

    scan = pos
    while scan > 0:
        skipped = pair_skip(line, scan, ']', '[')
        if skipped is None:
            skipped = pair_skip(line, scan, '}', '{')
        if skipped is not None:
            scan = skipped
            continue
        if line[:scan].endswith(prefix):
            return scan
        scan -= 1
    return -1


def pair_skip(line: str, scan: int, close: str, open: str) -> Optional[int]:
    """Position before the `open` matching a `close` right left of `scan`"""
    if line[scan - 1] != close:
        return None
    scan -= 1
    while scan > 0:
        if line[scan - 1] == open:
            return scan - 1
        scan -= 1
    return None


def closeBrace_is(ch: str, type: str) -> bool:
    return ch == ')' or (type == 'markup' and ch in (']', '}'))


def openBrace_is(ch: str, type: str) -> bool:
    return ch == '(' or (type == 'markup' and ch in ('[', '{'))


def abbreviation_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum() or ch in ABBREVIATION_CHARS


def htmlTag_ends(line: str, scan: int) -> bool:
    """An HTML tag ends right before `scan`"""
    return bool(RE_HTML_TAG_END.search(line[:scan]))
