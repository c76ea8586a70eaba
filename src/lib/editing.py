"""
Text lookups behind the editor commands

Plain functions over the document text: find the element, stylesheet
property or comment around the caret, and tell whether the caret sits
between an empty tag pair. The tracking controller applies the result
through the editor adapter.
"""

import re
from typing import Optional, Tuple

from ..config.options import STYLESHEET_SYNTAXES

RE_TAG = re.compile(r'<(/?)([A-Za-z][\w:.-]*)(?:\s(?:"[^"]*"|\'[^\']*\'|[^>"\'])*)?>')
RE_OPEN_TAG_END = re.compile(r'<([A-Za-z][\w:.-]*)(?:\s(?:"[^"]*"|\'[^\']*\'|[^>"\'/])*)?>\Z')
RE_LINE_INDENT = re.compile(r'[ \t]*')

VOID_ELEMENTS = {
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
}

HTML_COMMENT = ('<!--', '-->')
CSS_COMMENT = ('/*', '*/')
JSX_COMMENT = ('{/*', '*/}')
COMMENT_SYNTAXES = ('html', 'xml', 'xhtml', 'xsl', 'vue')
JSX_SYNTAXES = ('jsx', 'tsx', 'javascriptreact', 'typescriptreact')

Range = Tuple[int, int]


def commentTokens_get(syntax: Optional[str]) -> Optional[Tuple[str, str]]:
    """Comment start/end tokens of `syntax`; None for indent-based markup like pug"""
    if syntax in STYLESHEET_SYNTAXES:
        return CSS_COMMENT
    if syntax in JSX_SYNTAXES:
        return JSX_COMMENT
    if syntax in COMMENT_SYNTAXES:
        return HTML_COMMENT
    return None


def comment_find(text: str, pos: int, tokens: Tuple[str, str]) -> Optional[Range]:
    """Range of the comment enclosing `pos`, tokens included"""
    open_token, close_token = tokens
    start = text.rfind(open_token, 0, pos)
    if start == -1:
        return None
    end = text.find(close_token, start + len(open_token))
    if end == -1 or end + len(close_token) < pos:
        return None
    return start, end + len(close_token)


def comment_strip(comment: str, tokens: Tuple[str, str]) -> Tuple[str, int]:
    """
    Remove comment tokens and the padding space after/before them

    Returns:
        Uncommented text and the number of characters removed before it
    """
    open_token, close_token = tokens
    inner = comment[len(open_token):len(comment) - len(close_token)]
    lead = len(open_token)
    if len(inner) >= 2 and inner[0] == ' ' and inner[-1] == ' ':
        inner = inner[1:-1]
        lead += 1
    return inner, lead


def tagPair_find(text: str, pos: int) -> Optional[Range]:
    """
    Innermost element around `pos`: from its opening tag to its closing
    tag, or the tag itself for void and self-closing elements
    """
    stack = []
    best: Optional[Range] = None

    def candidate(start: int, end: int) -> None:
        nonlocal best
        if start <= pos <= end and (best is None or end - start < best[1] - best[0]):
            best = (start, end)

    for m in RE_TAG.finditer(text):
        closing, name = m.group(1), m.group(2)
        if closing:
            for i in range(len(stack) - 1, -1, -1):
                if stack[i][0] == name:
                    candidate(stack[i][1], m.end())
                    # Unclosed tags nested in the matched one are dropped
                    del stack[i:]
                    break
        elif m.group(0).endswith('/>') or name.lower() in VOID_ELEMENTS:
            candidate(m.start(), m.end())
        else:
            stack.append((name, m.start()))

    return best


def property_find(text: str, pos: int) -> Optional[Range]:
    """Stylesheet property under `pos`, trailing `;` included"""
    # Caret right after `;` belongs to the property it ends
    search = pos - 1 if pos and text[pos - 1] == ';' else pos
    start = max(text.rfind(ch, 0, search) for ch in ';{}\n') + 1

    end = len(text)
    for i in range(search, len(text)):
        ch = text[i]
        if ch == '{':
            # Caret in a selector
            return None
        if ch == ';':
            end = i + 1
            break
        if ch in '}\n':
            end = i
            break

    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return (start, end) if start < end else None


def emptyPair_is(text: str, pos: int, stylesheet: bool = False) -> bool:
    """Caret sits right between `<tag>` and `</tag>`, or `{` and `}` in stylesheets"""
    if stylesheet:
        return text[:pos].endswith('{') and text[pos:].startswith('}')
    m = RE_OPEN_TAG_END.search(text, 0, pos)
    return m is not None and text.startswith(f'</{m.group(1)}>', pos)


def lineIndent_get(text: str, pos: int) -> str:
    """Leading whitespace of the line holding `pos`"""
    line_start = text.rfind('\n', 0, pos) + 1
    return RE_LINE_INDENT.match(text, line_start).group(0)
