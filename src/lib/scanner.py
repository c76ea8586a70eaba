"""
Character scanner shared by the abbreviation tokenizers

A Scanner is a mutable cursor over a string. Every consuming method leaves
the position untouched when nothing was consumed, so tokenizers can chain
attempts without saving and restoring state.

Example:
    >>> scanner = Scanner("ul>li")
    >>> scanner.eatWhile(str.isalpha)
    True
    >>> scanner.current()
    'ul'
"""

from typing import Callable, Optional, Union

Matcher = Union[str, Callable[[str], bool]]


class AbbreviationError(SyntaxError):
    """
    Base error for malformed abbreviations

    Attributes:
        pos: Offset in the source (character or token offset)
        source: Abbreviation source, when known
    """

    def __init__(self, message: str, pos: Optional[int] = None, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.source = source

    def pointer(self) -> str:
        """Render the source with a caret under the offending position"""
        if self.source is None or self.pos is None:
            return ""
        return f"{self.source}\n{'-' * self.pos}^"

    def __str__(self) -> str:
        pointer = self.pointer()
        return f"{self.message}\n{pointer}" if pointer else self.message


class ScannerError(AbbreviationError):
    """Raised by tokenizers on unexpected or unterminated input"""
    pass


def isNumber(ch: str) -> bool:
    return '0' <= ch <= '9' if ch else False


def isAlpha(ch: str) -> bool:
    return ('a' <= ch <= 'z' or 'A' <= ch <= 'Z') if ch else False


def isAlphaNumeric(ch: str) -> bool:
    return isNumber(ch) or isAlpha(ch)


def isAlphaWord(ch: str) -> bool:
    return ch == '_' or isAlpha(ch)


def isAlphaNumericWord(ch: str) -> bool:
    return isNumber(ch) or isAlphaWord(ch)


def isUmlaut(ch: str) -> bool:
    return bool(ch) and ord(ch) > 127 and ch.isalpha()


def isSpace(ch: str) -> bool:
    return ch in (' ', '\t', '\u00a0') if ch else False


def isWhiteSpace(ch: str) -> bool:
    return isSpace(ch) or ch in ('\n', '\r')


def isQuote(ch: str) -> bool:
    return ch in ('"', "'") if ch else False


class Scanner:
    """
    Forward cursor over a string

    Attributes:
        string: Backing string
        pos: Current position
        start: Start of the token being accumulated
        end: Upper bound of the scanned region
    """

    def __init__(self, string: str, start: int = 0, end: Optional[int] = None):
        self.string = string
        self.pos = self.start = start
        self.end = len(string) if end is None else end

    def eof(self) -> bool:
        return self.pos >= self.end

    def limit(self, start: int, end: int) -> "Scanner":
        """Create a scanner over a sub-range of the same string"""
        return Scanner(self.string, start, end)

    def peek(self) -> str:
        """Character at current position, empty string at the end"""
        return self.string[self.pos] if self.pos < self.end else ''

    def next(self) -> str:
        if self.pos < len(self.string):
            ch = self.string[self.pos]
            self.pos += 1
            return ch
        return ''

    def eat(self, match: Matcher) -> bool:
        ch = self.peek()
        if not ch:
            return False
        ok = match(ch) if callable(match) else ch == match
        if ok:
            self.next()
        return ok

    def eatWhile(self, match: Matcher) -> bool:
        start = self.pos
        while not self.eof() and self.eat(match):
            pass
        return self.pos != start

    def backUp(self, n: int = 1) -> None:
        self.pos -= n

    def current(self) -> str:
        return self.substring(self.start, self.pos)

    def substring(self, start: int, end: Optional[int] = None) -> str:
        return self.string[start:self.pos if end is None else end]

    def error(self, message: str, pos: Optional[int] = None) -> ScannerError:
        pos = self.pos if pos is None else pos
        return ScannerError(f"{message} at {pos + 1}", pos, self.string)


def eatQuoted(scanner: Scanner, throws: bool = False) -> bool:
    """
    Consume a quoted string starting at current position

    Returns:
        True if a complete quoted string was consumed. On an unterminated
        quote either raises (throws=True) or rewinds and returns False.
    """
    start = scanner.pos
    quote = scanner.peek()
    if scanner.eat(isQuote):
        while not scanner.eof():
            ch = scanner.next()
            if ch == quote:
                scanner.start = start
                return True
            if ch == '\\':
                scanner.next()
        scanner.pos = start
        if throws:
            raise scanner.error('Unable to consume quoted string')
    return False


def eatPair(scanner: Scanner, open: str, close: str, throws: bool = False) -> bool:
    """Consume a balanced open/close pair, skipping quoted strings inside"""
    start = scanner.pos
    if scanner.eat(open):
        stack = 1
        while not scanner.eof():
            if eatQuoted(scanner, throws):
                continue
            ch = scanner.next()
            if ch == open:
                stack += 1
            elif ch == close:
                stack -= 1
                if not stack:
                    scanner.start = start
                    return True
            elif ch == '\\':
                scanner.next()
        scanner.pos = start
        if throws:
            raise scanner.error(f'Unable to find matching pair for {open}')
    return False
