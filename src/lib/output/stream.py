"""
Output stream with line/column tracking

Formatters push text through the stream so the `output.field` hook knows
the exact offset, line and column of every field it renders.
"""

import re
from typing import Any, Dict, List, Optional, Union

from ...config.resolve import Config
from ...models.nodes import AbbreviationAttribute

RE_LINES = re.compile(r'\r\n|\r|\n')


class OutputStream:
    """
    Accumulates formatted output

    Attributes:
        options: Option table (`output.*` keys are read)
        value: Text written so far
        level: Current indentation level
        offset: Length of `value`
        line: Zero-based current line
        column: Zero-based current column
    """

    def __init__(self, options: Dict[str, Any], level: int = 0):
        self.options = options
        self.value = ''
        self.level = level
        self.offset = 0
        self.line = 0
        self.column = 0

    def _write(self, text: str) -> None:
        self.value += text
        self.offset += len(text)
        self.column += len(text)

    def push(self, text: str) -> None:
        """Write text through the `output.text` hook"""
        self._write(self.options['output.text'](text, self.offset, self.line, self.column))

    def pushString(self, value: str) -> None:
        """Write text, re-indenting every line break to the current level"""
        lines = lines_split(value)
        last = len(lines) - 1
        for i, line in enumerate(lines):
            self.push(line)
            if i != last:
                self.pushNewline(True)

    def pushNewline(self, indent: Union[bool, int, None] = None) -> None:
        """
        Start a new line

        Args:
            indent: True indents to the current level, an int indents to
                that many levels, falsy writes no indentation
        """
        base_indent = self.options['output.baseIndent']
        self.push(self.options['output.newline'] + base_indent)
        self.line += 1
        self.column = len(base_indent)
        if indent is True:
            self.pushIndent(self.level)
        elif indent:
            self.pushIndent(indent)

    def pushIndent(self, size: Optional[int] = None) -> None:
        size = self.level if size is None else size
        self.push(self.options['output.indent'] * max(size, 0))

    def pushField(self, index: int, placeholder: str) -> None:
        """Write a tabstop field through the `output.field` hook"""
        field = self.options['output.field']
        self._write(field(index, placeholder, self.offset, self.line, self.column))


def lines_split(text: str) -> List[str]:
    return RE_LINES.split(text)


def case_apply(text: str, case: str) -> str:
    if case:
        return text.upper() if case == 'upper' else text.lower()
    return text


def tagName(name: str, config: Config) -> str:
    return case_apply(name, config.option('output.tagCase', ''))


def attrName(name: str, config: Config) -> str:
    return case_apply(name, config.option('output.attributeCase', ''))


def attrQuote(attr: AbbreviationAttribute, config: Config, opening: bool) -> str:
    if attr.valueType == 'expression':
        return '{' if opening else '}'
    return "'" if config.option('output.attributeQuotes') == 'single' else '"'


def booleanAttribute_is(attr: AbbreviationAttribute, config: Config) -> bool:
    return attr.boolean or (attr.name or '').lower() in config.option('output.booleanAttributes', [])


def selfClose(config: Config) -> str:
    style = config.option('output.selfClosingStyle')
    if style == 'xhtml':
        return ' /'
    if style == 'xml':
        return '/'
    return ''
