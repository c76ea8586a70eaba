"""
Output formatters: HTML-like markup, indentation based markup (Pug, Haml,
Slim) and stylesheets, all writing through an OutputStream.
"""

from .stream import OutputStream
from .html import html
from .indent import haml, indent_format, pug, slim
from .css import css

__all__ = ["OutputStream", "html", "indent_format", "haml", "pug", "slim", "css"]
