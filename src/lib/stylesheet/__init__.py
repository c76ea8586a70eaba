"""Stylesheet abbreviation pipeline: tokenize, parse, resolve against snippets."""
