#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/parsers/__init__.py
"""Markdown parsers producing the redactmd AST."""

from redactmd.parsers.base import BaseParser
from redactmd.parsers.markdown import MarkdownToAstConverter, markdown_to_ast
from redactmd.parsers.redaction import (
    RedactingInlineParser,
    create_inline_parser,
    parse_redaction_placeholder,
    placeholder_plugin,
)

__all__ = [
    "BaseParser",
    "MarkdownToAstConverter",
    "markdown_to_ast",
    "RedactingInlineParser",
    "create_inline_parser",
    "parse_redaction_placeholder",
    "placeholder_plugin",
]
