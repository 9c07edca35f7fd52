#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/options/__init__.py
"""Configuration options for redactmd parsers and renderers."""

from redactmd.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from redactmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
