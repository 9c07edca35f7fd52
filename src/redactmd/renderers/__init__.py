#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/renderers/__init__.py
"""Renderers turning the redactmd AST back into markdown text."""

from redactmd.renderers.base import BaseRenderer, InlineContentMixin, RenderOutput
from redactmd.renderers.markdown import MarkdownRenderer
from redactmd.renderers.redaction import RedactionRenderer

__all__ = [
    "BaseRenderer",
    "InlineContentMixin",
    "RenderOutput",
    "MarkdownRenderer",
    "RedactionRenderer",
]
