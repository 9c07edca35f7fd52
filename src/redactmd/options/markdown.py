#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/options/markdown.py
"""Configuration options for Markdown parsing and rendering.

This module defines the options used when turning markdown into an AST
(optionally redacting links and images as it goes) and when rendering an AST
back to markdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from redactmd.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_COLLAPSE_BLANK_LINES,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    CodeFenceChar,
    EmphasisSymbol,
)
from redactmd.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    redact : bool, default False
        Wrap every link and image into a Redaction node while tokenizing.
        Read once when the parser is constructed.
    recognize_placeholders : bool, default False
        Recognize ``[N]`` and ``[text][N]`` markers as RedactionPlaceholder
        nodes. Enable this when parsing a redacted copy.
    parse_strikethrough : bool, default True
        Whether to parse strikethrough syntax (~~text~~).
    parse_frontmatter : bool, default True
        Whether to read a leading YAML frontmatter block into metadata.

    """

    redact: bool = field(
        default=False,
        metadata={"help": "Replace link and image nodes with redactions while parsing", "importance": "core"},
    )
    recognize_placeholders: bool = field(
        default=False,
        metadata={
            "help": "Recognize [N] and [text][N] redaction placeholders (for redacted copies)",
            "importance": "advanced",
        },
    )
    parse_strikethrough: bool = field(
        default=True,
        metadata={
            "help": "Parse strikethrough syntax (~~text~~)",
            "cli_name": "no-parse-strikethrough",
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Validate that redaction and placeholder recognition are not combined."""
        super().__post_init__()
        if self.redact and self.recognize_placeholders:
            raise ValueError("redact and recognize_placeholders cannot both be enabled")


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-Markdown rendering.

    Parameters
    ----------
    emphasis_symbol : {"*", "_"}, default "*"
        Symbol used for emphasis; strong uses it doubled.
    bullet_symbols : str, default "*-+"
        Characters cycled through for nested bullet lists.
    code_fence_char : {"`", "~"}, default "`"
        Character used for fenced code blocks.
    code_fence_min : int, default 3
        Minimum fence length; longer fences are used when the code itself
        contains a run of fence characters.
    escape_special : bool, default True
        Escape markdown special characters in plain text.
    collapse_blank_lines : bool, default True
        Collapse runs of blank lines in the output into one.
    metadata_frontmatter : bool, default True
        Render document metadata as YAML frontmatter.

    """

    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol to use for emphasis/italic formatting", "choices": ["*", "_"], "importance": "core"},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Characters to cycle through for nested bullet lists", "importance": "advanced"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character to use for code fences", "choices": ["`", "~"], "importance": "advanced"},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum length for code fences (typically 3)", "type": int, "importance": "advanced"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={
            "help": "Escape special Markdown characters in text",
            "cli_name": "no-escape-special",
            "importance": "advanced",
        },
    )
    collapse_blank_lines: bool = field(
        default=DEFAULT_COLLAPSE_BLANK_LINES,
        metadata={"help": "Collapse multiple blank lines into at most one", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and symbol choices.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if not self.bullet_symbols:
            raise ValueError("bullet_symbols must contain at least one character")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
