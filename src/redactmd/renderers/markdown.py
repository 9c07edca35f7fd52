#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/renderers/markdown.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which converts AST nodes
back to markdown text.

The rendering process uses the visitor pattern. Every block is rendered
without indentation; containers (list items, block quotes) then prefix the
lines of their children, so nesting composes without shared indent state.

A Redaction reaching this renderer is rendered as the node it wraps, and a
RedactionPlaceholder as its raw text. The redaction renderer overrides both.

"""

from __future__ import annotations

import re

import yaml

from redactmd.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    LinkReferenceDefinition,
    List,
    ListItem,
    Node,
    Paragraph,
    Redaction,
    RedactionPlaceholder,
    Strikethrough,
    Strong,
    Text,
    ThematicBreak,
)
from redactmd.ast.visitors import NodeVisitor
from redactmd.exceptions import RenderingError
from redactmd.options.markdown import MarkdownRendererOptions
from redactmd.renderers.base import BaseRenderer, InlineContentMixin

# Line starts that would turn paragraph text into block syntax on re-parse
_ORDERED_MARKER_RE = re.compile(r"^(\d{1,9})([.)])(\s|$)")
_BULLET_MARKER_RE = re.compile(r"^(?:[-+](?:\s|$)|>)")
_SETEXT_UNDERLINE_RE = re.compile(r"^(=+|-+)\s*$")


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render AST nodes to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
    Basic usage:

        >>> from redactmd.ast import Document, Heading, Text
        >>> from redactmd.renderers.markdown import MarkdownRenderer
        >>> doc = Document(children=[
        ...     Heading(level=1, content=[Text(content="Title")])
        ... ])
        >>> renderer = MarkdownRenderer()
        >>> print(renderer.render_to_string(doc))
        # Title

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_depth: int = 0
        self._tight_stack: list[bool] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to markdown string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text, without trailing whitespace

        Raises
        ------
        RenderingError
            If the metadata cannot be serialized as YAML

        """
        self._output = []
        self._list_depth = 0
        self._tight_stack = []

        document.accept(self)

        result = "".join(self._output)
        self._output.clear()
        return self._cleanup_output(result)

    def _cleanup_output(self, text: str) -> str:
        """Normalize line endings and strip trailing whitespace."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.rstrip()

    def _render_block(self, node: Node) -> str:
        """Render a single block node to a string."""
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: list, separator: str = "\n\n") -> str:
        """Render block children and join them with a separator.

        With ``collapse_blank_lines`` blocks that render to nothing are
        dropped, so they do not leave runs of blank lines behind.
        """
        parts = [self._render_block(child) for child in children]
        if self.options.collapse_blank_lines:
            parts = [part for part in parts if part.strip()]
        return separator.join(parts)

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        - ``#`` is only escaped at the start of the text
        - ``_`` is not escaped inside words (``snake_case``)
        - backslash, backticks, asterisks, braces and brackets always are

        Escaping brackets also guarantees that text which merely looks like
        a redaction placeholder is never read back as one.

        Parameters
        ----------
        text : str
            Text to escape

        Returns
        -------
        str
            Escaped text

        """
        if not self.options.escape_special:
            return text

        always_escape = "\\`*{}[]"

        escaped_chars = []
        for i, char in enumerate(text):
            if char in always_escape:
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "#" and i == 0:
                escaped_chars.append("\\#")
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if prev_alnum and next_alnum:
                    escaped_chars.append(char)
                else:
                    escaped_chars.append("\\_")
            else:
                escaped_chars.append(char)

        return "".join(escaped_chars)

    def _escape_line_starts(self, text: str) -> str:
        """Escape paragraph lines that would re-parse as block syntax."""
        if not self.options.escape_special:
            return text

        lines = text.split("\n")
        for i, line in enumerate(lines):
            if _SETEXT_UNDERLINE_RE.match(line) or _BULLET_MARKER_RE.match(line):
                lines[i] = "\\" + line
            else:
                lines[i] = _ORDERED_MARKER_RE.sub(r"\1\\\2\3", line, count=1)
        return "\n".join(lines)

    @staticmethod
    def _indent_lines(text: str, first_prefix: str, rest_prefix: str) -> str:
        """Prefix the first line and every following non-blank line."""
        lines = text.split("\n")
        result = [first_prefix + lines[0]]
        for line in lines[1:]:
            result.append(rest_prefix + line if line else "")
        return "\n".join(result)

    def _get_bullet_symbol(self, depth: int) -> str:
        """Get the bullet symbol for a given nesting depth (0-based)."""
        symbols = self.options.bullet_symbols
        return symbols[depth % len(symbols)]

    def visit_document(self, node: Document) -> None:
        """Render a Document node, preceded by its metadata as frontmatter."""
        if self.options.metadata_frontmatter and node.metadata:
            self._render_frontmatter(node.metadata)

        self._output.append(self._render_blocks(node.children))

    def _render_frontmatter(self, metadata: dict) -> None:
        """Render metadata as a YAML frontmatter block."""
        try:
            dumped = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True, default_flow_style=False)
        except yaml.YAMLError as e:
            raise RenderingError(
                f"Document metadata cannot be written as YAML: {e}", rendering_stage="frontmatter", original_error=e
            ) from e
        self._output.append(f"---\n{dumped}---\n\n")

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node as an ATX heading."""
        content = self._render_inline_content(node.content)
        # A newline would end an ATX heading
        content = content.replace("\n", " ")
        self._output.append(f"{'#' * node.level} {content}".rstrip())

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        content = self._render_inline_content(node.content)
        self._output.append(self._escape_line_starts(content))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node.

        Indented code blocks without a language keep their indented form;
        everything else is fenced. The fence is made longer than any run of
        fence characters inside the code.

        Parameters
        ----------
        node : CodeBlock
            Code block to render

        """
        content = node.content
        if node.metadata.get("indented") and not node.language:
            body = content[:-1] if content.endswith("\n") else content
            self._output.append(self._indent_lines(body, "    ", "    "))
            return

        fence_char = self.options.code_fence_char
        fence_length = self.options.code_fence_min
        if fence_char in content:
            longest_run = max(len(run) for run in re.findall(re.escape(fence_char) + "+", content))
            fence_length = max(fence_length, longest_run + 1)

        fence = fence_char * fence_length
        info = node.metadata.get("info_string") or node.language or ""

        self._output.append(f"{fence}{info}\n")
        self._output.append(content)
        if content and not content.endswith("\n"):
            self._output.append("\n")
        self._output.append(fence)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node, quoting every line of its children."""
        quoted = self._render_blocks(node.children)
        lines = quoted.split("\n")
        self._output.append("\n".join("> " + line if line else ">" for line in lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Parameters
        ----------
        node : List
            List to render

        """
        bullet = self._get_bullet_symbol(self._list_depth)
        separator = "\n" if node.tight else "\n\n"

        self._list_depth += 1
        self._tight_stack.append(node.tight)
        try:
            rendered_items = []
            for i, item in enumerate(node.items):
                marker = f"{node.start + i}. " if node.ordered else f"{bullet} "
                body = self._render_block(item)
                rendered_items.append(self._indent_lines(body, marker, " " * len(marker)))
        finally:
            self._tight_stack.pop()
            self._list_depth -= 1

        self._output.append(separator.join(rendered_items))

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node without its marker.

        The enclosing list adds the marker and indents continuation lines by
        the marker width.
        """
        tight = self._tight_stack[-1] if self._tight_stack else True
        body = self._render_blocks(node.children, separator="\n" if tight else "\n\n")

        if node.task_status:
            checkbox = "[x]" if node.task_status == "checked" else "[ ]"
            body = f"{checkbox} {body}" if body else checkbox

        self._output.append(body)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append("---")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node unchanged."""
        self._output.append(node.content)

    def visit_link_reference_definition(self, node: LinkReferenceDefinition) -> None:
        """Render link reference definitions as they were written."""
        self._output.append(node.content)

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(self._escape_markdown(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        content = self._render_inline_content(node.content)
        symbol = self.options.emphasis_symbol
        self._output.append(f"{symbol}{content}{symbol}")

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        content = self._render_inline_content(node.content)
        symbol = self.options.emphasis_symbol * 2
        self._output.append(f"{symbol}{content}{symbol}")

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        Uses a backtick run longer than any run inside the code, padding
        with spaces when the code starts or ends with a backtick.
        """
        content = node.content
        runs = re.findall("`+", content)
        backticks = "`" * (max((len(run) for run in runs), default=0) + 1)
        if content.startswith("`") or content.endswith("`"):
            content = f" {content} "
        self._output.append(f"{backticks}{content}{backticks}")

    @staticmethod
    def _format_destination(url: str, title: str | None) -> str:
        """Format the ``(url "title")`` part of a link or image."""
        if not url or any(c in url for c in " ()<>"):
            url = "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
        if title:
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'({url} "{escaped_title}")'
        return f"({url})"

    def visit_link(self, node: Link) -> None:
        """Render a Link node as an inline link."""
        content = self._render_inline_content(node.content)
        self._output.append(f"[{content}]{self._format_destination(node.url, node.title)}")

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        alt = node.alt_text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
        self._output.append(f"![{alt}]{self._format_destination(node.url, node.title)}")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        if node.soft:
            self._output.append("\n")
        else:
            self._output.append("\\\n")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        content = self._render_inline_content(node.content)
        self._output.append(f"~~{content}~~")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node unchanged."""
        self._output.append(node.content)

    def visit_redaction(self, node: Redaction) -> None:
        """Render a Redaction as the node it wraps."""
        node.original.accept(self)

    def visit_redaction_placeholder(self, node: RedactionPlaceholder) -> None:
        """Render a RedactionPlaceholder as it was written."""
        self._output.append(node.raw)
