#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/parsers/markdown.py
"""Markdown to AST converter.

This module converts markdown into the redactmd AST using mistune. The same
converter serves three purposes, selected by MarkdownParserOptions:

- plain parsing (no option set)
- redact mode (``redact=True``): every outermost link and image becomes a
  Redaction node wrapping the original
- placeholder mode (``recognize_placeholders=True``): ``[N]`` and
  ``[text][N]`` markers in a redacted copy become RedactionPlaceholder nodes

"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Literal, Match, Optional

import mistune
import yaml
from mistune.core import BlockState
from mistune.plugins.formatting import strikethrough
from mistune.plugins.task_lists import task_lists

from redactmd.ast import (
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
    SourceLocation,
    Strikethrough,
    Strong,
    Text,
    ThematicBreak,
)
from redactmd.constants import LINK_DEFINITION_TOKEN_TYPE, PLACEHOLDER_TOKEN_TYPE, REDACTION_TOKEN_TYPE
from redactmd.exceptions import ParsingError, RedactMdError
from redactmd.options.markdown import MarkdownParserOptions
from redactmd.parsers.base import BaseParser, ParserInput
from redactmd.parsers.redaction import create_inline_parser, placeholder_plugin

logger = logging.getLogger(__name__)

_FRONTMATTER_DELIMITER = "---"

_PERCENT_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")

# ASCII characters mistune percent-encodes that read back unchanged when
# written literally inside a link destination.
_LITERAL_SAFE_ASCII = frozenset("\"'{}^")


def _utf8_sequence_length(lead: int) -> int:
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 1


def _decode_percent_run(run: str) -> str:
    escapes = [run[i : i + 3] for i in range(0, len(run), 3)]
    values = [int(escape[1:], 16) for escape in escapes]
    pieces: list[str] = []
    i = 0
    while i < len(values):
        value = values[i]
        if value < 0x80:
            char = chr(value)
            pieces.append(char if char in _LITERAL_SAFE_ASCII else escapes[i])
            i += 1
            continue

        width = _utf8_sequence_length(value)
        try:
            pieces.append(bytes(values[i : i + width]).decode("utf-8"))
        except UnicodeDecodeError:
            pieces.append(escapes[i])
            i += 1
            continue
        i += width
    return "".join(pieces)


def unescape_destination(url: str) -> str:
    """Undo the percent-encoding mistune applies to link destinations.

    mistune normalizes every destination it parses, so ``café`` arrives as
    ``caf%C3%A9`` and ``"`` as ``%22``. Escapes of non-ASCII text and of a
    few quote and brace characters are decoded back to literal text. Any
    other escape is kept as written: whitespace, brackets, backslashes,
    pipes and backticks would change how the destination reads back.

    Parameters
    ----------
    url : str
        Destination as stored by mistune

    Returns
    -------
    str
        Destination as it would be written in markdown source

    Examples
    --------
        >>> unescape_destination("http://x.com/caf%C3%A9?q=%22x%22")
        'http://x.com/café?q="x"'
        >>> unescape_destination("http://x.com/a%20b")
        'http://x.com/a%20b'

    """
    return _PERCENT_ESCAPE_RUN.sub(lambda match: _decode_percent_run(match.group(0)), url)


class DefinitionKeepingBlockParser(mistune.BlockParser):
    """Block parser that leaves a token behind for each link reference definition.

    mistune resolves reference links from its env and emits nothing for the
    definitions themselves. This parser still registers them, then adds a
    token with the source lines so the definition can be written back.
    Consecutive definitions share one token.
    """

    def parse_ref_link(self, m: Match[str], state: BlockState) -> Optional[int]:
        last_token = state.last_token()
        continues_paragraph = last_token is not None and last_token["type"] == "paragraph"
        end_pos = super().parse_ref_link(m, state)
        if not end_pos or continues_paragraph:
            return end_pos

        raw = state.src[m.start() : end_pos]
        follows_definition = last_token is not None and last_token["type"] == LINK_DEFINITION_TOKEN_TYPE
        if follows_definition and last_token["end"] == m.start():
            last_token["raw"] += raw
            last_token["end"] = end_pos
        else:
            state.append_token({"type": LINK_DEFINITION_TOKEN_TYPE, "raw": raw, "end": end_pos})
        return end_pos


class MarkdownToAstConverter(BaseParser):
    r"""Convert Markdown to AST representation.

    The inline parser strategy is chosen once, from ``options.redact``, when
    the converter is constructed.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> converter = MarkdownToAstConverter()
        >>> doc = converter.parse("# Hello\n\nThis is **bold**.")

    Redacting while parsing:

        >>> converter = MarkdownToAstConverter(MarkdownParserOptions(redact=True))
        >>> doc = converter.parse("See [a link](http://x.com) here")
        >>> type(doc.children[0].content[1]).__name__
        'Redaction'

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self._redact = options.redact
        self._redaction_count = 0

    def _create_markdown(self) -> mistune.Markdown:
        """Build a mistune instance for one parse call."""
        plugins: list[Callable[[mistune.Markdown], None]] = [task_lists]
        if self.options.parse_strikethrough:
            plugins.append(strikethrough)
        if self.options.recognize_placeholders:
            plugins.append(placeholder_plugin)

        # Definitions would carry the hidden destinations into a redacted copy
        block = None if self._redact else DefinitionKeepingBlockParser()
        return mistune.Markdown(renderer=None, block=block, inline=create_inline_parser(self._redact), plugins=plugins)

    def parse(self, input_data: ParserInput) -> Document:
        """Parse Markdown input into AST Document.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown input to parse. A str is always markdown content.

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If mistune fails on the input

        """
        markdown_content = self._load_text_content(input_data)
        self._redaction_count = 0

        markdown_content, metadata = self._extract_frontmatter(markdown_content)

        try:
            tokens, _state = self._create_markdown().parse(markdown_content)
            children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        except RedactMdError:
            raise
        except Exception as e:
            raise ParsingError(
                f"Failed to parse markdown: {e}", parsing_stage="tokenizing", original_error=e
            ) from e

        if self._redact:
            logger.debug("Redacted %d link(s)/image(s)", self._redaction_count)

        return Document(children=children, metadata=metadata)

    def _extract_frontmatter(self, content: str) -> tuple[str, dict[str, Any]]:
        """Split a leading YAML frontmatter block from the content.

        Parameters
        ----------
        content : str
            Markdown content

        Returns
        -------
        tuple[str, dict]
            (remaining_content, metadata). Content is returned unchanged when
            there is no frontmatter or it is not a YAML mapping.

        """
        if not self.options.parse_frontmatter:
            return content, {}
        if not (content.startswith("---\n") or content.startswith("---\r\n")):
            return content, {}

        lines = content.splitlines(keepends=True)
        end_index = -1
        for i in range(1, len(lines)):
            if lines[i].strip() == _FRONTMATTER_DELIMITER:
                end_index = i
                break

        if end_index <= 0:
            return content, {}

        yaml_content = "".join(lines[1:end_index])
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            logger.warning("Ignoring invalid YAML frontmatter: %s", e)
            return content, {}

        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.debug("Frontmatter is not a mapping; parsing it as markdown")
            return content, {}

        return "".join(lines[end_index + 1 :]), data

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into AST nodes."""
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)

        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single mistune block token into an AST node.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node or None
            Resulting AST node, or None for tokens without content
            (blank lines)

        """
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return Paragraph(content=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", "").rstrip("\n"))
        elif token_type == LINK_DEFINITION_TOKEN_TYPE:
            return LinkReferenceDefinition(content=token.get("raw", "").rstrip("\n"))

        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs", {})
        level = attrs.get("level", 1) if isinstance(attrs, dict) else 1
        if not isinstance(level, int) or level < 1 or level > 6:
            level = 1

        return Heading(level=level, content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process code block token.

        The first word of the info string becomes the language; the full
        info string is kept in metadata so it can be written back unchanged.
        """
        code_content = token.get("raw", "")
        attrs = token.get("attrs", {}) or {}
        info_string = (attrs.get("info") or "").strip()

        metadata: dict[str, Any] = {}
        language = None
        if info_string:
            metadata["info_string"] = info_string
            language = info_string.split(maxsplit=1)[0]
        if "fenced" not in token.get("style", "fenced"):
            metadata["indented"] = True

        return CodeBlock(content=code_content, language=language, metadata=metadata)

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token.

        Parameters
        ----------
        token : dict
            List token with 'children', 'tight' and 'attrs' (ordered, start)

        Returns
        -------
        List
            List AST node

        """
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}

        ordered = attrs.get("ordered", False)
        start = attrs.get("start", 1)
        tight = token.get("tight", attrs.get("tight", True))

        children = token.get("children", [])
        items = [self._process_list_item(child) for child in children if isinstance(child, dict)]

        return List(ordered=ordered, items=items, start=start, tight=tight)

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        content = self._process_tokens(token.get("children", []))

        task_status: Literal["checked", "unchecked"] | None = None
        attrs = token.get("attrs", {}) or {}
        if token.get("type") == "task_list_item" or "checked" in attrs:
            task_status = "checked" if attrs.get("checked") else "unchecked"

        return ListItem(children=content, task_status=task_status)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens, merging adjacent text runs.

        Mistune emits escaped characters as separate text tokens; merging
        keeps one Text node per run of plain text.
        """
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1] = Text(content=nodes[-1].content + node.content)
            else:
                nodes.append(node)

        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        token_type = token.get("type", "")

        handler_map: dict[str, Callable[[dict[str, Any]], Optional[Node]]] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "strikethrough": self._handle_strikethrough_token,
            "inline_html": self._handle_inline_html_token,
            REDACTION_TOKEN_TYPE: self._handle_redaction_token,
            PLACEHOLDER_TOKEN_TYPE: self._handle_placeholder_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)
        logger.debug("Skipping unsupported inline token type: %s", token_type)
        return None

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        """Handle link token."""
        attrs = token.get("attrs", {}) or {}
        content = self._process_inline_tokens(token.get("children", []))
        return Link(url=unescape_destination(attrs.get("url", "")), content=content, title=attrs.get("title"))

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token.

        Alt text is the plain text of the image description, with any
        inline formatting dropped.
        """
        attrs = token.get("attrs", {}) or {}
        alt_text = self._plain_text(token.get("children", []))
        return Image(url=unescape_destination(attrs.get("url", "")), alt_text=alt_text, title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=token.get("raw", ""))

    def _handle_redaction_token(self, token: dict[str, Any]) -> Redaction | None:
        """Handle a redaction token produced by RedactingInlineParser."""
        attrs = token.get("attrs", {})
        children = token.get("children", [])
        if not children:
            return None

        original = self._process_inline_token(children[0])
        if not isinstance(original, (Link, Image)):
            raise ParsingError(
                f"Redaction wraps unsupported token type {children[0].get('type')!r}",
                parsing_stage="redaction",
            )

        self._redaction_count += 1
        return Redaction(
            redaction_type=attrs["redaction_type"],
            original=original,
            source_location=SourceLocation(format="markdown", start=attrs.get("start"), end=attrs.get("end")),
        )

    def _handle_placeholder_token(self, token: dict[str, Any]) -> RedactionPlaceholder:
        """Handle a placeholder token produced by the placeholder plugin.

        The index is kept exactly as written (``metadata["index_text"]``) so
        that non-canonical forms such as ``[007]`` can be told apart from
        ``[7]`` when placeholders are paired.
        """
        attrs = token.get("attrs", {})
        index_text = attrs["index"]
        return RedactionPlaceholder(
            index=int(index_text),
            raw=token.get("raw", ""),
            content=attrs.get("content"),
            metadata={"index_text": index_text},
            source_location=SourceLocation(format="markdown", start=attrs.get("start"), end=attrs.get("end")),
        )

    def _plain_text(self, tokens: list[dict[str, Any]]) -> str:
        parts: list[str] = []
        for child in tokens:
            if not isinstance(child, dict):
                continue
            if child.get("type") in ("text", "codespan", "inline_html"):
                parts.append(child.get("raw", ""))
            elif child.get("type") in ("softbreak", "linebreak"):
                parts.append("\n")
            elif "children" in child:
                parts.append(self._plain_text(child["children"]))
        return "".join(parts)


def markdown_to_ast(markdown_content: ParserInput, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert Markdown to AST.

    This is a convenience function that creates a converter and parses
    the markdown in one step.

    Parameters
    ----------
    markdown_content : str, Path, IO, or bytes
        Markdown to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\n\nWorld")
    >>> len(doc.children)
    2

    """
    converter = MarkdownToAstConverter(options)
    return converter.parse(markdown_content)
