#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/ast/nodes.py
"""AST node classes for markdown document representation.

This module defines the node hierarchy used to represent markdown documents
as Abstract Syntax Trees. Each node represents a structural or inline element
in the document.

Node Hierarchy
--------------
Every node derives from Node and hands itself to a visitor through ``accept``.

Blocks (each redacted copy keeps these unchanged):
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, ThematicBreak, HTMLBlock, LinkReferenceDefinition

Inline content:
    - Text, Emphasis, Strong, Code, Strikethrough
    - Link, Image, LineBreak, HTMLInline

Redaction nodes:
    - Redaction wraps a Link or Image whose destination is hidden in the
      redacted copy of a document
    - RedactionPlaceholder is the marker found in a redacted copy that stands
      in for one Redaction

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Literal, Optional, Union

from redactmd.constants import REDACTION_TYPE_PREFIX


@dataclass
class SourceLocation:
    """Where a node was found in the markdown it was parsed from.

    Parameters
    ----------
    format : str
        Source format, always ``"markdown"`` for nodes built by this package
    line : int or None, default = None
        Line number in source document
    column : int or None, default = None
        Column number in source document
    start : int or None, default = None
        Start offset of the node within the inline run it was parsed from
    end : int or None, default = None
        End offset (exclusive) within the same inline run
    metadata : dict, default = empty dict
        Additional location information (e.g. the raw matched text)

    """

    format: str
    line: Optional[int] = None
    column: Optional[int] = None
    start: Optional[int] = None
    end: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class Node(ABC):
    """Base class for all AST nodes.

    Nodes are plain dataclasses compared by value. Renderers and collectors
    walk them through ``accept``; transformers build new trees instead of
    mutating them.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    source_location : SourceLocation or None, default = None
        Information about where this node came from in the source

    """

    metadata: dict[str, Any]
    source_location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root of a parsed markdown document.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (frontmatter fields)
    source_location : SourceLocation or None, default = None
        Source location information

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text

    """

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """A paragraph; the block most redactions are found in.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes representing paragraph content

    """

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code. Links inside code are never redacted.

    Code block content is never scanned for links, so nothing inside a
    code block is redacted.

    Parameters
    ----------
    content : str
        Code content (not parsed as markdown)
    language : str or None, default = None
        Info string language for syntax highlighting

    """

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """A block quote wrapping other blocks.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the quote

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """A bullet or ordered list.

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists
    tight : bool, default = True
        Whether list is tight (no blank lines between items)

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """One item of a List, holding block children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item
    task_status : {'checked', 'unchecked'} or None, default = None
        For task lists (GFM extension)

    """

    children: list[Node] = field(default_factory=list)
    task_status: Optional[Literal["checked", "unchecked"]] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule) node."""

    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block node, passed through unchanged.

    Parameters
    ----------
    content : str
        Raw HTML content

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


@dataclass
class LinkReferenceDefinition(Node):
    """Link reference definitions (``[label]: url "title"``) kept as written.

    Links that use a definition are resolved to inline links while parsing,
    so the definition itself only has to survive as text.

    Parameters
    ----------
    content : str
        Source lines of one or more consecutive definitions

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this definition block."""
        return visitor.visit_link_reference_definition(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node.

    Parameters
    ----------
    content : str
        Text content

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong emphasis."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code node.

    Parameters
    ----------
    content : str
        Code content

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline code."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Link node.

    Parameters
    ----------
    url : str
        Link destination URL
    content : list of Node, default = empty list
        Inline nodes representing link text
    title : str or None, default = None
        Optional link title (tooltip)

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image node.

    Parameters
    ----------
    url : str
        Image source URL
    alt_text : str, default = ''
        Alternative text description
    title : str or None, default = None
        Optional image title

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break node.

    Parameters
    ----------
    soft : bool, default = False
        True for a soft break (plain newline in the source), False for a
        hard break (two trailing spaces or backslash)

    """

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough node (GFM extension)."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strikethrough."""
        return visitor.visit_strikethrough(self)


@dataclass
class HTMLInline(Node):
    """Inline HTML node, passed through unchanged."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


# ============================================================================
# Redaction Nodes
# ============================================================================


class RedactionType(str, Enum):
    """Tags for the built-in redaction kinds.

    The value of each member is ``"redacted"`` followed by the type name of
    the node it replaces. Registries are keyed by plain strings, so
    extensions can register tags that are not listed here.
    """

    LINK = "redactedlink"
    IMAGE = "redactedimage"

    @classmethod
    def for_node_type(cls, node_type: str) -> str:
        """Build the redaction tag for an original node type name."""
        return f"{REDACTION_TYPE_PREFIX}{node_type}"


RedactableNode = Union[Link, Image]


@dataclass
class Redaction(Node):
    """A link or image whose payload is hidden in the redacted copy.

    The original node is kept intact as a nested field so it can be restored
    later; the redaction itself is a separate variant rather than a modified
    Link or Image.

    Parameters
    ----------
    redaction_type : str
        Tag naming which restoration method rebuilds the original node
        (e.g. ``"redactedlink"``)
    original : Link or Image
        The node that was redacted

    Examples
    --------
    >>> link = Link(url="http://x.com", content=[Text(content="a link")])
    >>> Redaction(redaction_type=RedactionType.LINK.value, original=link).url
    'http://x.com'

    """

    redaction_type: str
    original: RedactableNode
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    @property
    def url(self) -> str:
        """Destination of the redacted node."""
        return self.original.url

    @property
    def title(self) -> Optional[str]:
        """Title of the redacted node, if any."""
        return self.original.title

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this redaction."""
        return visitor.visit_redaction(self)


@dataclass
class RedactionPlaceholder(Node):
    """Marker in a redacted document that stands in for one Redaction.

    Parameters
    ----------
    index : int
        Sequential index written when the document was redacted
    raw : str
        Exact placeholder text as it appeared in the redacted document
    content : str or None, default = None
        Replacement text supplied in the redacted copy (``[text][index]``
        form), or None for the bare ``[index]`` form

    """

    index: int
    raw: str
    content: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this placeholder."""
        return visitor.visit_redaction_placeholder(self)


_BLOCK_CONTAINERS = (Document, BlockQuote, ListItem)
_INLINE_CONTAINERS = (Heading, Paragraph, Emphasis, Strong, Strikethrough, Link)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Redactions are opaque: the original node they wrap is not reported as a
    child, so traversals never count a redacted link's inner nodes.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    """
    if isinstance(node, _BLOCK_CONTAINERS):
        return list(node.children)

    if isinstance(node, _INLINE_CONTAINERS):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy and modify
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children; leaf nodes are returned as-is

    Raises
    ------
    ValueError
        If a List receives children that are not ListItem instances

    """
    if isinstance(node, _BLOCK_CONTAINERS):
        return replace(node, children=new_children)

    if isinstance(node, _INLINE_CONTAINERS):
        return replace(node, content=new_children)

    if isinstance(node, List):
        for child in new_children:
            if not isinstance(child, ListItem):
                raise ValueError(f"List children must be ListItem instances, got {type(child).__name__}")
        return replace(node, items=new_children)  # type: ignore[arg-type]

    return node
