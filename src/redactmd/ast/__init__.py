#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/ast/__init__.py
"""Abstract Syntax Tree for markdown documents with redactions.

The AST is produced by :mod:`redactmd.parsers.markdown` and consumed by the
renderers in :mod:`redactmd.renderers`. Redaction and RedactionPlaceholder
are the two node types specific to redaction; everything else is ordinary
markdown structure.
"""

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
    RedactableNode,
    Redaction,
    RedactionPlaceholder,
    RedactionType,
    SourceLocation,
    Strikethrough,
    Strong,
    Text,
    ThematicBreak,
    get_node_children,
    replace_node_children,
)
from redactmd.ast.transforms import (
    NodeCollector,
    NodeTransformer,
    collect_placeholders,
    collect_redactions,
    extract_nodes,
)
from redactmd.ast.visitors import NodeVisitor

__all__ = [
    # Nodes
    "Node",
    "SourceLocation",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "ThematicBreak",
    "HTMLBlock",
    "LinkReferenceDefinition",
    "Text",
    "Emphasis",
    "Strong",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "Strikethrough",
    "HTMLInline",
    "RedactableNode",
    "Redaction",
    "RedactionPlaceholder",
    "RedactionType",
    "get_node_children",
    "replace_node_children",
    # Visitors and transforms
    "NodeVisitor",
    "NodeTransformer",
    "NodeCollector",
    "extract_nodes",
    "collect_redactions",
    "collect_placeholders",
]
