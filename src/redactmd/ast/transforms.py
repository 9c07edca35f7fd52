#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/ast/transforms.py
"""AST transformation and collection utilities.

This module provides visitors for rebuilding AST structures and for
collecting nodes in document order. Transformers never modify the tree they
are given; they return a new one.

Examples
--------
Collect the redactions of a document parsed in redact mode:

    >>> from redactmd.ast import transforms
    >>> redactions = transforms.collect_redactions(doc)
    >>> [r.redaction_type for r in redactions]
    ['redactedlink', 'redactedimage']

Rewrite every link destination:

    >>> class HttpsTransformer(transforms.NodeTransformer):
    ...     def visit_link(self, node):
    ...         link = super().visit_link(node)
    ...         return replace(link, url=link.url.replace("http://", "https://"))
    >>> new_doc = HttpsTransformer().transform(doc)

"""

from __future__ import annotations

import copy
from typing import Callable, Type, TypeVar

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
    get_node_children,
    replace_node_children,
)
from redactmd.ast.visitors import NodeVisitor

NodeT = TypeVar("NodeT", bound=Node)


class NodeTransformer(NodeVisitor):
    """Base class for transforming AST nodes.

    Subclasses override visit_* methods to return modified nodes, a list of
    nodes to splice in place of the visited one, or None to remove it. The
    transformer creates a new AST with the transformations applied.

    Examples
    --------
    >>> class UppercaseTransformer(NodeTransformer):
    ...     def visit_text(self, node):
    ...         return Text(content=node.content.upper())
    >>>
    >>> new_doc = UppercaseTransformer().transform(doc)

    """

    def transform(self, node: Node) -> Node | list[Node] | None:
        """Transform an AST node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node, list of Node, or None
            Transformed node, replacement nodes, or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        """Transform a list of child nodes, flattening spliced results."""
        result: list[Node] = []
        for child in children:
            transformed = self.transform(child)
            if transformed is None:
                continue
            if isinstance(transformed, list):
                result.extend(transformed)
            else:
                result.append(transformed)
        return result

    def _generic_transform(self, node: Node) -> Node:
        """Transform a node by rebuilding it around its transformed children."""
        children = get_node_children(node)
        if not children:
            return copy.copy(node)

        return replace_node_children(node, self._transform_children(children))

    def visit_document(self, node: Document) -> Document:
        """Transform a Document node."""
        return Document(
            children=self._transform_children(node.children),
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_heading(self, node: Heading) -> Heading:
        """Transform a Heading node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_paragraph(self, node: Paragraph) -> Paragraph:
        """Transform a Paragraph node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_code_block(self, node: CodeBlock) -> CodeBlock:
        """Transform a CodeBlock node."""
        return CodeBlock(
            content=node.content,
            language=node.language,
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_block_quote(self, node: BlockQuote) -> BlockQuote:
        """Transform a BlockQuote node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_list(self, node: List) -> List:
        """Transform a List node."""
        return List(
            ordered=node.ordered,
            items=self._transform_children(node.items),  # type: ignore[arg-type]
            start=node.start,
            tight=node.tight,
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_list_item(self, node: ListItem) -> ListItem:
        """Transform a ListItem node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_thematic_break(self, node: ThematicBreak) -> ThematicBreak:
        """Transform a ThematicBreak node."""
        return ThematicBreak(metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_html_block(self, node: HTMLBlock) -> HTMLBlock:
        """Transform an HTMLBlock node."""
        return HTMLBlock(content=node.content, metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_link_reference_definition(self, node: LinkReferenceDefinition) -> LinkReferenceDefinition:
        """Transform a LinkReferenceDefinition node."""
        return LinkReferenceDefinition(
            content=node.content, metadata=node.metadata.copy(), source_location=node.source_location
        )

    def visit_text(self, node: Text) -> Text:
        """Transform a Text node."""
        return Text(content=node.content, metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_emphasis(self, node: Emphasis) -> Emphasis:
        """Transform an Emphasis node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_strong(self, node: Strong) -> Strong:
        """Transform a Strong node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_code(self, node: Code) -> Code:
        """Transform a Code node."""
        return Code(content=node.content, metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_link(self, node: Link) -> Link:
        """Transform a Link node."""
        return Link(
            url=node.url,
            content=self._transform_children(node.content),
            title=node.title,
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_image(self, node: Image) -> Image:
        """Transform an Image node."""
        return Image(
            url=node.url,
            alt_text=node.alt_text,
            title=node.title,
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_line_break(self, node: LineBreak) -> LineBreak:
        """Transform a LineBreak node."""
        return LineBreak(soft=node.soft, metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_strikethrough(self, node: Strikethrough) -> Strikethrough:
        """Transform a Strikethrough node."""
        return self._generic_transform(node)  # type: ignore[return-value]

    def visit_html_inline(self, node: HTMLInline) -> HTMLInline:
        """Transform an HTMLInline node."""
        return HTMLInline(content=node.content, metadata=node.metadata.copy(), source_location=node.source_location)

    def visit_redaction(self, node: Redaction) -> Redaction:
        """Transform a Redaction node.

        The wrapped original is copied, not traversed.
        """
        return Redaction(
            redaction_type=node.redaction_type,
            original=copy.deepcopy(node.original),
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )

    def visit_redaction_placeholder(self, node: RedactionPlaceholder) -> Node | list[Node] | None:
        """Transform a RedactionPlaceholder node."""
        return RedactionPlaceholder(
            index=node.index,
            raw=node.raw,
            content=node.content,
            metadata=node.metadata.copy(),
            source_location=node.source_location,
        )


class NodeCollector(NodeVisitor):
    """Visitor that collects nodes matching a condition, in document order.

    Traversal is depth-first and left-to-right, which is the same order the
    placeholder renderer numbers redactions in.

    Parameters
    ----------
    predicate : callable or None, default = None
        Function that takes a node and returns True to collect it

    """

    def __init__(self, predicate: Callable[[Node], bool] | None = None):
        """Initialize the collector with an optional predicate function."""
        self.predicate = predicate or (lambda n: True)
        self.collected: list[Node] = []

    def _collect_if_match(self, node: Node) -> None:
        if self.predicate(node):
            self.collected.append(node)

    def _generic_visit(self, node: Node) -> None:
        self._collect_if_match(node)
        for child in get_node_children(node):
            child.accept(self)

    def visit_document(self, node: Document) -> None:
        """Visit a Document node."""
        self._generic_visit(node)

    def visit_heading(self, node: Heading) -> None:
        """Visit a Heading node."""
        self._generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Visit a Paragraph node."""
        self._generic_visit(node)

    def visit_code_block(self, node: CodeBlock) -> None:
        """Visit a CodeBlock node."""
        self._collect_if_match(node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Visit a BlockQuote node."""
        self._generic_visit(node)

    def visit_list(self, node: List) -> None:
        """Visit a List node."""
        self._generic_visit(node)

    def visit_list_item(self, node: ListItem) -> None:
        """Visit a ListItem node."""
        self._generic_visit(node)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Visit a ThematicBreak node."""
        self._collect_if_match(node)

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Visit an HTMLBlock node."""
        self._collect_if_match(node)

    def visit_link_reference_definition(self, node: LinkReferenceDefinition) -> None:
        """Visit a LinkReferenceDefinition node."""
        self._collect_if_match(node)

    def visit_text(self, node: Text) -> None:
        """Visit a Text node."""
        self._collect_if_match(node)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Visit an Emphasis node."""
        self._generic_visit(node)

    def visit_strong(self, node: Strong) -> None:
        """Visit a Strong node."""
        self._generic_visit(node)

    def visit_code(self, node: Code) -> None:
        """Visit a Code node."""
        self._collect_if_match(node)

    def visit_link(self, node: Link) -> None:
        """Visit a Link node."""
        self._generic_visit(node)

    def visit_image(self, node: Image) -> None:
        """Visit an Image node."""
        self._collect_if_match(node)

    def visit_line_break(self, node: LineBreak) -> None:
        """Visit a LineBreak node."""
        self._collect_if_match(node)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Visit a Strikethrough node."""
        self._generic_visit(node)

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Visit an HTMLInline node."""
        self._collect_if_match(node)

    def visit_redaction(self, node: Redaction) -> None:
        """Visit a Redaction node without descending into the original."""
        self._collect_if_match(node)

    def visit_redaction_placeholder(self, node: RedactionPlaceholder) -> None:
        """Visit a RedactionPlaceholder node."""
        self._collect_if_match(node)


def extract_nodes(node: Node, node_type: Type[NodeT]) -> list[NodeT]:
    """Extract all nodes of a specific type from the tree, in document order.

    Parameters
    ----------
    node : Node
        Root of the tree to search
    node_type : type
        Node class to collect

    Returns
    -------
    list
        Matching nodes, depth-first left-to-right

    """
    collector = NodeCollector(lambda n: isinstance(n, node_type))
    node.accept(collector)
    return collector.collected  # type: ignore[return-value]


def collect_redactions(document: Document) -> list[Redaction]:
    """Collect the redactions of a document in placeholder numbering order."""
    return extract_nodes(document, Redaction)


def collect_placeholders(document: Document) -> list[RedactionPlaceholder]:
    """Collect the placeholders of a redacted document in document order."""
    return extract_nodes(document, RedactionPlaceholder)
