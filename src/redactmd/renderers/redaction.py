#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/renderers/redaction.py
"""Rendering of redacted documents and reconstruction from redacted copies.

RedactionRenderer extends MarkdownRenderer with two modes:

placeholder
    Each Redaction is written as ``[i]``, ``i`` counting redactions from zero
    in document order. Nothing of the redacted link or image is written.

restore
    The renderer walks the tree of an (edited) redacted copy. Each
    placeholder is paired with the source redaction at the same position and
    replaced by the node its restoration method produces. Placeholders are
    validated before any output is written.

"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from redactmd.ast.nodes import Document, Node, Redaction, RedactionPlaceholder, Text
from redactmd.ast.transforms import collect_placeholders
from redactmd.constants import RedactionRenderMode
from redactmd.exceptions import ValidationError
from redactmd.options.markdown import MarkdownRendererOptions
from redactmd.renderers.markdown import MarkdownRenderer
from redactmd.restoration import PlaceholderPairing, pair_placeholders
from redactmd.restoration_registry import RestorationRegistry

logger = logging.getLogger(__name__)

# Text starting with one of these right after "[i]" would make the marker part
# of an inline link or a link reference definition when re-parsed.
_MARKER_SENSITIVE_FOLLOWERS = ("(", ":")


class RedactionRenderer(MarkdownRenderer):
    """Markdown renderer for redacted output and for reconstruction.

    Parameters
    ----------
    mode : {"placeholder", "restore"}, default "placeholder"
        Rendering mode
    redactions : sequence of Redaction, optional
        Source redactions in document order. Required in restore mode.
    registry : RestorationRegistry, optional
        Registry resolving restoration methods. Required in restore mode.
    options : MarkdownRendererOptions, optional
        Markdown formatting options

    Raises
    ------
    ValidationError
        If the mode is unknown or restore mode lacks redactions or registry

    Examples
    --------
    Produce a redacted copy:

        >>> doc = markdown_to_ast("See [a link](http://x.com) here", MarkdownParserOptions(redact=True))
        >>> RedactionRenderer().render_to_string(doc)
        'See [0] here'

    Reconstruct from a redacted copy:

        >>> redacted = markdown_to_ast("See [0] there", MarkdownParserOptions(recognize_placeholders=True))
        >>> renderer = RedactionRenderer("restore", collect_redactions(doc), create_default_registry())
        >>> renderer.render_to_string(redacted)
        'See [a link](http://x.com) there'

    """

    def __init__(
        self,
        mode: RedactionRenderMode = "placeholder",
        redactions: Optional[Sequence[Redaction]] = None,
        registry: Optional[RestorationRegistry] = None,
        options: MarkdownRendererOptions | None = None,
    ):
        """Initialize the renderer in the requested mode."""
        super().__init__(options)
        if mode not in ("placeholder", "restore"):
            raise ValidationError(
                f"Unknown redaction render mode: {mode!r}", parameter_name="mode", parameter_value=mode
            )
        if mode == "restore" and (redactions is None or registry is None):
            raise ValidationError(
                "Restore mode requires the source redactions and a restoration registry",
                parameter_name="redactions" if redactions is None else "registry",
            )

        self.mode: RedactionRenderMode = mode
        self.redactions: list[Redaction] = list(redactions or [])
        self.registry = registry
        self._counter = 0
        self._pairing: PlaceholderPairing | None = None
        self._marker_buffer: list[str] | None = None
        self._marker_length = 0

    def render_to_string(self, document: Document) -> str:
        """Render a document in the configured mode.

        Raises
        ------
        RedactionCountMismatchError
            Restore mode: placeholder and redaction counts differ
        UnknownRedactionTypeError
            Restore mode: a redaction tag has no restoration method

        """
        self._counter = 0
        self._marker_buffer = None
        if self.mode == "restore":
            assert self.registry is not None
            self._pairing = pair_placeholders(collect_placeholders(document), self.redactions, self.registry)

        try:
            result = super().render_to_string(document)
        finally:
            self._pairing = None

        if self.mode == "placeholder":
            logger.debug("Wrote %d redaction placeholder(s)", self._counter)
        return result

    def _emit(self, node: Node) -> Node:
        """Render a restored node at the current position."""
        node.accept(self)
        return node

    def visit_redaction(self, node: Redaction) -> None:
        """Render a Redaction as ``[i]`` in placeholder mode."""
        if self.mode != "placeholder":
            super().visit_redaction(node)
            return

        self._output.append(f"[{self._counter}]")
        self._marker_buffer = self._output
        self._marker_length = len(self._output)
        self._counter += 1

    def visit_redaction_placeholder(self, node: RedactionPlaceholder) -> None:
        """Render a placeholder as the restored node in restore mode.

        Placeholders that were degraded during pairing are written as
        escaped literal text.
        """
        if self.mode != "restore" or self._pairing is None:
            super().visit_redaction_placeholder(node)
            return

        redaction = self._pairing.redaction_for(node)
        if redaction is None:
            self.visit_text(Text(content=node.raw))
            return

        assert self.registry is not None
        method = self.registry.resolve(redaction.redaction_type)
        emitted: list[Node] = []

        def emit(restored: Node) -> Node:
            emitted.append(restored)
            return self._emit(restored)

        result = method(emit, redaction, node.content)
        if not emitted and result is not None:
            self._emit(result)

    def visit_text(self, node: Text) -> None:
        """Render a Text node, guarding a directly preceding placeholder."""
        if (
            node.content.startswith(_MARKER_SENSITIVE_FOLLOWERS)
            and self._marker_buffer is self._output
            and self._marker_length == len(self._output)
        ):
            self._output.append("\\")
        super().visit_text(node)
