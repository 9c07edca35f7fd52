"""The major exported API functions for redaction and reconstruction."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/redactmd/api.py
import logging
from typing import Optional

from redactmd.ast.nodes import Document
from redactmd.ast.transforms import collect_redactions
from redactmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from redactmd.parsers.base import ParserInput
from redactmd.parsers.markdown import MarkdownToAstConverter
from redactmd.renderers.redaction import RedactionRenderer
from redactmd.restoration import PlaceholderRestorer
from redactmd.restoration_registry import RestorationMethod, RestorationRegistry, create_default_registry
from redactmd.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


class RedactionTransformer:
    """Redact markdown documents and reconstruct them from redacted copies.

    A transformer owns its restoration registry. Parsers and renderers are
    created per call, so one transformer may serve concurrent calls once its
    registry has been set up.

    Parameters
    ----------
    registry : RestorationRegistry, optional
        Restoration methods to use. A fresh default registry is created when
        omitted.
    parser_options : MarkdownParserOptions, optional
        Base parser options. ``redact`` and ``recognize_placeholders`` are
        set per call and need not be given.
    renderer_options : MarkdownRendererOptions, optional
        Formatting options for every rendered document

    Examples
    --------
        >>> transformer = RedactionTransformer()
        >>> redacted = transformer.source_to_redacted("See [a link](http://x.com) here")
        >>> redacted
        'See [0] here'
        >>> transformer.source_and_redacted_to_markdown("See [a link](http://x.com) here", redacted)
        'See [a link](http://x.com) here'

    """

    def __init__(
        self,
        registry: Optional[RestorationRegistry] = None,
        parser_options: Optional[MarkdownParserOptions] = None,
        renderer_options: Optional[MarkdownRendererOptions] = None,
    ):
        self._registry = registry if registry is not None else create_default_registry()
        base_options = parser_options or MarkdownParserOptions()
        self._source_options = base_options.create_updated(redact=True, recognize_placeholders=False)
        self._redacted_options = base_options.create_updated(redact=False, recognize_placeholders=True)
        self.renderer_options = renderer_options or MarkdownRendererOptions()

    @property
    def registry(self) -> RestorationRegistry:
        """The restoration registry owned by this transformer."""
        return self._registry

    def register(self, redaction_type: str, method: RestorationMethod, *, overwrite: bool = False) -> None:
        """Register a restoration method on this transformer's registry.

        See :meth:`RestorationRegistry.register`.
        """
        self._registry.register(redaction_type, method, overwrite=overwrite)

    def redact_document(self, source: ParserInput) -> Document:
        """Parse a source document with every link and image redacted."""
        with debug_timer(logger, "Parsing (source)"):
            return MarkdownToAstConverter(self._source_options).parse(source)

    def parse_redacted(self, redacted: ParserInput) -> Document:
        """Parse a redacted copy, recognizing its placeholders."""
        with debug_timer(logger, "Parsing (redacted)"):
            return MarkdownToAstConverter(self._redacted_options).parse(redacted)

    def source_to_redacted(self, source: ParserInput) -> str:
        """Redact a markdown document.

        Parameters
        ----------
        source : str, Path, bytes, or file-like
            Markdown source. A ``str`` is always treated as markdown content.

        Returns
        -------
        str
            The document with each link and image replaced by ``[i]``

        """
        document = self.redact_document(source)
        with debug_timer(logger, "Rendering (placeholders)"):
            return RedactionRenderer("placeholder", options=self.renderer_options).render_to_string(document)

    def restore_document(self, source: ParserInput, redacted: ParserInput) -> Document:
        """Reconstruct a document tree from a source and its redacted copy.

        Raises
        ------
        RedactionCountMismatchError
            If the redacted copy has a different number of placeholders
        UnknownRedactionTypeError
            If a redaction has no restoration method

        """
        redactions = collect_redactions(self.redact_document(source))
        redacted_document = self.parse_redacted(redacted)
        return PlaceholderRestorer(redactions, self._registry).restore(redacted_document)

    def source_and_redacted_to_markdown(self, source: ParserInput, redacted: ParserInput) -> str:
        """Reconstruct markdown from a source and its (edited) redacted copy.

        The result has the structure and text of the redacted copy, with each
        placeholder replaced by the link or image it stands for.

        Parameters
        ----------
        source : str, Path, bytes, or file-like
            The original markdown
        redacted : str, Path, bytes, or file-like
            A redacted copy of ``source``, possibly edited

        Returns
        -------
        str
            Reconstructed markdown

        Raises
        ------
        RedactionCountMismatchError
            If the redacted copy has a different number of placeholders
        UnknownRedactionTypeError
            If a redaction has no restoration method

        """
        redactions = collect_redactions(self.redact_document(source))
        logger.debug("Source document has %d redaction(s)", len(redactions))
        redacted_document = self.parse_redacted(redacted)

        renderer = RedactionRenderer(
            "restore", redactions=redactions, registry=self._registry, options=self.renderer_options
        )
        with debug_timer(logger, "Rendering (restore)"):
            return renderer.render_to_string(redacted_document)


def source_to_redacted(source: ParserInput) -> str:
    """Redact a markdown document with a default transformer.

    Examples
    --------
        >>> source_to_redacted("See [a link](http://x.com) here")
        'See [0] here'

    """
    return RedactionTransformer().source_to_redacted(source)


def source_and_redacted_to_markdown(source: ParserInput, redacted: ParserInput) -> str:
    """Reconstruct markdown from a source and its redacted copy with a default transformer."""
    return RedactionTransformer().source_and_redacted_to_markdown(source, redacted)
