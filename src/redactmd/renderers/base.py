#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class for renderers that turn the
redactmd AST back into text, and the mixin that lets visitor-based renderers
capture the output of inline children.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import TextIOBase
from pathlib import Path
from typing import IO, Union

from redactmd.ast import Document
from redactmd.ast.nodes import Node
from redactmd.exceptions import FileError, InvalidOptionsError
from redactmd.options.base import BaseRendererOptions

RenderOutput = Union[str, Path, IO[bytes], IO[str]]


class BaseRenderer(ABC):
    """Abstract base class for AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string.

        Parameters
        ----------
        doc : Document
            AST Document node to render

        Returns
        -------
        str
            Rendered document

        """
        ...

    def render(self, doc: Document, output: RenderOutput) -> None:
        """Render the AST and write it to a path or stream.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, IO[bytes], or IO[str]
            Output destination (file path or file-like object)

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: RenderOutput) -> None:
        """Write text to a file path or to a text or binary stream.

        Paths are written as UTF-8. Binary streams receive UTF-8 bytes.

        Raises
        ------
        FileError
            If a path cannot be written

        """
        if isinstance(output, (str, Path)):
            path = Path(output)
            try:
                path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise FileError(f"Could not write {path}: {e}", file_path=str(path), original_error=e) from e
            return

        if isinstance(output, TextIOBase) or "b" not in getattr(output, "mode", "b"):
            output.write(text)  # type: ignore[arg-type]
        else:
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]


class InlineContentMixin:
    """Mixin providing inline content rendering for text-based renderers.

    The implementing class must have an ``_output`` list that its visit
    methods append to.
    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

        Output is captured into a temporary buffer, so nested inline
        elements (emphasis inside a link) can be wrapped by their parent.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content as a string

        """
        saved_output = self._output
        self._output = []

        for node in content:
            node.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        return result
