"""redactmd - Redact link and image destinations from markdown documents.

redactmd replaces every link and image of a markdown document with a numbered
placeholder (``[0]``, ``[1]``, ...). The redacted copy can be edited on its
own and later recombined with the source: each placeholder is restored to the
link or image it stands for while the edited text around it is kept.

Parsing is done with mistune; the redaction hooks into its inline link rule
and the placeholder syntax is a mistune plugin. Rendering back to markdown is
done by a visitor over redactmd's own AST.

Examples
--------
Redact and restore with the default transformer:

    >>> from redactmd import source_to_redacted, source_and_redacted_to_markdown
    >>> source = "See [a link](http://x.com) here"
    >>> source_to_redacted(source)
    'See [0] here'
    >>> source_and_redacted_to_markdown(source, "Now see [0] there")
    'Now see [a link](http://x.com) there'

Replace the link text while editing by writing ``[new text][0]``:

    >>> source_and_redacted_to_markdown(source, "See [the docs][0] here")
    'See [the docs](http://x.com) here'

Register a restoration method for a custom redaction tag:

    >>> transformer = RedactionTransformer()
    >>> transformer.register("redactedfootnote", restore_footnote)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from redactmd.api import RedactionTransformer, source_and_redacted_to_markdown, source_to_redacted
from redactmd.ast import Document, Redaction, RedactionPlaceholder, RedactionType
from redactmd.exceptions import (
    DependencyError,
    DuplicateRedactionTypeError,
    FileError,
    InvalidOptionsError,
    MalformedPlaceholderError,
    ParsingError,
    RedactionCountMismatchError,
    RedactMdError,
    RegistrationError,
    RenderingError,
    RestorationError,
    UnknownRedactionTypeError,
    ValidationError,
)
from redactmd.options import MarkdownParserOptions, MarkdownRendererOptions
from redactmd.parsers import markdown_to_ast
from redactmd.renderers import MarkdownRenderer, RedactionRenderer
from redactmd.restoration_registry import (
    RestorationMethod,
    RestorationRegistry,
    create_default_registry,
    restore_image,
    restore_link,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Facade
    "RedactionTransformer",
    "source_to_redacted",
    "source_and_redacted_to_markdown",
    # Building blocks
    "markdown_to_ast",
    "MarkdownRenderer",
    "RedactionRenderer",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "Document",
    "Redaction",
    "RedactionPlaceholder",
    "RedactionType",
    # Restoration registry
    "RestorationRegistry",
    "RestorationMethod",
    "create_default_registry",
    "restore_link",
    "restore_image",
    # Exceptions
    "RedactMdError",
    "ValidationError",
    "InvalidOptionsError",
    "FileError",
    "DependencyError",
    "ParsingError",
    "RenderingError",
    "RestorationError",
    "UnknownRedactionTypeError",
    "RedactionCountMismatchError",
    "MalformedPlaceholderError",
    "RegistrationError",
    "DuplicateRedactionTypeError",
]
