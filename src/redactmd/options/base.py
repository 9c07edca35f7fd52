#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/options/base.py
"""Base classes for parser and renderer options.

Options are immutable: a parser or renderer receives one instance and reads
it for its whole lifetime. Use ``create_updated`` to derive a variant.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from redactmd.constants import DEFAULT_INCLUDE_METADATA_FRONTMATTER


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Parameters
    ----------
    parse_frontmatter : bool, default True
        Whether a leading YAML frontmatter block is read into
        ``Document.metadata`` instead of being parsed as markdown.

    """

    parse_frontmatter: bool = field(
        default=True,
        metadata={
            "help": "Read a leading YAML frontmatter block into document metadata",
            "cli_name": "no-parse-frontmatter",
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Hook for subclass validation."""
        pass


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Parameters
    ----------
    metadata_frontmatter : bool, default True
        Whether document metadata is written back out as YAML frontmatter.

    """

    metadata_frontmatter: bool = field(
        default=DEFAULT_INCLUDE_METADATA_FRONTMATTER,
        metadata={"help": "Render document metadata as YAML frontmatter", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Hook for subclass validation."""
        pass
