#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/restoration.py
"""Pairing of placeholders with source redactions.

Placeholders found in a redacted copy are matched with the redactions of the
source document by position: the i-th well-formed placeholder belongs to the
i-th redaction. The index written inside a placeholder is only used to tell
real placeholders from text that merely looks like one.

All validation happens in ``pair_placeholders``, before anything is rendered,
so a reconstruction either succeeds completely or raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from redactmd.ast.nodes import Document, Node, Redaction, RedactionPlaceholder, Text
from redactmd.ast.transforms import NodeTransformer, collect_placeholders
from redactmd.constants import PLACEHOLDER_INDEX_PATTERN
from redactmd.exceptions import MalformedPlaceholderError, RedactionCountMismatchError
from redactmd.restoration_registry import RestorationRegistry

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(PLACEHOLDER_INDEX_PATTERN)


@dataclass
class PlaceholderPairing:
    """Result of pairing a redacted copy's placeholders with source redactions.

    Nodes are tracked by identity because AST dataclasses compare by value
    and two placeholders with the same text are still distinct occurrences.

    Parameters
    ----------
    pairs : list of (RedactionPlaceholder, Redaction)
        Well-formed placeholders in document order with their redaction
    degraded : list of RedactionPlaceholder
        Placeholder-shaped text that is kept as literal text

    """

    pairs: list[tuple[RedactionPlaceholder, Redaction]] = field(default_factory=list)
    degraded: list[RedactionPlaceholder] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Index pairs by node identity."""
        self._by_id = {id(placeholder): redaction for placeholder, redaction in self.pairs}

    def redaction_for(self, placeholder: RedactionPlaceholder) -> Optional[Redaction]:
        """Return the redaction paired with a placeholder, or None if it was degraded."""
        return self._by_id.get(id(placeholder))


def validate_placeholder(placeholder: RedactionPlaceholder, redaction_count: int) -> None:
    """Check that a placeholder carries a usable index.

    An index is usable when it is written in canonical decimal form (no
    leading zeros) and refers to an existing redaction.

    Raises
    ------
    MalformedPlaceholderError
        If the index is not usable

    """
    index_text = placeholder.metadata.get("index_text", str(placeholder.index))
    if not _INDEX_RE.fullmatch(index_text):
        raise MalformedPlaceholderError(placeholder.raw, message=f"Placeholder {placeholder.raw!r} has leading zeros")
    if not 0 <= placeholder.index < redaction_count:
        raise MalformedPlaceholderError(
            placeholder.raw,
            message=f"Placeholder {placeholder.raw!r} is out of range for {redaction_count} redaction(s)",
        )


def pair_placeholders(
    placeholders: Sequence[RedactionPlaceholder],
    redactions: Sequence[Redaction],
    registry: RestorationRegistry,
) -> PlaceholderPairing:
    """Pair placeholders with redactions positionally and validate the result.

    Parameters
    ----------
    placeholders : sequence of RedactionPlaceholder
        Placeholders of the redacted copy, in document order
    redactions : sequence of Redaction
        Redactions of the source document, in document order
    registry : RestorationRegistry
        Registry that must know every paired redaction tag

    Returns
    -------
    PlaceholderPairing
        The validated pairing

    Raises
    ------
    RedactionCountMismatchError
        If the number of well-formed placeholders differs from the number of
        redactions
    UnknownRedactionTypeError
        If a redaction tag has no registered restoration method

    """
    valid: list[RedactionPlaceholder] = []
    degraded: list[RedactionPlaceholder] = []
    for placeholder in placeholders:
        try:
            validate_placeholder(placeholder, len(redactions))
        except MalformedPlaceholderError as e:
            logger.debug("Keeping placeholder as literal text: %s", e.message)
            degraded.append(placeholder)
        else:
            valid.append(placeholder)

    if len(valid) != len(redactions):
        raise RedactionCountMismatchError(expected=len(redactions), found=len(valid))

    for redaction in redactions:
        registry.resolve(redaction.redaction_type)

    logger.debug("Paired %d placeholder(s), %d kept as literal text", len(valid), len(degraded))
    return PlaceholderPairing(pairs=list(zip(valid, redactions)), degraded=degraded)


class PlaceholderRestorer(NodeTransformer):
    """Transformer replacing placeholders with restored nodes.

    Produces the reconstructed document as a tree. Degraded placeholders
    become Text nodes holding their raw text.

    Parameters
    ----------
    redactions : sequence of Redaction
        Redactions of the source document, in document order
    registry : RestorationRegistry
        Registry used to resolve restoration methods

    Examples
    --------
    >>> restorer = PlaceholderRestorer(collect_redactions(source_doc), create_default_registry())
    >>> restored_doc = restorer.restore(redacted_doc)

    """

    def __init__(self, redactions: Sequence[Redaction], registry: RestorationRegistry):
        """Initialize the restorer with source redactions and a registry."""
        self.redactions = list(redactions)
        self.registry = registry
        self._pairing: PlaceholderPairing | None = None

    def restore(self, document: Document) -> Document:
        """Validate the pairing for ``document`` and return the restored tree."""
        self._pairing = pair_placeholders(collect_placeholders(document), self.redactions, self.registry)
        try:
            return self.transform(document)  # type: ignore[return-value]
        finally:
            self._pairing = None

    def visit_redaction_placeholder(self, node: RedactionPlaceholder) -> Node:
        """Replace a placeholder by its restored node."""
        redaction = self._pairing.redaction_for(node) if self._pairing else None
        if redaction is None:
            return Text(content=node.raw)

        method = self.registry.resolve(redaction.redaction_type)
        return method(lambda restored: restored, redaction, node.content)
