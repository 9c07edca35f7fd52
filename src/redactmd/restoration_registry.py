#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/restoration_registry.py
"""Registry of restoration methods keyed by redaction tag.

A restoration method rebuilds the original node of a Redaction, optionally
with replacement text taken from the edited redacted copy. Each
RedactionTransformer owns its own registry, so registering a method in one
transformer never affects another.

Examples
--------
Register a custom restoration method:

    >>> from redactmd.restoration_registry import create_default_registry
    >>> registry = create_default_registry()
    >>> def restore_as_text(emit, node, content):
    ...     return emit(Text(content=content or node.url))
    >>> registry.register("redactedfootnote", restore_as_text)

Third-party packages may also expose methods through the
``redactmd.restorations`` entry point group; each entry point must load to a
callable with the RestorationMethod signature and is registered under the
entry point name by ``discover_plugins``.

"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Callable, Optional

from redactmd.ast.nodes import Image, Link, Node, Redaction, RedactionType, Text
from redactmd.exceptions import DuplicateRedactionTypeError, RegistrationError, UnknownRedactionTypeError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "redactmd.restorations"

#: Callback that places a restored node into the output and returns it.
AddNodeFn = Callable[[Node], Node]

#: ``method(emit, redaction, content) -> restored node``
RestorationMethod = Callable[[AddNodeFn, Redaction, Optional[str]], Node]


class RestorationRegistry:
    """Mapping of redaction tags to restoration methods.

    The registry is written during setup and only read while documents are
    transformed.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._methods: dict[str, RestorationMethod] = {}

    def register(self, redaction_type: str, method: RestorationMethod, *, overwrite: bool = False) -> None:
        """Register a restoration method for a redaction tag.

        Parameters
        ----------
        redaction_type : str
            Tag of the redactions this method restores (e.g. ``"redactedlink"``)
        method : RestorationMethod
            Callable ``(emit, redaction, content) -> Node``
        overwrite : bool, default False
            Replace an existing method for the same tag

        Raises
        ------
        DuplicateRedactionTypeError
            If the tag is already registered and ``overwrite`` is False
        RegistrationError
            If the tag is empty or the method is not callable

        """
        key = str(redaction_type)
        if not key:
            raise RegistrationError("Redaction type must be a non-empty string")
        if not callable(method):
            raise RegistrationError(f"Restoration method for '{key}' is not callable")

        if key in self._methods:
            if not overwrite:
                raise DuplicateRedactionTypeError(key)
            logger.warning("Restoration method for '%s' already registered, overwriting", key)

        self._methods[key] = method
        logger.debug("Registered restoration method: %s", key)

    def unregister(self, redaction_type: str) -> bool:
        """Unregister a restoration method.

        Returns
        -------
        bool
            True if a method was removed, False if the tag was not registered

        """
        key = str(redaction_type)
        if key in self._methods:
            del self._methods[key]
            logger.debug("Unregistered restoration method: %s", key)
            return True
        return False

    def resolve(self, redaction_type: str) -> RestorationMethod:
        """Look up the restoration method for a tag.

        Raises
        ------
        UnknownRedactionTypeError
            If no method is registered for the tag

        """
        key = str(redaction_type)
        try:
            return self._methods[key]
        except KeyError:
            raise UnknownRedactionTypeError(key, available_types=self.list_types()) from None

    def has_type(self, redaction_type: str) -> bool:
        """Check whether a tag has a registered method."""
        return str(redaction_type) in self._methods

    def list_types(self) -> list[str]:
        """List registered tags, sorted alphabetically."""
        return sorted(self._methods)

    def discover_plugins(self) -> int:
        """Register restoration methods published through entry points.

        Entry points whose name is already registered are skipped, so
        built-in methods win over plugins.

        Returns
        -------
        int
            Number of methods registered

        """
        discovered_count = 0
        for ep in importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP):
            if ep.name in self._methods:
                logger.debug("Skipping restoration entry point '%s': already registered", ep.name)
                continue
            try:
                method = ep.load()
            except Exception as e:
                logger.warning("Failed to load restoration entry point '%s': %s", ep.name, e)
                continue
            if not callable(method):
                logger.warning("Restoration entry point '%s' is not callable, skipping", ep.name)
                continue
            self.register(ep.name, method)
            discovered_count += 1

        logger.debug("Discovered %d restoration method(s) from entry points", discovered_count)
        return discovered_count

    def __contains__(self, redaction_type: object) -> bool:
        return isinstance(redaction_type, str) and redaction_type in self._methods

    def __len__(self) -> int:
        return len(self._methods)


def restore_link(emit: AddNodeFn, node: Redaction, content: Optional[str]) -> Node:
    """Rebuild a redacted link.

    The destination and title come from the redaction. The link text is
    replaced by ``content`` when the redacted copy supplied one and is the
    original link text otherwise.
    """
    original = node.original
    if content is None:
        children: list[Node] = list(original.content) if isinstance(original, Link) else [Text(content=original.alt_text)]
    else:
        children = [Text(content=content)]

    return emit(Link(url=original.url, content=children, title=original.title, metadata=dict(original.metadata)))


def restore_image(emit: AddNodeFn, node: Redaction, content: Optional[str]) -> Node:
    """Rebuild a redacted image, using ``content`` as alt text when given."""
    original = node.original
    if content is None:
        alt_text = original.alt_text if isinstance(original, Image) else ""
    else:
        alt_text = content

    return emit(Image(url=original.url, alt_text=alt_text, title=original.title, metadata=dict(original.metadata)))


def create_default_registry(discover_plugins: bool = False) -> RestorationRegistry:
    """Create a registry holding the built-in link and image methods.

    Parameters
    ----------
    discover_plugins : bool, default False
        Also register methods from the ``redactmd.restorations`` entry point
        group

    Returns
    -------
    RestorationRegistry
        A new, independent registry

    """
    registry = RestorationRegistry()
    registry.register(RedactionType.LINK.value, restore_link)
    registry.register(RedactionType.IMAGE.value, restore_image)
    if discover_plugins:
        registry.discover_plugins()
    return registry
