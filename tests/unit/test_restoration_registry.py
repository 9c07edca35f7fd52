#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for the restoration registry and built-in restoration methods."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from redactmd.ast import Emphasis, Image, Link, Redaction, RedactionType, Text
from redactmd.exceptions import (
    DuplicateRedactionTypeError,
    RegistrationError,
    UnknownRedactionTypeError,
)
from redactmd.restoration_registry import (
    ENTRY_POINT_GROUP,
    RestorationRegistry,
    create_default_registry,
    restore_image,
    restore_link,
)


def _identity(node):
    return node


def _link_redaction() -> Redaction:
    link = Link(
        url="http://x.com",
        content=[Text(content="a "), Emphasis(content=[Text(content="link")])],
        title="Example",
    )
    return Redaction(redaction_type=RedactionType.LINK.value, original=link)


def _image_redaction() -> Redaction:
    image = Image(url="logo.png", alt_text="logo", title="Logo")
    return Redaction(redaction_type=RedactionType.IMAGE.value, original=image)


class TestRegistry:
    """Test registration and lookup."""

    def test_register_and_resolve(self) -> None:
        """Test that a registered method is returned by resolve."""
        registry = RestorationRegistry()
        registry.register("redactedfootnote", restore_link)

        assert registry.resolve("redactedfootnote") is restore_link
        assert registry.has_type("redactedfootnote")
        assert "redactedfootnote" in registry
        assert len(registry) == 1

    def test_resolve_unknown(self) -> None:
        """Test that an unknown tag raises with the registered tags listed."""
        registry = create_default_registry()

        with pytest.raises(UnknownRedactionTypeError) as exc_info:
            registry.resolve("redactedtable")

        assert exc_info.value.redaction_type == "redactedtable"
        assert exc_info.value.available_types == ["redactedimage", "redactedlink"]
        assert "redactedlink" in str(exc_info.value)

    def test_duplicate_registration(self) -> None:
        """Test that registering a tag twice is rejected."""
        registry = create_default_registry()

        with pytest.raises(DuplicateRedactionTypeError):
            registry.register(RedactionType.LINK.value, restore_image)

        assert registry.resolve(RedactionType.LINK.value) is restore_link

    def test_overwrite_logs_warning(self, caplog) -> None:
        """Test that overwrite=True replaces the method and warns."""
        registry = create_default_registry()

        with caplog.at_level(logging.WARNING, logger="redactmd.restoration_registry"):
            registry.register(RedactionType.LINK.value, restore_image, overwrite=True)

        assert registry.resolve(RedactionType.LINK.value) is restore_image
        assert "overwriting" in caplog.text

    def test_invalid_registrations(self) -> None:
        """Test empty tags and non-callable methods."""
        registry = RestorationRegistry()

        with pytest.raises(RegistrationError):
            registry.register("", restore_link)
        with pytest.raises(RegistrationError):
            registry.register("redactedthing", "not callable")  # type: ignore[arg-type]

    def test_unregister(self) -> None:
        """Test removing a method."""
        registry = create_default_registry()

        assert registry.unregister(RedactionType.IMAGE.value) is True
        assert registry.unregister(RedactionType.IMAGE.value) is False
        assert registry.list_types() == ["redactedlink"]

    def test_registries_are_independent(self) -> None:
        """Test that default registries do not share state."""
        first = create_default_registry()
        second = create_default_registry()
        first.register("redactedextra", restore_link)

        assert "redactedextra" in first
        assert "redactedextra" not in second


class TestPluginDiscovery:
    """Test entry point discovery."""

    def _entry_point(self, name, loaded=None, error=None):
        ep = MagicMock()
        ep.name = name
        if error is not None:
            ep.load.side_effect = error
        else:
            ep.load.return_value = loaded
        return ep

    def test_discovers_callables(self) -> None:
        """Test that entry points are registered under their names."""
        eps = MagicMock()
        eps.select.return_value = [self._entry_point("redactedvideo", restore_link)]

        with patch("redactmd.restoration_registry.importlib.metadata.entry_points", return_value=eps):
            registry = create_default_registry(discover_plugins=True)

        eps.select.assert_called_once_with(group=ENTRY_POINT_GROUP)
        assert registry.resolve("redactedvideo") is restore_link

    def test_builtins_win_and_failures_are_skipped(self, caplog) -> None:
        """Test skipping of taken names, load failures and non-callables."""
        eps = MagicMock()
        eps.select.return_value = [
            self._entry_point(RedactionType.LINK.value, restore_image),
            self._entry_point("redactedbroken", error=ImportError("missing module")),
            self._entry_point("redactedvalue", loaded=42),
        ]
        registry = create_default_registry()

        with patch("redactmd.restoration_registry.importlib.metadata.entry_points", return_value=eps):
            with caplog.at_level(logging.WARNING, logger="redactmd.restoration_registry"):
                count = registry.discover_plugins()

        assert count == 0
        assert registry.resolve(RedactionType.LINK.value) is restore_link
        assert "redactedbroken" not in registry
        assert "redactedvalue" not in registry
        assert "Failed to load" in caplog.text


class TestBuiltinMethods:
    """Test the link and image restoration methods."""

    def test_restore_link_keeps_original_text(self) -> None:
        """Test that None content keeps the original link text."""
        redaction = _link_redaction()

        restored = restore_link(_identity, redaction, None)

        assert isinstance(restored, Link)
        assert restored.url == "http://x.com"
        assert restored.title == "Example"
        assert restored.content == redaction.original.content
        assert restored is not redaction.original

    def test_restore_link_with_replacement_text(self) -> None:
        """Test that content replaces the link text."""
        restored = restore_link(_identity, _link_redaction(), "new text")

        assert restored.content == [Text(content="new text")]
        assert restored.url == "http://x.com"

    def test_restore_image(self) -> None:
        """Test image restoration with and without new alt text."""
        redaction = _image_redaction()

        assert restore_image(_identity, redaction, None).alt_text == "logo"
        restored = restore_image(_identity, redaction, "company logo")
        assert isinstance(restored, Image)
        assert restored.alt_text == "company logo"
        assert (restored.url, restored.title) == ("logo.png", "Logo")

    def test_methods_place_node_through_emit(self) -> None:
        """Test that the restored node is handed to emit."""
        emitted = []

        def emit(node):
            emitted.append(node)
            return node

        result = restore_link(emit, _link_redaction(), None)

        assert emitted == [result]
