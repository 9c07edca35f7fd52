#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for placeholder pairing and tree restoration."""

import logging

import pytest

from redactmd.ast import (
    Document,
    Image,
    Link,
    Paragraph,
    Redaction,
    RedactionPlaceholder,
    RedactionType,
    Text,
    collect_redactions,
)
from redactmd.exceptions import (
    MalformedPlaceholderError,
    RedactionCountMismatchError,
    UnknownRedactionTypeError,
)
from redactmd.parsers import markdown_to_ast
from redactmd.restoration import PlaceholderRestorer, pair_placeholders, validate_placeholder


def _placeholder(index_text: str, content=None) -> RedactionPlaceholder:
    raw = f"[{content}][{index_text}]" if content else f"[{index_text}]"
    return RedactionPlaceholder(
        index=int(index_text), raw=raw, content=content, metadata={"index_text": index_text}
    )


def _redactions(count: int) -> list:
    return [
        Redaction(
            redaction_type=RedactionType.LINK.value,
            original=Link(url=f"http://x.com/{i}", content=[Text(content=f"link {i}")]),
        )
        for i in range(count)
    ]


class TestValidatePlaceholder:
    """Test placeholder index validation."""

    def test_valid(self) -> None:
        """Test that canonical in-range indices pass."""
        validate_placeholder(_placeholder("0"), 1)
        validate_placeholder(_placeholder("10"), 11)

    @pytest.mark.parametrize("index_text", ["00", "01", "007"])
    def test_leading_zeros(self, index_text: str) -> None:
        """Test that leading zeros are malformed."""
        with pytest.raises(MalformedPlaceholderError) as exc_info:
            validate_placeholder(_placeholder(index_text), 10)
        assert exc_info.value.raw == f"[{index_text}]"

    def test_out_of_range(self) -> None:
        """Test that an index past the last redaction is malformed."""
        with pytest.raises(MalformedPlaceholderError):
            validate_placeholder(_placeholder("2"), 2)


class TestPairPlaceholders:
    """Test positional pairing."""

    def test_positional_pairing(self, registry) -> None:
        """Test that pairing follows document order, not the written index."""
        placeholders = [_placeholder("1"), _placeholder("0")]
        redactions = _redactions(2)

        pairing = pair_placeholders(placeholders, redactions, registry)

        assert pairing.redaction_for(placeholders[0]) is redactions[0]
        assert pairing.redaction_for(placeholders[1]) is redactions[1]
        assert pairing.degraded == []

    def test_malformed_are_degraded(self, registry, caplog) -> None:
        """Test that malformed placeholders are excluded and logged at DEBUG."""
        good = _placeholder("0")
        leading_zero = _placeholder("00")
        out_of_range = _placeholder("5")

        with caplog.at_level(logging.DEBUG, logger="redactmd.restoration"):
            pairing = pair_placeholders([leading_zero, good, out_of_range], _redactions(1), registry)

        assert pairing.degraded == [leading_zero, out_of_range]
        assert pairing.redaction_for(leading_zero) is None
        assert pairing.redaction_for(good) is not None
        assert "literal text" in caplog.text

    def test_identical_placeholders_are_distinct(self, registry) -> None:
        """Test that equal-looking placeholders pair with different redactions."""
        first, second = _placeholder("0"), _placeholder("0")
        redactions = _redactions(2)

        pairing = pair_placeholders([first, second], redactions, registry)

        assert pairing.redaction_for(first) is redactions[0]
        assert pairing.redaction_for(second) is redactions[1]

    @pytest.mark.parametrize("placeholder_count,redaction_count", [(1, 2), (3, 2), (0, 1)])
    def test_count_mismatch(self, registry, placeholder_count: int, redaction_count: int) -> None:
        """Test that differing counts raise."""
        placeholders = [_placeholder("0") for _ in range(placeholder_count)]

        with pytest.raises(RedactionCountMismatchError) as exc_info:
            pair_placeholders(placeholders, _redactions(redaction_count), registry)

        assert exc_info.value.expected == redaction_count
        assert exc_info.value.found == placeholder_count

    def test_unknown_type(self, registry) -> None:
        """Test that an unregistered tag fails before anything is restored."""
        redaction = Redaction(redaction_type="redactedvideo", original=Link(url="v.mp4"))

        with pytest.raises(UnknownRedactionTypeError):
            pair_placeholders([_placeholder("0")], [redaction], registry)


class TestPlaceholderRestorer:
    """Test restoring a redacted tree."""

    def test_restore_tree(self, registry, redact_options, placeholder_options) -> None:
        """Test that placeholders become links and edits are kept."""
        source = markdown_to_ast("See [a link](http://x.com) and ![pic](p.png)", redact_options)
        redacted = markdown_to_ast("Now see [0] or [a photo][1]!", placeholder_options)

        restored = PlaceholderRestorer(collect_redactions(source), registry).restore(redacted)
        content = restored.children[0].content

        assert content[0] == Text(content="Now see ")
        assert isinstance(content[1], Link)
        assert content[1].url == "http://x.com"
        assert content[1].content == [Text(content="a link")]
        assert isinstance(content[3], Image)
        assert content[3].alt_text == "a photo"
        assert content[4] == Text(content="!")

    def test_degraded_become_text(self, registry) -> None:
        """Test that malformed placeholders are restored as their raw text."""
        doc = Document(children=[Paragraph(content=[_placeholder("0"), _placeholder("01")])])

        restored = PlaceholderRestorer(_redactions(1), registry).restore(doc)

        assert isinstance(restored.children[0].content[0], Link)
        assert restored.children[0].content[1] == Text(content="[01]")

    def test_input_tree_unchanged(self, registry) -> None:
        """Test that the redacted tree is not modified."""
        doc = Document(children=[Paragraph(content=[_placeholder("0")])])

        PlaceholderRestorer(_redactions(1), registry).restore(doc)

        assert isinstance(doc.children[0].content[0], RedactionPlaceholder)
