#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for the redaction renderer in placeholder and restore modes."""

import pytest

from redactmd.ast import (
    Code,
    Document,
    Emphasis,
    Link,
    Paragraph,
    Redaction,
    RedactionPlaceholder,
    RedactionType,
    Text,
    collect_redactions,
)
from redactmd.exceptions import RedactionCountMismatchError, UnknownRedactionTypeError, ValidationError
from redactmd.options import MarkdownParserOptions
from redactmd.parsers import markdown_to_ast
from redactmd.renderers import MarkdownRenderer, RedactionRenderer
from redactmd.restoration_registry import restore_link


def _redact(source: str) -> str:
    return RedactionRenderer().render_to_string(markdown_to_ast(source, MarkdownParserOptions(redact=True)))


def _restore(source: str, redacted: str, registry) -> str:
    redactions = collect_redactions(markdown_to_ast(source, MarkdownParserOptions(redact=True)))
    document = markdown_to_ast(redacted, MarkdownParserOptions(recognize_placeholders=True))
    return RedactionRenderer("restore", redactions, registry).render_to_string(document)


class TestPlaceholderMode:
    """Test writing redacted copies."""

    def test_counter_in_document_order(self) -> None:
        """Test that placeholders count from zero across blocks."""
        source = "See [a link](http://x.com) and ![pic](p.png)\n\n- [b](http://y.com)"

        assert _redact(source) == "See [0] and [1]\n\n* [2]"

    def test_nothing_of_the_link_is_written(self) -> None:
        """Test that neither destination, title nor text leaks."""
        redacted = _redact('Call [secret text](http://secret.example "secret title") ![secret alt](secret.png)')

        assert "secret" not in redacted
        assert redacted == "Call [0] [1]"

    def test_counter_resets_between_renders(self) -> None:
        """Test that one renderer can render several documents."""
        renderer = RedactionRenderer()
        doc = markdown_to_ast("[a](u) [b](v)", MarkdownParserOptions(redact=True))

        assert renderer.render_to_string(doc) == "[0] [1]"
        assert renderer.render_to_string(doc) == "[0] [1]"

    def test_literal_brackets_are_escaped(self) -> None:
        """Test that source text resembling a placeholder cannot become one."""
        assert _redact("Footnote \\[3\\] and [x](u)") == "Footnote \\[3\\] and [0]"

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("[a](u)(note)", "[0]\\(note)"),
            ("[a](u): label", "[0]\\: label"),
        ],
    )
    def test_marker_followers_are_escaped(self, source: str, expected: str) -> None:
        """Test text after a marker that would otherwise extend it."""
        redacted = _redact(source)

        assert redacted == expected
        reparsed = markdown_to_ast(redacted, MarkdownParserOptions(recognize_placeholders=True))
        inline = reparsed.children[0].content
        assert isinstance(inline[0], RedactionPlaceholder)
        assert isinstance(inline[1], Text)

    def test_parenthesis_later_in_text_is_not_escaped(self) -> None:
        """Test that only text directly after a marker is guarded."""
        assert _redact("[a](u) (note)") == "[0] (note)"

    def test_marker_guard_does_not_leak_out_of_nested_content(self) -> None:
        """Test that a marker written inside one emphasis does not guard text in another.

        Both emphasis runs render into throwaway buffers of the same length,
        so the guard must track the buffer itself rather than its position.
        """
        link = Link(url="http://x.com", content=[Text(content="a")])
        doc = Document(
            children=[
                Paragraph(
                    content=[
                        Emphasis(content=[Text(content="x"), Redaction(redaction_type=RedactionType.LINK, original=link)]),
                        Text(content=" and "),
                        Emphasis(content=[Text(content="y"), Code(content="c"), Text(content="(note)")]),
                    ]
                )
            ]
        )

        redacted = RedactionRenderer().render_to_string(doc)

        assert "[0]" in redacted
        assert "\\(" not in redacted
        assert redacted.endswith("`c`(note)*")

    def test_marker_inside_emphasis_still_guards_its_follower(self) -> None:
        """Test that the guard applies within the buffer the marker went into."""
        assert _redact("*[a](u)(note)*") == "*[0]\\(note)*"


class TestRestoreMode:
    """Test reconstruction from redacted copies."""

    def test_restores_basic_example(self, registry) -> None:
        """Test the basic round trip."""
        assert _restore("See [a link](http://x.com) here", "See [0] here", registry) == (
            "See [a link](http://x.com) here"
        )

    def test_replacement_text(self, registry) -> None:
        """Test that [text][i] replaces link text and alt text."""
        restored = _restore(
            "See [a link](http://x.com \"T\") and ![pic](p.png)",
            "Look at [this page][0] and [a diagram][1]",
            registry,
        )

        assert restored == 'Look at [this page](http://x.com "T") and ![a diagram](p.png)'

    def test_edited_structure_is_kept(self, registry) -> None:
        """Test that the redacted copy decides the document structure."""
        restored = _restore("One [a](http://a.com) two [b](http://b.com)", "# Title\n\n- [0]\n- [1]", registry)

        assert restored == "# Title\n\n* [a](http://a.com)\n* [b](http://b.com)"

    def test_degraded_placeholders_stay_literal(self, registry) -> None:
        """Test that leading zeros and out of range indices are text."""
        restored = _restore("See [a link](http://x.com)", "See [0], [07] and [5]", registry)

        assert restored == "See [a link](http://x.com), \\[07\\] and \\[5\\]"

    def test_count_mismatch_raises_before_output(self, registry) -> None:
        """Test that no restoration method runs when counts differ."""
        calls = []

        def spy(emit, node, content):
            calls.append(node)
            return restore_link(emit, node, content)

        registry.register("redactedlink", spy, overwrite=True)

        with pytest.raises(RedactionCountMismatchError) as exc_info:
            _restore("[a](u) [b](v)", "[0] only", registry)

        assert exc_info.value.expected == 2
        assert exc_info.value.found == 1
        assert calls == []

    def test_unknown_type_raises_before_output(self, registry) -> None:
        """Test that a missing method is reported before anything is restored."""
        calls = []

        def spy(emit, node, content):
            calls.append(node)
            return restore_link(emit, node, content)

        registry.register("redactedlink", spy, overwrite=True)
        registry.unregister("redactedimage")

        with pytest.raises(UnknownRedactionTypeError):
            _restore("[a](u) ![b](v.png)", "[0] [1]", registry)

        assert calls == []

    def test_method_returning_node_without_emit(self, registry) -> None:
        """Test that a returned node is rendered when emit was not called."""
        registry.register("redactedlink", lambda emit, node, content: Text(content="LINK"), overwrite=True)

        assert _restore("See [a](http://x.com) here", "See [0] here", registry) == "See LINK here"

    def test_method_emitting_several_nodes(self, registry) -> None:
        """Test that every emitted node is rendered in order."""

        def two_nodes(emit, node, content):
            emit(Text(content="before "))
            return emit(Text(content=node.original.url))

        registry.register("redactedlink", two_nodes, overwrite=True)

        assert _restore("[a](http://x.com)", "> [0]", registry) == "> before http://x.com"

    def test_placeholder_after_restore_keeps_following_text(self, registry) -> None:
        """Test that restored output does not escape following parentheses."""
        assert _restore("[a](u)", "[0] (x)", registry) == "[a](u) (x)"


class TestConstruction:
    """Test renderer construction."""

    def test_unknown_mode(self) -> None:
        """Test that an unknown mode is rejected."""
        with pytest.raises(ValidationError):
            RedactionRenderer("bogus")  # type: ignore[arg-type]

    def test_restore_requires_redactions(self, registry) -> None:
        """Test that restore mode needs its inputs."""
        with pytest.raises(ValidationError):
            RedactionRenderer("restore", registry=registry)
        with pytest.raises(ValidationError):
            RedactionRenderer("restore", redactions=[])

    def test_is_a_markdown_renderer(self) -> None:
        """Test that the redaction renderer extends the markdown renderer."""
        assert isinstance(RedactionRenderer(), MarkdownRenderer)
