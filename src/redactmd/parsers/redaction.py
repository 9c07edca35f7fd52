#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/parsers/redaction.py
"""Tokenizer extensions for redacting links and recognizing placeholders.

Two mistune extension points are used:

- ``RedactingInlineParser`` is an inline parser whose ``parse_link`` defers to
  mistune's own link/image matcher and then wraps the produced token into a
  ``redaction`` token. The stock ``link`` rule stays the only matcher for
  link syntax, so redaction mode never changes what counts as a link.
- ``placeholder_plugin`` adds an inline rule, ahead of ``link``, that turns
  ``[N]`` and ``[text][N]`` into ``redaction_placeholder`` tokens when a
  redacted copy is parsed.

Token shapes produced here::

    {"type": "redaction",
     "attrs": {"redaction_type": "redactedlink", "start": 4, "end": 28},
     "children": [<original link or image token>]}

    {"type": "redaction_placeholder", "raw": "[0]",
     "attrs": {"index": "0", "content": None, "start": 4, "end": 7}}

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Match, Optional

from mistune import InlineParser
from mistune.core import InlineState

from redactmd.ast.nodes import RedactionType
from redactmd.constants import PLACEHOLDER_PATTERN, PLACEHOLDER_TOKEN_TYPE, REDACTION_TOKEN_TYPE

if TYPE_CHECKING:
    from mistune import Markdown

logger = logging.getLogger(__name__)

_REDACTABLE_TOKEN_TYPES = ("link", "image")


class RedactingInlineParser(InlineParser):
    """Inline parser that wraps every outermost link and image into a redaction.

    Links and images found inside the text of an already matched link or
    image are produced while ``state.in_link`` or ``state.in_image`` is set
    and are left untouched, so a single span is never redacted twice.
    Autolinks come from a separate rule and are not redacted.

    Examples
    --------
    >>> import mistune
    >>> md = mistune.Markdown(inline=RedactingInlineParser())
    >>> tokens, _ = md.parse("See [a link](http://x.com) here")
    >>> tokens[0]["children"][1]["type"]
    'redaction'

    """

    def parse_link(self, m: Match[str], state: InlineState) -> Optional[int]:
        """Match link syntax with the stock rule and wrap a successful match."""
        token_count = len(state.tokens)
        end_pos = super().parse_link(m, state)
        if not end_pos or state.in_link or state.in_image:
            return end_pos

        # Anything other than exactly one new link/image token means the stock
        # matcher fell back to literal text or a precedence rule (codespan,
        # autolink, inline html).
        if len(state.tokens) != token_count + 1:
            return end_pos
        token = state.tokens[-1]
        if token["type"] not in _REDACTABLE_TOKEN_TYPES:
            return end_pos

        state.tokens[-1] = {
            "type": REDACTION_TOKEN_TYPE,
            "attrs": {
                "redaction_type": RedactionType.for_node_type(token["type"]),
                "start": m.start(),
                "end": end_pos,
            },
            "children": [token],
        }
        return end_pos


def create_inline_parser(redact: bool = False) -> InlineParser:
    """Select the inline parser strategy for a parse.

    Parameters
    ----------
    redact : bool, default False
        Return a RedactingInlineParser instead of the stock InlineParser

    Returns
    -------
    InlineParser
        A fresh inline parser instance

    """
    if redact:
        return RedactingInlineParser()
    return InlineParser()


def parse_redaction_placeholder(inline: InlineParser, m: Match[str], state: InlineState) -> Optional[int]:
    """Turn a ``[N]`` or ``[text][N]`` match into a placeholder token.

    Placeholders inside the text of a link or image are not recognized;
    returning None lets the parser treat the bracket as literal text.
    """
    if state.in_link or state.in_image:
        return None

    state.append_token(
        {
            "type": PLACEHOLDER_TOKEN_TYPE,
            "raw": m.group(0),
            "attrs": {
                "index": m.group("placeholder_index"),
                "content": m.group("placeholder_text"),
                "start": m.start(),
                "end": m.end(),
            },
        }
    )
    return m.end()


def placeholder_plugin(md: "Markdown") -> None:
    """Mistune plugin recognizing redaction placeholders.

    The rule is registered before ``link`` so ``[text][0]`` is read as a
    placeholder rather than a reference link to a label named ``0``.

    Parameters
    ----------
    md : mistune.Markdown
        Markdown instance to extend

    """
    md.inline.register(PLACEHOLDER_TOKEN_TYPE, PLACEHOLDER_PATTERN, parse_redaction_placeholder, before="link")
