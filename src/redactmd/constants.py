#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for redactmd.

This module centralizes hardcoded values and default configuration
constants used across the library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Markdown Formatting - Basic markdown output settings
3. Redaction - Placeholder syntax and redaction tags
4. Configuration - Config file names and environment variables
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]
RedactionRenderMode = Literal["placeholder", "restore"]

# =============================================================================
# Markdown Formatting
# =============================================================================

DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_BULLET_SYMBOLS = "*-+"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_COLLAPSE_BLANK_LINES = True
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_INCLUDE_METADATA_FRONTMATTER = True

# =============================================================================
# Redaction
# =============================================================================

# Prefix joined with the original node type ("link", "image") to form the tag
REDACTION_TYPE_PREFIX = "redacted"

# Mistune token type names introduced by the redaction tokenizer
REDACTION_TOKEN_TYPE = "redaction"
PLACEHOLDER_TOKEN_TYPE = "redaction_placeholder"

# Token kept for link reference definitions, which mistune otherwise only records in its env
LINK_DEFINITION_TOKEN_TYPE = "link_reference_definition"

# "[3]" or "[replacement text][3]"; the text part may not contain brackets or newlines,
# and may not be all digits so that adjacent placeholders such as "[0][1]" stay two.
# A trailing "(" means inline link syntax, which is left to the link rule.
PLACEHOLDER_PATTERN = (
    r"\[(?:(?P<placeholder_text>(?![0-9]*\])[^\[\]\n]*)\]\[)?(?P<placeholder_index>[0-9]+)\](?!\()"
)

# Canonical decimal form of an index: no leading zeros except "0" itself
PLACEHOLDER_INDEX_PATTERN = r"0|[1-9][0-9]*"

# =============================================================================
# Configuration
# =============================================================================

CONFIG_ENV_VAR = "REDACTMD_CONFIG"
LOG_LEVEL_ENV_VAR = "REDACTMD_LOG_LEVEL"
CONFIG_FILENAMES = [".redactmd.toml", ".redactmd.yaml", ".redactmd.yml", ".redactmd.json"]
DEFAULT_LOG_LEVEL = "WARNING"
