#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/utils/__init__.py
"""Small helpers shared by redactmd modules."""

from redactmd.utils.decorators import debug_timer

__all__ = ["debug_timer"]
