"""Utility functions and helpers."""

from .concurrency import gather_all
from .diff_position import commentable_lines, parse_patch, resolve_position
from .filters import is_stylesheet, stylesheet_kind
from .logging import setup_observability

__all__ = [
    "commentable_lines",
    "gather_all",
    "is_stylesheet",
    "parse_patch",
    "resolve_position",
    "setup_observability",
    "stylesheet_kind",
]
