"""File filtering utilities for determining which files to check."""

from pathlib import Path
from typing import Literal

StylesheetKind = Literal["stylus", "css"]

# Stylus sources are compiled before checking; plain CSS is checked directly
STYLESHEET_EXTENSIONS: dict[str, StylesheetKind] = {
    ".styl": "stylus",
    ".css": "css",
}


def stylesheet_kind(file_path: str) -> StylesheetKind | None:
    """Classify a file by extension.

    Args:
        file_path: Path to the file

    Returns:
        "stylus" or "css", or None for files that are not checked
    """
    extension = Path(file_path).suffix.lower()
    return STYLESHEET_EXTENSIONS.get(extension)


def is_stylesheet(file_path: str) -> bool:
    """Check if a file is a stylesheet the bot knows how to check.

    Args:
        file_path: Path to the file

    Returns:
        True for Stylus and CSS files
    """
    return stylesheet_kind(file_path) is not None
