"""Utility functions for the note graph builder."""
import re

_WHITESPACE_RUN = re.compile(r"\s+")


def slugify_type(text: str) -> str:
    """Turn a tag or folder name into a category label.

    Lower-cases the text and replaces each run of whitespace with a single
    hyphen. Other characters are kept as they are.

    Examples:
        "Second Brain" -> "second-brain"
        "Dev  Ops"     -> "dev-ops"
        "C++"          -> "c++"
    """
    return _WHITESPACE_RUN.sub("-", text.lower())
