"""Formatter-driven reformatting that patches documents with minimal line edits."""

__all__ = [
    "buffer",
    "diff",
    "edits",
    "formatting",
    "reformat",
    "runtime",
]

__version__ = "0.1.0"
