"""Snapshot formatting: markup pretty-printing and line diffs."""

from .html_formatter import HTMLToken, HTMLTokenType, format_html, tokenize_html
from .snapshot_diff import snapshot_diff

__all__ = [
    "HTMLToken",
    "HTMLTokenType",
    "format_html",
    "snapshot_diff",
    "tokenize_html",
]
