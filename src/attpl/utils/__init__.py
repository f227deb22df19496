"""Utility helpers for attpl."""

from attpl.utils.html import html_escape, strip_comments, to_text

__all__ = ["html_escape", "strip_comments", "to_text"]
