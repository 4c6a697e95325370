"""Markdown renderer used between the pre-rewrite and post-restore passes."""

from __future__ import annotations

from collections.abc import Callable

from markdown_it import MarkdownIt

Renderer = Callable[[str], str]


def create_markdown_parser() -> MarkdownIt:
    """CommonMark parser with GFM tables enabled."""
    md = MarkdownIt("commonmark")
    md.enable("table")
    md.enable("strikethrough")
    return md


def default_renderer() -> Renderer:
    """Return a callable rendering Markdown text to HTML."""
    return create_markdown_parser().render
