"""Callout blocks in rendered HTML.

Turns a rendered blockquote that opens with ``[!type]`` into a styled callout:

    > [!note] Optional Title
    > Content here

Foldable callouts use ``<details>``: ``[!note]-`` starts collapsed,
``[!note]+`` starts expanded.
"""

import re

# Opening <blockquote> whose first paragraph starts with [!type]
CALLOUT_PATTERN = re.compile(
    r"<blockquote>\s*"
    r"<p>\[!(?P<type>[\w-]+)\](?P<fold>[+-])?[ \t]*(?P<title>[^\n<]*)(?P<rest>.*?)</p>",
    re.DOTALL,
)

BLOCKQUOTE_TAG_PATTERN = re.compile(r"<(/?)blockquote>")

CALLOUT_ICONS = {
    "note": "📝",
    "info": "ℹ️",
    "tip": "💡",
    "hint": "💡",
    "important": "🔥",
    "warning": "⚠️",
    "caution": "⚠️",
    "danger": "🔴",
    "error": "🔴",
    "bug": "🐛",
    "example": "📋",
    "quote": "💬",
    "cite": "💬",
    "abstract": "📄",
    "summary": "📄",
    "tldr": "📄",
    "todo": "☑️",
    "success": "✅",
    "check": "✅",
    "done": "✅",
    "question": "❓",
    "help": "❓",
    "faq": "❓",
    "failure": "❌",
    "fail": "❌",
    "missing": "❌",
}

DEFAULT_ICON = CALLOUT_ICONS["note"]


def _render_callout(match: re.Match[str], body: str) -> str:
    kind = match.group("type").lower()
    fold = match.group("fold")
    title = match.group("title").strip()

    body_parts = []
    rest = match.group("rest").strip()
    if rest:
        body_parts.append(f"<p>{rest}</p>")
    body = body.strip()
    if body:
        body_parts.append(body)
    content = "\n".join(body_parts)

    icon = CALLOUT_ICONS.get(kind, DEFAULT_ICON)
    css_type = re.sub(r"[^a-z0-9-]", "", kind)
    display_title = title or kind.capitalize()
    heading = f'<span class="callout-icon">{icon}</span> {display_title}'

    if fold:
        open_attr = " open" if fold == "+" else ""
        return (
            f'<details class="callout callout-{css_type}"{open_attr}>\n'
            f'<summary class="callout-title">{heading}</summary>\n'
            f'<div class="callout-content">{content}</div>\n'
            "</details>\n"
        )
    return (
        f'<div class="callout callout-{css_type}">\n'
        f'<div class="callout-title">{heading}</div>\n'
        f'<div class="callout-content">{content}</div>\n'
        "</div>\n"
    )


def _closing_tag(html: str, pos: int) -> re.Match[str] | None:
    """Find the </blockquote> closing the blockquote open at pos."""
    depth = 1
    for tag in BLOCKQUOTE_TAG_PATTERN.finditer(html, pos):
        depth += -1 if tag.group(1) else 1
        if depth == 0:
            return tag
    return None


def render_callouts(html: str) -> str:
    """Replace callout blockquotes in rendered HTML.

    Nested blockquotes stay inside their callout; nested callouts are
    converted too.
    """
    parts: list[str] = []
    pos = 0
    while True:
        match = CALLOUT_PATTERN.search(html, pos)
        if match is None:
            break
        close = _closing_tag(html, match.end())
        if close is None:
            break
        parts.append(html[pos:match.start()])
        parts.append(_render_callout(match, render_callouts(html[match.end():close.start()])))
        pos = close.end()
    parts.append(html[pos:])
    return "".join(parts)
