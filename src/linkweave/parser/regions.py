"""Protected-region tokenizer for Markdown source.

Splits text into literal spans (where wikilinks may be rewritten) and
protected spans: code, which must reach the renderer exactly as written, and
math, which must survive the renderer untouched.

Rules run in precedence order. Each rule only scans the literal spans left
over by the rules before it, so a later rule never re-enters text an earlier
rule claimed (a ``$`` inside inline code is not math, a backtick inside
display math is not code).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

RegionKind = Literal["code", "math"]

# ``` or ~~~ (three or more) up to a closing fence at least as long.
# Backtick fences cannot carry backticks in the info string, so ```x``` on one
# line stays inline code. Unterminated fences run to the end of the text.
FENCED_CODE_PATTERN = re.compile(
    r"^[ ]{0,3}(?P<fence>(?P<char>[`~])(?P=char){2,})[^`\n]*"
    r"(?:\n.*?(?:^[ ]{0,3}(?P=fence)(?P=char)*[ \t]*$|\Z)|\Z)",
    re.MULTILINE | re.DOTALL,
)

# `code` or ``co`de``, single line
INLINE_CODE_PATTERN = re.compile(r"(?<!`)(?P<ticks>`{1,2})(?!`)(?:(?!(?P=ticks))[^\n])+(?P=ticks)(?!`)")

# $$...$$ and \[...\], may span lines, unterminated runs to the end of the text
DISPLAY_MATH_PATTERN = re.compile(r"\$\$.*?(?:\$\$|\Z)|\\\[.*?(?:\\\]|\Z)", re.DOTALL)

# $...$ on one line, not part of $$, opening $ not escaped; \(...\) on one line
INLINE_MATH_PATTERN = re.compile(
    r"(?<![\\$])\$[^$\n]+?\$(?!\$)"
    r"|\\\(.*?\\\)"
)

_RULES: tuple[tuple[re.Pattern[str], RegionKind], ...] = (
    (FENCED_CODE_PATTERN, "code"),
    (INLINE_CODE_PATTERN, "code"),
    (DISPLAY_MATH_PATTERN, "math"),
    (INLINE_MATH_PATTERN, "math"),
)


@dataclass(frozen=True)
class Span:
    """A piece of source text, either literal or protected."""

    text: str
    kind: RegionKind | None = None

    @property
    def protected(self) -> bool:
        return self.kind is not None


def _split(text: str, pattern: re.Pattern[str], kind: RegionKind) -> list[Span]:
    spans: list[Span] = []
    pos = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > pos:
            spans.append(Span(text[pos:start]))
        spans.append(Span(text[start:end], kind))
        pos = end
    if pos < len(text):
        spans.append(Span(text[pos:]))
    return spans


def tokenize(text: str) -> list[Span]:
    """Split text into literal and protected spans.

    Joining the ``text`` of every span reproduces the input exactly.

    Args:
        text: Markdown source.

    Returns:
        Spans in source order.
    """
    if not text:
        return []

    spans = [Span(text)]
    for pattern, kind in _RULES:
        next_spans: list[Span] = []
        for span in spans:
            if span.protected:
                next_spans.append(span)
            else:
                next_spans.extend(_split(span.text, pattern, kind))
        spans = next_spans
    return spans


def mask_regions(text: str) -> str:
    """Return text with every code and math region removed."""
    return "".join(span.text for span in tokenize(text) if not span.protected)
