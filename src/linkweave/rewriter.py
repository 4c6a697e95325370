"""Wikilink rewriting around protected code and math regions.

Runs twice per document:

1. ``pre_rewrite`` before the Markdown renderer: [[wikilinks]] in literal text
   become standard links, code is passed through verbatim, and math is
   swapped for opaque sentinels so the renderer cannot read a ``|`` inside
   ``$a|b$`` as a table column.
2. ``post_restore`` on the rendered output: sentinels are replaced with the
   original math text.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import NamedTuple

from .config import MATH_PLACEHOLDER_NONCE_LENGTH, MATH_PLACEHOLDER_PREFIX, MATH_PLACEHOLDER_SUFFIX
from .models import DocumentRecord
from .parser.alias_index import AliasIndex
from .parser.links import WIKILINK_PATTERN
from .parser.regions import tokenize

log = logging.getLogger(__name__)


class RewriteResult(NamedTuple):
    """Pre-render text plus the math waiting to be restored after rendering."""

    text: str
    pending_math: dict[str, str]


def lookup_link_target(key: str, index: AliasIndex) -> DocumentRecord | None:
    """Find the document a [[key]] renders a link to: exact key, then lowercase.

    Unlike link discovery, rendering has no basename fallback, so
    [[folder/Note]] only becomes a link when the full key is an alias.
    """
    if not key:
        return None
    return index.lookup(key) or index.lookup(key.lower())


def rewrite_wikilinks(text: str, index: AliasIndex, broken: list[str] | None = None) -> str:
    """Replace [[key]] and [[key|display]] with Markdown links.

    The label is the display text, else the target's title, else the key.
    Unresolved links collapse to their display text or key.

    Args:
        text: Literal Markdown (no protected regions).
        index: Alias index for the build.
        broken: Optional list collecting unresolved keys.
    """

    def repl(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        display = match.group(2).strip() if match.group(2) is not None else None

        doc = lookup_link_target(key, index)
        if doc is None:
            if broken is not None:
                broken.append(key)
            return display or key

        label = display or doc.title or key
        return f"[{label}]({doc.url})"

    return WIKILINK_PATTERN.sub(repl, text)


def _math_token(nonce: str, n: int) -> str:
    return f"{MATH_PLACEHOLDER_PREFIX}{nonce}N{n}{MATH_PLACEHOLDER_SUFFIX}"


def pre_rewrite(text: str, index: AliasIndex, broken: list[str] | None = None) -> RewriteResult:
    """Rewrite wikilinks and mask math ahead of rendering.

    Code and math win over link syntax: a [[wikilink]] that encloses a code
    or math region (``[[a `x` b]]``) is split across spans and left as
    written, brackets included.

    Args:
        text: Markdown body (front matter already removed by the caller).
        index: Alias index for the build.
        broken: Optional list collecting unresolved wikilink keys.

    Returns:
        RewriteResult whose text still holds math sentinels.
    """
    nonce = uuid.uuid4().hex[:MATH_PLACEHOLDER_NONCE_LENGTH]
    pending: dict[str, str] = {}
    parts: list[str] = []

    for span in tokenize(text):
        if span.kind is None:
            parts.append(rewrite_wikilinks(span.text, index, broken))
        elif span.kind == "code":
            parts.append(span.text)
        else:
            token = _math_token(nonce, len(pending))
            pending[token] = span.text
            parts.append(token)

    return RewriteResult("".join(parts), pending)


def post_restore(rendered: str, pending_math: dict[str, str]) -> str:
    """Put the original math back into rendered output."""
    for token, original in pending_math.items():
        if token not in rendered:
            log.debug("Math placeholder %s missing from rendered output", token)
            continue
        rendered = rendered.replace(token, original)
    return rendered
