"""Markdown source parsing: protected regions, alias index and link resolution."""

from .alias_index import AliasIndex, alias_keys
from .links import (
    WikiLink,
    extract_hrefs,
    extract_wikilinks,
    resolve_forward_links,
    resolve_href,
    resolve_wikilink_key,
)
from .markdown import ParseError, parse_source, strip_front_matter
from .regions import Span, mask_regions, tokenize

__all__ = [
    "AliasIndex",
    "alias_keys",
    "WikiLink",
    "extract_hrefs",
    "extract_wikilinks",
    "resolve_forward_links",
    "resolve_href",
    "resolve_wikilink_key",
    "ParseError",
    "parse_source",
    "strip_front_matter",
    "Span",
    "mask_regions",
    "tokenize",
]
