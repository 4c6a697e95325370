"""Markdown source handling with YAML front matter support."""

import re
from typing import Any

import frontmatter
import yaml

# Leading --- block closed by --- or ... on its own line
FRONT_MATTER_PATTERN = re.compile(r"\A(?:[ \t]*\n)*---[ \t]*\n(?:.*?\n)??(?:---|\.\.\.)[ \t]*(?:\n|\Z)", re.DOTALL)


class ParseError(Exception):
    """Raised when a document's front matter cannot be parsed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def strip_front_matter(text: str) -> str:
    """Best-effort strip of a leading front matter block.

    Metadata is removed without being parsed, so malformed YAML never gets in
    the way. An unterminated block is left in place.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return text
    return text[match.end():]


def parse_source(path: str, text: str) -> tuple[dict[str, Any], str]:
    """Parse a document's front matter.

    Args:
        path: Document path, for error messages.
        text: Raw file content.

    Returns:
        Tuple of (metadata, body).

    Raises:
        ParseError: If the front matter is not valid YAML.
    """
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as e:
        raise ParseError(path, f"Failed to parse front matter: {e}") from e

    metadata = post.metadata if isinstance(post.metadata, dict) else {}
    return metadata, post.content
