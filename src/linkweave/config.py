"""Configuration management for linkweave.

This module contains the configurable constants for a corpus build and the
per-site configuration loaded from ``linkweave.yaml`` in the corpus root.
Magic strings are documented here rather than scattered throughout the codebase.

Example linkweave.yaml:
    posts_dir: _posts            # Chronological collection
    base_url: /notes             # Prefix for every generated URL
    exclude:                     # Glob patterns (relative paths) to skip
      - drafts/*
    origin_field: obsidian_source
    output_dir: _site
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigurationError(Exception):
    """Raised when the corpus root or site configuration is unusable."""

    pass


# =============================================================================
# Corpus layout
# =============================================================================

# Site configuration filename (looked up in the corpus root)
SITE_CONFIG_FILENAME = "linkweave.yaml"

# Directory holding the primary chronological collection
DEFAULT_POSTS_DIR = "_posts"

# Front matter field naming the path a document was imported from
DEFAULT_ORIGIN_FIELD = "obsidian_source"

# Extensions treated as corpus documents
DOCUMENT_EXTENSIONS = (".md", ".markdown")

# Chronological filenames: 2024-01-15-some-title.md
DATE_PREFIX_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<rest>.+)$")

# =============================================================================
# Link resolution
# =============================================================================

# Standard link hrefs starting with these are never corpus references
SKIP_HREF_PREFIXES = ("http", "#", "mailto:")

# =============================================================================
# Rewriting
# =============================================================================

# Math sentinels: PREFIX + nonce + "N" + index + SUFFIX. Letters and digits
# only, so Markdown renderers pass them through untouched.
MATH_PLACEHOLDER_PREFIX = "LWMATH"
MATH_PLACEHOLDER_SUFFIX = "END"

# Length of the per-call random nonce embedded in math sentinels
MATH_PLACEHOLDER_NONCE_LENGTH = 12

# =============================================================================
# Output
# =============================================================================

DEFAULT_OUTPUT_DIR = "_site"
GRAPH_FILENAME = "graph.json"
ALIASES_FILENAME = "aliases.json"


@dataclass
class SiteConfig:
    """Per-site configuration from linkweave.yaml."""

    posts_dir: str = DEFAULT_POSTS_DIR
    """Directory (relative to the corpus root) of the chronological collection."""

    base_url: str = ""
    """Prefix for generated URLs (e.g., '/repo-name' for GitHub Pages subdirectory)."""

    exclude: list[str] = field(default_factory=list)
    """Glob patterns for relative paths to leave out of the corpus."""

    origin_field: str = DEFAULT_ORIGIN_FIELD
    """Front matter field that records where a note was imported from."""

    output_dir: str = DEFAULT_OUTPUT_DIR
    """Default publish directory, relative to the working directory."""

    source_file: Path | None = None
    """Path to the linkweave.yaml file that was loaded."""

    @classmethod
    def from_dict(cls, data: dict[str, Any], source_file: Path | None = None) -> "SiteConfig":
        """Create SiteConfig from parsed YAML dict."""
        exclude = data.get("exclude") or []
        if isinstance(exclude, str):
            exclude = [exclude]
        return cls(
            posts_dir=str(data.get("posts_dir") or DEFAULT_POSTS_DIR).strip("/"),
            base_url=str(data.get("base_url") or "").rstrip("/"),
            exclude=[str(pattern) for pattern in exclude],
            origin_field=str(data.get("origin_field") or DEFAULT_ORIGIN_FIELD),
            output_dir=str(data.get("output_dir") or DEFAULT_OUTPUT_DIR),
            source_file=source_file,
        )


def load_site_config(corpus_root: Path) -> SiteConfig:
    """Load linkweave.yaml from a corpus root.

    A missing or empty file yields the defaults.

    Args:
        corpus_root: Root directory of the corpus.

    Returns:
        The site configuration.

    Raises:
        ConfigurationError: If the file cannot be read or is not a YAML mapping.
    """
    config_file = corpus_root / SITE_CONFIG_FILENAME

    if not config_file.exists():
        return SiteConfig()

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read {config_file}: {e}") from e

    # Empty or all-comments file
    if data is None:
        return SiteConfig(source_file=config_file)

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file}: expected a mapping, got {type(data).__name__}")

    return SiteConfig.from_dict(data, source_file=config_file)


def get_corpus_root(explicit: str | Path | None = None) -> Path:
    """Get the corpus root directory.

    Discovery order:
    1. Explicit argument (e.g. a CLI flag)
    2. LINKWEAVE_CORPUS_ROOT environment variable
    3. Current working directory

    Raises:
        ConfigurationError: If the resolved path is not a directory.
    """
    if explicit:
        root = Path(explicit)
    else:
        env_root = os.environ.get("LINKWEAVE_CORPUS_ROOT")
        root = Path(env_root) if env_root else Path.cwd()

    if not root.is_dir():
        raise ConfigurationError(
            f"Corpus root {root} is not a directory. Options:\n"
            "  1. Pass the site directory explicitly\n"
            "  2. Set LINKWEAVE_CORPUS_ROOT to an existing directory"
        )
    return root
