"""linkweave: wikilink resolution, backlinks and link graphs for Markdown sites."""

__version__ = "0.3.0"
