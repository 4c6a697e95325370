"""Pydantic models for corpus documents and the derived link graph."""

from typing import Any

from pydantic import BaseModel, Field


class BacklinkEntry(BaseModel):
    """A document that links to the current one."""

    title: str
    url: str


class GraphNode(BaseModel):
    """A node in the site link graph."""

    id: int  # Dense 0-based index over graph-included documents
    name: str
    url: str
    weight: int = 1  # max(1, forward + backward)


class GraphEdge(BaseModel):
    """A directed edge between two graph node ids."""

    source: int
    target: int


class GraphData(BaseModel):
    """Site-wide link graph, shared by every document of a build."""

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphEdge] = Field(default_factory=list)


class LinkTarget(BaseModel):
    """What an alias key points at, for link rendering."""

    url: str
    title: str


class DocumentRecord(BaseModel):
    """A single corpus document.

    Created by the corpus loader; the link pass fills ``backlinks`` and
    ``graph_data``; the render pass fills ``rendered_output``.
    """

    handle: int = -1  # Assigned by Corpus.add
    path: str  # Relative source path, POSIX separators
    raw_source: str | None = None  # None when the loader could not read the file
    rendered_output: str | None = None
    title: str
    url: str
    permalink: str | None = None
    origin_path: str | None = None  # Where the note was imported from
    graph: bool | None = None  # Explicit graph opt-in/opt-out from front matter
    chronological: bool = False  # Member of the posts collection
    metadata: dict[str, Any] = Field(default_factory=dict)
    # Derived
    backlinks: list[BacklinkEntry] = Field(default_factory=list)
    graph_data: GraphData | None = None

    @property
    def slug(self) -> str:
        """Filename without directory or extension."""
        name = self.path.rsplit("/", 1)[-1]
        stem, dot, _ext = name.rpartition(".")
        return stem if dot and stem else name


class BrokenLink(BaseModel):
    """A wikilink that did not resolve to any document."""

    source: str  # Source document path
    target: str  # Key as written


class BuildResult(BaseModel):
    """Result of a site build."""

    documents_published: int
    links_found: int
    broken_links: list[BrokenLink] = Field(default_factory=list)
    failed_documents: list[str] = Field(default_factory=list)
    output_dir: str
    graph_path: str
    aliases_path: str
