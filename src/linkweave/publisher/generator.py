"""Static site generator for a linkweave corpus.

Main orchestrator that loads the corpus, runs the link pass, renders every
document and writes pages plus the graph and alias side files.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote

from ..config import ALIASES_FILENAME, DEFAULT_OUTPUT_DIR, GRAPH_FILENAME, SiteConfig, load_site_config
from ..core import build_link_data, render_corpus
from ..corpus import Corpus, load_corpus
from ..models import BuildResult, DocumentRecord
from ..renderer import Renderer

log = logging.getLogger(__name__)


@dataclass
class PublishConfig:
    """Configuration for site generation."""

    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    site_title: str = "Notes"
    base_url: str | None = None  # None: use linkweave.yaml
    clean: bool = True  # Remove output dir before build


def output_path_for(url: str, base_url: str, output_dir: Path) -> Path:
    """Map a document URL to a file under output_dir.

    /notes/2024/01/15/post.html -> output_dir/2024/01/15/post.html
    /about/ -> output_dir/about/index.html
    /My%20Note.html -> output_dir/My Note.html
    """
    path = url
    if base_url and path.startswith(base_url):
        path = path[len(base_url):]
    path = unquote(path).lstrip("/")
    if not path or path.endswith("/"):
        path += "index.html"
    elif "." not in path.rsplit("/", 1)[-1]:
        path += "/index.html"
    return output_dir / path


class SiteGenerator:
    """Generates a static HTML site from a Markdown corpus.

    Orchestrates the publishing pipeline:
    1. Load the corpus and site configuration
    2. Build the alias index, forward links, backlinks and graph
    3. Rewrite, render and restore every document
    4. Write pages, graph.json and aliases.json
    """

    def __init__(self, config: PublishConfig, corpus_root: Path, renderer: Renderer | None = None):
        """Initialize generator.

        Args:
            config: Publishing configuration
            corpus_root: Site source directory
            renderer: Markdown renderer (markdown-it when omitted)
        """
        self.config = config
        self.corpus_root = corpus_root
        self.renderer = renderer
        self.site_config: SiteConfig = load_site_config(corpus_root)
        if config.base_url is not None:
            self.site_config.base_url = config.base_url.rstrip("/")
        self.corpus: Corpus | None = None

    def generate(self) -> BuildResult:
        """Generate the complete static site.

        Returns:
            BuildResult with statistics and output paths
        """
        self.corpus = load_corpus(self.corpus_root, self.site_config)
        link_data = build_link_data(self.corpus)
        report = render_corpus(self.corpus, link_data, self.renderer)

        output_dir = self.config.output_dir
        if self.config.clean and output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        published = 0
        for doc in self.corpus:
            if doc.rendered_output is None:
                continue
            self._write_page(doc)
            published += 1

        self._write_graph_page()

        graph_path = output_dir / GRAPH_FILENAME
        graph_path.write_text(link_data.graph.model_dump_json(indent=2), encoding="utf-8")

        aliases_path = output_dir / ALIASES_FILENAME
        table = {key: target.model_dump() for key, target in link_data.index.link_table().items()}
        aliases_path.write_text(json.dumps(table, indent=2, ensure_ascii=False), encoding="utf-8")

        log.info("Published %d documents to %s", published, output_dir)

        return BuildResult(
            documents_published=published,
            links_found=link_data.link_count,
            broken_links=report.broken_links,
            failed_documents=sorted(set(link_data.failed) | set(report.failed)),
            output_dir=str(output_dir),
            graph_path=str(graph_path),
            aliases_path=str(aliases_path),
        )

    def _write_page(self, doc: DocumentRecord) -> None:
        from .templates import render_document_page

        html_path = output_path_for(doc.url, self.site_config.base_url, self.config.output_dir)
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(
            render_document_page(doc, self.config.site_title, self.site_config.base_url),
            encoding="utf-8",
        )

    def _write_graph_page(self) -> None:
        from .templates import render_graph_page

        html = render_graph_page(self.config.site_title, self.site_config.base_url, GRAPH_FILENAME)
        (self.config.output_dir / "graph.html").write_text(html, encoding="utf-8")
