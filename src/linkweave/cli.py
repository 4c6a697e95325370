"""
linkweave: CLI for wikilink-aware Markdown sites

Usage:
    linkweave build -o _site              # Render the site
    linkweave graph -o graph.json         # Write the link graph
    linkweave backlinks _posts/a.md       # Who links here?
    linkweave resolve "Some Title"        # Which document does a key name?
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__ as LINKWEAVE_VERSION


def output(data: Any, as_json: bool = False) -> None:
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    else:
        click.echo(data)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load(ctx: click.Context):
    """Load corpus and link data for the configured root."""
    from .config import ConfigurationError, get_corpus_root, load_site_config
    from .core import build_link_data
    from .corpus import CorpusError, load_corpus

    try:
        root = get_corpus_root(ctx.obj.get("root"))
        corpus = load_corpus(root, load_site_config(root))
    except (ConfigurationError, CorpusError) as e:
        _fail(str(e))
    return corpus, build_link_data(corpus)


@click.group()
@click.version_option(version=LINKWEAVE_VERSION, prog_name="linkweave")
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False),
    envvar="LINKWEAVE_CORPUS_ROOT",
    help="Site source directory (default: LINKWEAVE_CORPUS_ROOT or cwd)",
)
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
@click.pass_context
def cli(ctx: click.Context, root: str | None, quiet: bool):
    """linkweave: wikilinks, backlinks and link graphs for Markdown sites."""
    from ._logging import configure_logging

    configure_logging(quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["root"] = root


@cli.command()
@click.option("--output", "-o", "output_dir", type=click.Path(), default=None, help="Output directory")
@click.option("--base-url", "-b", default=None, help="Base URL prefix (overrides linkweave.yaml)")
@click.option("--title", default="Notes", help="Site title (default: Notes)")
@click.option("--no-clean", is_flag=True, help="Don't remove output directory before build")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def build(
    ctx: click.Context,
    output_dir: str | None,
    base_url: str | None,
    title: str,
    no_clean: bool,
    as_json: bool,
):
    """Render the site with resolved [[wikilinks]], backlinks and graph.

    \b
    Writes:
      - one HTML page per document
      - graph.json (nodes and links for the graph view)
      - aliases.json (every alias key with its url and title)
    """
    from .config import ConfigurationError, get_corpus_root, load_site_config
    from .corpus import CorpusError
    from .publisher import PublishConfig, SiteGenerator

    try:
        root = get_corpus_root(ctx.obj.get("root"))
        site_config = load_site_config(root)
        config = PublishConfig(
            output_dir=Path(output_dir or site_config.output_dir),
            site_title=title,
            base_url=base_url,
            clean=not no_clean,
        )
        result = SiteGenerator(config, root).generate()
    except (ConfigurationError, CorpusError, OSError) as e:
        _fail(str(e))
        return

    if as_json:
        output(result.model_dump(), as_json=True)
        return

    click.echo(f"Published {result.documents_published} documents to {result.output_dir}")
    click.echo(f"Links: {result.links_found}")
    if result.broken_links:
        click.echo(f"Unresolved wikilinks: {len(result.broken_links)}")
        for broken in result.broken_links:
            click.echo(f"  {broken.source}: [[{broken.target}]]")
    if result.failed_documents:
        click.echo(f"Failed documents: {', '.join(result.failed_documents)}", err=True)


@cli.command()
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), default=None,
              help="Write to this file instead of stdout")
@click.pass_context
def graph(ctx: click.Context, output_file: str | None):
    """Print the site link graph as JSON."""
    _corpus, link_data = _load(ctx)
    payload = link_data.graph.model_dump_json(indent=2)

    if output_file:
        Path(output_file).write_text(payload, encoding="utf-8")
        click.echo(f"Wrote {len(link_data.graph.nodes)} nodes, {len(link_data.graph.links)} links to {output_file}")
    else:
        click.echo(payload)


@cli.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def backlinks(ctx: click.Context, path: str, as_json: bool):
    """List the documents linking to PATH (relative source path)."""
    corpus, _link_data = _load(ctx)
    doc = corpus.find(path)
    if doc is None:
        _fail(f"No document at {path}")
        return

    if as_json:
        output([entry.model_dump() for entry in doc.backlinks], as_json=True)
        return

    if not doc.backlinks:
        click.echo(f"No backlinks to {doc.title}")
        return
    for entry in doc.backlinks:
        click.echo(f"{entry.title}  {entry.url}")


@cli.command()
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def resolve(ctx: click.Context, key: str, as_json: bool):
    """Show which document a [[KEY]] wikilink resolves to.

    \b
    Reports both outcomes:
      - the backlink/graph target (exact, lowercase, then folder basename)
      - whether pages render [[KEY]] as a link (exact, then lowercase only)
    """
    from .parser import resolve_wikilink_key
    from .rewriter import lookup_link_target

    _corpus, link_data = _load(ctx)
    key = key.strip()
    doc = resolve_wikilink_key(key, link_data.index)
    if doc is None:
        _fail(f"[[{key}]] does not resolve to any document")
        return
    renders_as_link = lookup_link_target(key, link_data.index) is not None

    if as_json:
        output(
            {
                "key": key,
                "path": doc.path,
                "title": doc.title,
                "url": doc.url,
                "renders_as_link": renders_as_link,
            },
            as_json=True,
        )
        return

    click.echo(f"{doc.title}  {doc.url}  ({doc.path})")
    if not renders_as_link:
        click.echo(f"Pages render [[{key}]] as plain text; only backlinks and the graph use it")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
