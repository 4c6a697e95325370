"""HTML templates for published pages.

Uses Jinja2 with inline template definitions: a base layout, the document
page (with its backlinks panel) and the link graph page.
"""

from __future__ import annotations

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup

from ..models import DocumentRecord


def _base_wrapper(title: str, site_title: str, base_url: str, content: str) -> str:
    """Wrap content in the base HTML layout.

    Plain string formatting keeps Jinja from parsing user content that might
    contain {{ }} syntax. MathJax picks up the restored $...$ and $$...$$.
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{_escape_html(title)} - {_escape_html(site_title)}</title>
    <link rel="stylesheet" href="{base_url}/assets/style.css">
    <script>window.MathJax = {{tex: {{inlineMath: [['$', '$'], ['\\\\(', '\\\\)']]}}}};</script>
    <script src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-chtml.js" async></script>
</head>
<body>
    <nav class="nav">
        <a href="{base_url}/" class="nav-brand">{_escape_html(site_title)}</a>
        <a href="{base_url}/graph.html" class="nav-link">Graph</a>
    </nav>
    <main class="main">
        {content}
    </main>
    <script>window.BASE_URL = "{base_url}";</script>
</body>
</html>
"""


def _escape_html(text: str) -> str:
    """Escape HTML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


DOCUMENT_TEMPLATE = """
<article class="entry">
    <header class="entry-header">
        <h1>{{ doc.title }}</h1>
    </header>
    <div class="entry-content">
        {{ html_content }}
    </div>
    {% if doc.backlinks %}
    <footer class="entry-backlinks">
        <h2>Backlinks</h2>
        <ul>
            {% for bl in doc.backlinks %}
            <li><a href="{{ bl.url }}">{{ bl.title }}</a></li>
            {% endfor %}
        </ul>
    </footer>
    {% endif %}
</article>
"""

GRAPH_TEMPLATE = """
<div class="graph-container">
    <div id="graph"></div>
</div>
<script src="https://cdn.jsdelivr.net/npm/force-graph@1"></script>
<script>
(function() {
    const baseUrl = window.BASE_URL || '';
    fetch(baseUrl + '/{{ graph_file }}')
        .then(r => r.json())
        .then(data => {
            ForceGraph()(document.getElementById('graph'))
                .graphData(data)
                .nodeLabel('name')
                .nodeVal('weight')
                .onNodeClick(node => { window.location.href = node.url; });
        });
})();
</script>
"""


def _get_env() -> Environment:
    """Create Jinja2 environment with autoescape enabled."""
    return Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(default=True, default_for_string=True),
    )


def render_document_page(doc: DocumentRecord, site_title: str, base_url: str) -> str:
    """Render a single document page.

    Args:
        doc: Document with rendered_output and backlinks filled in.
        site_title: Site name for the header and <title>.
        base_url: Base URL for asset links.

    Returns:
        Complete HTML page string
    """
    tmpl = _get_env().from_string(DOCUMENT_TEMPLATE)
    # rendered_output is already HTML
    content = tmpl.render(doc=doc, html_content=Markup(doc.rendered_output or ""))
    return _base_wrapper(doc.title, site_title, base_url, content)


def render_graph_page(site_title: str, base_url: str, graph_file: str) -> str:
    """Render the link graph page, which loads graph_file at view time."""
    content = _get_env().from_string(GRAPH_TEMPLATE).render(graph_file=graph_file)
    return _base_wrapper("Graph", site_title, base_url, content)
