"""Visualization helpers for the table relationship graph."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from pyvis.network import Network

from .graph_builder import RelationshipGraph
from .metadata_loader import FieldCatalog

TABLE_COLOR = "#2ca02c"
HIGHLIGHT_COLOR = "#d62728"


def visualize_graph_pyvis(
    graph: RelationshipGraph,
    output_html: Path,
    catalog: Optional[FieldCatalog] = None,
    highlight: Iterable[str] = (),
) -> Path:
    """Render an interactive HTML view of the tables and their join conditions.

    When a catalog is given, hovering a table lists its columns. Tables named
    in ``highlight`` are drawn in a contrasting colour.
    """

    highlighted = set(highlight)
    net = Network(height="800px", width="100%", directed=False, cdn_resources="remote")
    net.force_atlas_2based()

    for table in graph.tables:
        title = f"table: {table}"
        if catalog is not None:
            columns = [d.column_name for d in catalog if d.table_name == table]
            if columns:
                title += "<br>" + "<br>".join(columns)
        net.add_node(
            table,
            label=table,
            color=HIGHLIGHT_COLOR if table in highlighted else TABLE_COLOR,
            title=title,
        )

    for source, target, attrs in graph.graph.edges(data=True):
        net.add_edge(source, target, title=attrs.get("condition", ""))

    output_html.parent.mkdir(parents=True, exist_ok=True)
    net.write_html(str(output_html))
    return output_html
