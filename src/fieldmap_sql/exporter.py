"""Utilities for exporting the catalog and relationship graph as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from networkx.readwrite import json_graph

from .graph_builder import RelationshipGraph, build_relationship_graph, summarize_graph
from .metadata_loader import FieldCatalog


def graph_to_json(graph: RelationshipGraph) -> Dict[str, Any]:
    return json_graph.node_link_data(graph.graph)


def export_catalog_pack(
    catalog: FieldCatalog,
    output_dir: Path,
    graph: Optional[RelationshipGraph] = None,
) -> Dict[str, Path]:
    """Write graph, field listing and summary files into ``output_dir``."""

    output_dir.mkdir(parents=True, exist_ok=True)
    graph = graph if graph is not None else build_relationship_graph(catalog)

    graph_path = output_dir / "graph.json"
    with graph_path.open("w", encoding="utf-8") as f:
        json.dump(graph_to_json(graph), f, indent=2)

    fields = [
        {
            "column_name": d.column_name,
            "table_name": d.table_name,
            "aliases": dict(d.aliases),
            "description": d.description,
            "field_type": d.field_type,
            "join_key": d.join_key,
            "foreign_table": d.foreign_table,
            "foreign_key": d.foreign_key,
        }
        for d in catalog
    ]
    fields_path = output_dir / "fields.json"
    with fields_path.open("w", encoding="utf-8") as f:
        json.dump(fields, f, indent=2)

    summary = {
        "source": str(catalog.source) if catalog.source else None,
        "field_count": len(catalog),
        "table_count": len(catalog.tables),
        "graph_stats": summarize_graph(graph),
    }
    summary_path = output_dir / "summary.json"
    with summary_path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)

    return {
        "graph": graph_path,
        "fields": fields_path,
        "summary": summary_path,
    }
