"""Command line interface for fieldmap-sql."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Settings
from .errors import FieldQueryError
from .exporter import export_catalog_pack, graph_to_json
from .graph_builder import find_join_path, summarize_graph
from .query_service import QueryGenerator
from .server import FieldOut, create_app
from .visualize import visualize_graph_pyvis


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate SQL from field-mapping descriptions")
    parser.add_argument(
        "--csv",
        type=Path,
        help="Path to the field mappings CSV (overrides CSV_PATH)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (overrides LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (overrides HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (overrides PORT)")

    fields_parser = subparsers.add_parser("fields", help="List catalog fields as JSON")
    fields_parser.add_argument("--system", default="default", help="Only fields mapped in this system")

    gen_parser = subparsers.add_parser("generate", help="Generate SQL for a description")
    gen_parser.add_argument("--description", required=True, help="Natural language description")
    gen_parser.add_argument("--system", default="default", help="System whose aliases to report")
    gen_parser.add_argument("--limit", type=int, default=0, help="LIMIT to apply (0 for none)")
    gen_parser.add_argument(
        "--fuzzy",
        action="store_true",
        help="Expand keywords with near-spelling variants from field descriptions",
    )

    path_parser = subparsers.add_parser("join-path", help="Show the join path between two tables")
    path_parser.add_argument("--from", dest="from_table", required=True, help="Starting table")
    path_parser.add_argument("--to", dest="to_table", required=True, help="Destination table")

    graph_parser = subparsers.add_parser("build-graph", help="Summarize the relationship graph")
    graph_parser.add_argument(
        "--output",
        type=Path,
        help="Optional path to store the graph as JSON (node-link format)",
    )

    export_parser = subparsers.add_parser("export-pack", help="Export catalog, graph and summary JSON")
    export_parser.add_argument(
        "--output-dir",
        type=Path,
        required=True,
        help="Destination directory for the export",
    )

    vis_parser = subparsers.add_parser("visualize", help="Render the relationship graph as HTML via pyvis")
    vis_parser.add_argument(
        "--output",
        type=Path,
        default=Path("visualizations/relationships.html"),
        help="Output HTML file",
    )
    vis_parser.add_argument("--highlight", nargs="*", default=[], help="Tables to highlight")

    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.csv:
        settings.csv_path = args.csv
    if args.log_level:
        settings.log_level = args.log_level.upper()
    if getattr(args, "host", None):
        settings.host = args.host
    if getattr(args, "port", None):
        settings.port = args.port
    if getattr(args, "fuzzy", False):
        settings.fuzzy_matching = True
    return settings


def cmd_serve(settings: Settings) -> None:
    import uvicorn

    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def cmd_fields(generator: QueryGenerator, system: str) -> None:
    fields = [FieldOut.from_definition(d).model_dump() for d in generator.catalog.get_all_fields(system)]
    print(json.dumps({"fields": fields}, indent=2))


def cmd_generate(generator: QueryGenerator, description: str, system: str, limit: int) -> None:
    result = generator.generate(description, system=system, limit=limit)
    print(json.dumps(result.to_dict(), indent=2))


def cmd_join_path(generator: QueryGenerator, from_table: str, to_table: str) -> None:
    joins = find_join_path(generator.graph, from_table, to_table)
    if not joins:
        print(f"{from_table} needs no joins to reach {to_table}")
        return
    tables = [from_table] + [join.to_table for join in joins]
    print(" → ".join(tables))
    for join in joins:
        print(f"  JOIN {join.to_table} ON {join.condition}")


def cmd_build_graph(generator: QueryGenerator, output: Path | None) -> None:
    print(json.dumps(summarize_graph(generator.graph), indent=2))

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as f:
            json.dump(graph_to_json(generator.graph), f, indent=2)
        print(f"Graph saved to {output}")


def cmd_export_pack(generator: QueryGenerator, output_dir: Path) -> None:
    outputs = export_catalog_pack(generator.catalog, output_dir, graph=generator.graph)
    print(f"Catalog pack exported to {output_dir}")
    for kind, path in outputs.items():
        print(f"  - {kind}: {path}")


def cmd_visualize(generator: QueryGenerator, output: Path, highlight: List[str]) -> None:
    visualize_graph_pyvis(generator.graph, output, catalog=generator.catalog, highlight=highlight)
    print(f"Visualization saved to {output}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    settings = load_settings(args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "serve":
            cmd_serve(settings)
            return

        generator = QueryGenerator.from_settings(settings)
        if args.command == "fields":
            cmd_fields(generator, args.system)
        elif args.command == "generate":
            cmd_generate(generator, args.description, args.system, args.limit)
        elif args.command == "join-path":
            cmd_join_path(generator, args.from_table, args.to_table)
        elif args.command == "build-graph":
            cmd_build_graph(generator, args.output)
        elif args.command == "export-pack":
            cmd_export_pack(generator, args.output_dir)
        elif args.command == "visualize":
            cmd_visualize(generator, args.output, args.highlight)
        else:
            raise ValueError(f"Unknown command: {args.command}")
    except FieldQueryError as exc:
        sys.exit(f"error: {exc}")


if __name__ == "__main__":
    main()
