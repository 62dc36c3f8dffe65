"""Build the table relationship graph from foreign-key declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

import networkx as nx

from .errors import NoJoinPathError, TableNotFoundError
from .metadata_loader import FieldCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipEdge:
    """A join between two tables, oriented in the direction it is walked."""

    from_table: str
    to_table: str
    condition: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_table, "to": self.to_table, "condition": self.condition}


class RelationshipGraph:
    """Undirected table graph; every edge carries its join condition.

    The underlying NetworkX graph is frozen once built, so an instance can be
    shared between concurrent requests without locking.
    """

    def __init__(self, graph: nx.Graph):
        self.graph = nx.freeze(graph)

    def __contains__(self, table: str) -> bool:
        return table in self.graph

    @property
    def tables(self) -> List[str]:
        return list(self.graph.nodes)

    def neighbors(self, table: str) -> List[str]:
        if table not in self.graph:
            raise TableNotFoundError(table)
        return list(self.graph.neighbors(table))

    def edge(self, from_table: str, to_table: str) -> RelationshipEdge:
        """The edge between two adjacent tables, oriented from ``from_table``."""
        data = self.graph.get_edge_data(from_table, to_table)
        if data is None:
            raise NoJoinPathError(from_table, to_table)
        return RelationshipEdge(from_table=from_table, to_table=to_table, condition=data["condition"])

    def find_join_path(self, from_table: str, to_table: str) -> List[RelationshipEdge]:
        return find_join_path(self, from_table, to_table)


def join_condition(table: str, column: str, foreign_table: str, foreign_key: str) -> str:
    return f"{table}.{column} = {foreign_table}.{foreign_key}"


def build_relationship_graph(catalog: FieldCatalog) -> RelationshipGraph:
    """Create the relationship graph for a catalog.

    Every field that names both a foreign table and a foreign key contributes
    one edge. When several fields relate the same pair of tables the last one
    read replaces the others.
    """

    G = nx.Graph()
    for definition in catalog:
        if not definition.has_relationship:
            continue
        G.add_edge(
            definition.table_name,
            definition.foreign_table,
            condition=join_condition(
                definition.table_name,
                definition.column_name,
                definition.foreign_table,
                definition.foreign_key,
            ),
            declared_by=definition.qualified_name,
        )

    logger.info(f"Built relationship graph with {G.number_of_nodes()} tables")
    return RelationshipGraph(G)


def find_join_path(graph: RelationshipGraph, from_table: str, to_table: str) -> List[RelationshipEdge]:
    """Shortest chain of joins (by edge count) leading from one table to another.

    Raises:
        TableNotFoundError: either table is not part of the graph.
        NoJoinPathError: both tables exist but are not connected.
    """

    if from_table == to_table:
        return []

    for table in (from_table, to_table):
        if table not in graph:
            raise TableNotFoundError(table)

    try:
        # Unweighted, so this is a breadth-first search
        path = nx.shortest_path(graph.graph, from_table, to_table)
    except nx.NetworkXNoPath as exc:
        raise NoJoinPathError(from_table, to_table) from exc

    return [graph.edge(path[i], path[i + 1]) for i in range(len(path) - 1)]


def summarize_graph(graph: RelationshipGraph) -> Dict[str, int]:
    """Quick counts for graph contents."""

    G = graph.graph
    return {
        "tables": G.number_of_nodes(),
        "relationships": G.number_of_edges(),
        "connected_components": nx.number_connected_components(G) if G.number_of_nodes() else 0,
        "self_references": nx.number_of_selfloops(G),
    }
