"""Plan the joins that connect a query's tables."""

from __future__ import annotations

from typing import Iterable, List

from .graph_builder import RelationshipEdge, RelationshipGraph, find_join_path


def plan_joins(graph: RelationshipGraph, primary: str, targets: Iterable[str]) -> List[RelationshipEdge]:
    """
    Join edges linking ``primary`` to every table in ``targets``.

    Each target gets its own shortest path from the primary table and the
    paths are merged. The result is a star centred on the primary table, not
    a minimum Steiner tree: two targets that sit next to each other but far
    from the primary are still reached through the primary.

    Args:
        graph: Relationship graph built from the catalog
        primary: Table every path starts from
        targets: Other tables the query needs

    Returns:
        Edges in discovery order with duplicate conditions removed
    """
    collected: List[RelationshipEdge] = []
    for target in targets:
        collected.extend(find_join_path(graph, primary, target))
    return deduplicate_joins(collected)


def deduplicate_joins(joins: Iterable[RelationshipEdge]) -> List[RelationshipEdge]:
    """Drop edges whose condition string was already seen; the first one wins.

    Edges are compared by condition, not by table pair, so the same join
    walked in the opposite direction counts as a duplicate while two edges
    with different conditions over one pair would both be kept.
    """
    seen = set()
    unique: List[RelationshipEdge] = []
    for join in joins:
        if join.condition in seen:
            continue
        seen.add(join.condition)
        unique.append(join)
    return unique
