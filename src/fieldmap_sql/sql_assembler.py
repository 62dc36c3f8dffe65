"""Assemble SQL statements from matched fields and planned joins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .errors import NoMatchesError
from .extraction.intent_classifier import QueryIntent
from .field_matcher import MatchedField
from .graph_builder import RelationshipEdge, RelationshipGraph
from .join_planner import plan_joins

logger = logging.getLogger(__name__)

# Number of matches at which confidence is no longer scaled down
CONFIDENCE_FULL_EVIDENCE = 3


@dataclass
class QueryPlan:
    """Everything needed to render one statement."""

    intent: QueryIntent
    distinct: bool
    tables: List[str]
    joins: List[RelationshipEdge] = field(default_factory=list)
    limit: int = 0
    # Filters are never inferred from the description; left empty by plan_query
    where: str = ""

    @property
    def primary_table(self) -> str:
        return self.tables[0]


def table_alias(table: str) -> str:
    """First letter of the table name, lower-cased.

    Tables sharing an initial get the same alias; nothing disambiguates them.
    """
    return table[:1].lower()


def required_tables(matches: Sequence[MatchedField]) -> List[str]:
    """Distinct table names in the order the matches first mention them."""
    tables: List[str] = []
    for match in matches:
        if match.table_name not in tables:
            tables.append(match.table_name)
    return tables


def plan_query(
    matches: Sequence[MatchedField],
    intent: QueryIntent,
    distinct: bool,
    limit: int,
    graph: RelationshipGraph,
) -> QueryPlan:
    if not matches:
        raise NoMatchesError("no field matches provided")

    tables = required_tables(matches)
    joins: List[RelationshipEdge] = []
    if len(tables) > 1:
        joins = plan_joins(graph, tables[0], tables[1:])

    return QueryPlan(intent=intent, distinct=distinct, tables=tables, joins=joins, limit=limit)


def render_query(plan: QueryPlan, matches: Sequence[MatchedField]) -> str:
    """Emit SELECT, FROM, JOIN*, WHERE, GROUP BY and LIMIT in that order."""

    first = matches[0].qualified_name

    if plan.intent == QueryIntent.COUNT:
        select_clause = f"COUNT({first})"
    elif plan.intent == QueryIntent.GROUP:
        select_clause = f"{first}, COUNT(*)"
    else:
        select_clause = ", ".join(match.qualified_name for match in matches)
        if plan.distinct:
            select_clause = "DISTINCT " + select_clause

    primary = plan.primary_table
    parts = [f"SELECT {select_clause}", f"FROM {primary} {table_alias(primary)}"]

    introduced = {primary}
    for join in plan.joins:
        if join.to_table in introduced:
            continue
        parts.append(f"JOIN {join.to_table} {table_alias(join.to_table)} ON {join.condition}")
        introduced.add(join.to_table)

    if plan.where:
        parts.append(f"WHERE {plan.where}")

    if plan.intent == QueryIntent.GROUP:
        parts.append(f"GROUP BY {first}")

    if plan.limit > 0:
        parts.append(f"LIMIT {plan.limit}")

    return " ".join(parts)


def build_query(
    matches: Sequence[MatchedField],
    intent: QueryIntent,
    distinct: bool,
    limit: int,
    graph: RelationshipGraph,
) -> Tuple[str, List[RelationshipEdge]]:
    """Build the SQL text and report the joins it relies on.

    Raises:
        NoMatchesError: ``matches`` is empty.
        TableNotFoundError: a matched table has no relationships to join on.
        NoJoinPathError: matched tables are not connected.
    """
    plan = plan_query(matches, intent, distinct, limit, graph)
    query = render_query(plan, matches)
    logger.info(f"Generated query: {query}")
    return query, plan.joins


def calculate_confidence(matches: Sequence[MatchedField]) -> float:
    """Mean match score scaled down when fewer than three fields matched (0-100)."""
    if not matches:
        return 0.0
    average = sum(match.match_score for match in matches) / len(matches)
    evidence = min(len(matches) / CONFIDENCE_FULL_EVIDENCE, 1.0)
    return average * evidence
