"""Turn free-text data requests into SQL using a field-mapping catalog."""

__version__ = "1.0.0"

from .errors import (
    FieldQueryError,
    CatalogLoadError,
    NoMatchesError,
    TableNotFoundError,
    NoJoinPathError,
)
from .metadata_loader import (
    FieldDefinition,
    FieldCatalog,
    load_field_catalog,
)
from .graph_builder import (
    RelationshipEdge,
    RelationshipGraph,
    build_relationship_graph,
    find_join_path,
    summarize_graph,
)
from .field_matcher import FieldMatcher, MatchedField
from .join_planner import plan_joins
from .sql_assembler import QueryPlan, build_query, calculate_confidence
from .query_service import QueryGenerator, QueryResult
from .config import Settings

__all__ = [
    "FieldQueryError",
    "CatalogLoadError",
    "NoMatchesError",
    "TableNotFoundError",
    "NoJoinPathError",
    "FieldDefinition",
    "FieldCatalog",
    "load_field_catalog",
    "RelationshipEdge",
    "RelationshipGraph",
    "build_relationship_graph",
    "find_join_path",
    "summarize_graph",
    "FieldMatcher",
    "MatchedField",
    "plan_joins",
    "QueryPlan",
    "build_query",
    "calculate_confidence",
    "QueryGenerator",
    "QueryResult",
    "Settings",
]
