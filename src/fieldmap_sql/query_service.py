"""End-to-end query generation: description in, SQL out."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import Settings
from .errors import NoMatchesError
from .extraction.intent_classifier import QueryIntent, classify_intent
from .extraction.keyword_extractor import extract_keywords
from .field_matcher import FieldMatcher, MatchedField
from .graph_builder import RelationshipEdge, RelationshipGraph, build_relationship_graph
from .metadata_loader import DEFAULT_SYSTEM, FieldCatalog, load_field_catalog
from .sql_assembler import build_query, calculate_confidence

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    query: str
    intent: QueryIntent
    distinct: bool
    keywords: List[str]
    matched_fields: List[MatchedField]
    joins_used: List[RelationshipEdge] = field(default_factory=list)
    confidence: float = 0.0
    processing_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "intent": self.intent.value,
            "distinct": self.distinct,
            "keywords": list(self.keywords),
            "matched_fields": [match.to_dict() for match in self.matched_fields],
            "joins_used": [join.to_dict() for join in self.joins_used],
            "confidence": self.confidence,
            "processing_time_ms": self.processing_time_ms,
        }


class QueryGenerator:
    """Ties the catalog, relationship graph and matcher together.

    The catalog and graph are built once and only read afterwards, so one
    generator can serve concurrent requests.
    """

    def __init__(
        self,
        catalog: FieldCatalog,
        graph: Optional[RelationshipGraph] = None,
        settings: Optional[Settings] = None,
    ):
        self.catalog = catalog
        self.graph = graph if graph is not None else build_relationship_graph(catalog)
        self.settings = settings or Settings()
        self.matcher = FieldMatcher(catalog, fuzzy=self.settings.fuzzy_matching)

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryGenerator":
        catalog = load_field_catalog(settings.csv_path)
        return cls(catalog, settings=settings)

    def generate(self, description: str, system: str = DEFAULT_SYSTEM, limit: int = 0) -> QueryResult:
        """Turn a free-text request into SQL.

        Raises:
            NoMatchesError: no field clears the match threshold.
            TableNotFoundError, NoJoinPathError: matched tables cannot be joined.
        """
        start = time.perf_counter()

        keywords = extract_keywords(description)
        intent, distinct = classify_intent(description)

        matches = self.matcher.find_matches(
            keywords,
            threshold=self.settings.match_threshold,
            max_results=self.settings.max_matches,
            system=system,
        )
        if not matches:
            raise NoMatchesError()

        query, joins = build_query(matches, intent, distinct, limit, self.graph)

        return QueryResult(
            query=query,
            intent=intent,
            distinct=distinct,
            keywords=keywords,
            matched_fields=matches,
            joins_used=joins,
            confidence=calculate_confidence(matches),
            processing_time_ms=int((time.perf_counter() - start) * 1000),
        )
