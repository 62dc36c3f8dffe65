"""Score catalog fields against request keywords."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from .extraction.keyword_expander import build_description_vocabulary, keyword_variants
from .metadata_loader import FieldCatalog, FieldDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchedField:
    column_name: str
    table_name: str
    field_description: str
    match_score: float
    system_alias: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.table_name}.{self.column_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_name": self.column_name,
            "table_name": self.table_name,
            "field_description": self.field_description,
            "match_score": self.match_score,
            "system_alias": self.system_alias,
        }


class FieldMatcher:
    """Lexical matcher: a field scores by the share of keywords found in its description."""

    def __init__(self, catalog: FieldCatalog, fuzzy: bool = False):
        self.catalog = catalog
        self.fuzzy = fuzzy
        self.vocabulary: Set[str] = build_description_vocabulary(catalog) if fuzzy else set()

    @staticmethod
    def score(
        description: str,
        keywords: Sequence[str],
        variants: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> float:
        """Percentage (0-100) of ``keywords`` contained in ``description``.

        A keyword also counts as found when one of its ``variants`` is
        contained. Variants never add to the number of keywords.
        """
        if not keywords:
            return 0.0
        description = (description or "").lower()
        variants = variants or {}
        matched = 0
        for keyword in keywords:
            candidates = [keyword, *variants.get(keyword, ())]
            if any(candidate.lower() in description for candidate in candidates):
                matched += 1
        return matched / len(keywords) * 100

    def find_matches(
        self,
        keywords: Sequence[str],
        threshold: float = 30.0,
        max_results: int = 10,
        system: Optional[str] = None,
    ) -> List[MatchedField]:
        """Fields scoring at least ``threshold``, best first, at most ``max_results``.

        Equal scores keep catalog order. When ``system`` is given, each match
        carries the field's alias in that system.
        """

        variants: Dict[str, List[str]] = {}
        if self.fuzzy:
            variants = keyword_variants(keywords, self.vocabulary)
            logger.debug(f"Keyword variants: {variants}")

        matches: List[MatchedField] = []
        for definition in self.catalog:
            score = self.score(definition.description, keywords, variants)
            if score < threshold or score <= 0:
                continue
            matches.append(self._to_match(definition, score, system))

        matches.sort(key=lambda m: m.match_score, reverse=True)
        if max_results >= 0:
            matches = matches[:max_results]

        logger.info(f"Matched {len(matches)} fields for keywords {list(keywords)}")
        return matches

    @staticmethod
    def _to_match(definition: FieldDefinition, score: float, system: Optional[str]) -> MatchedField:
        return MatchedField(
            column_name=definition.column_name,
            table_name=definition.table_name,
            field_description=definition.description,
            match_score=score,
            system_alias=definition.alias_for(system),
        )
