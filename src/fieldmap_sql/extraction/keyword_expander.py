"""Expand keywords with near-spelling variants taken from field descriptions."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Set

from ..metadata_loader import FieldCatalog

MAX_VARIANTS_PER_KEYWORD = 3


def build_description_vocabulary(catalog: FieldCatalog) -> Set[str]:
    """
    Collect every distinct word used in the catalog's field descriptions.

    Args:
        catalog: Loaded field catalog

    Returns:
        Set of lower-cased description words
    """
    vocabulary: Set[str] = set()
    for definition in catalog:
        vocabulary.update(_tokenize(definition.description))
    return vocabulary


def edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i1, c1 in enumerate(s1):
        new_distances = [i1 + 1]
        for i2, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[i2])
            else:
                new_distances.append(1 + min(distances[i2], distances[i2 + 1], new_distances[-1]))
        distances = new_distances

    return distances[-1]


def max_distance_for(keyword: str) -> int:
    # Short words sit one edit away from too many unrelated words
    return 2 if len(keyword) >= 5 else 1


def find_variants(keyword: str, vocabulary: Iterable[str], limit: int = MAX_VARIANTS_PER_KEYWORD) -> List[str]:
    """Closest vocabulary words to ``keyword``, nearest first, ties alphabetical."""
    threshold = max_distance_for(keyword)
    scored = []
    for word in vocabulary:
        if word == keyword or abs(len(word) - len(keyword)) > threshold:
            continue
        distance = edit_distance(keyword, word)
        if distance <= threshold:
            scored.append((distance, word))
    scored.sort()
    return [word for _, word in scored[:limit]]


def keyword_variants(keywords: Iterable[str], vocabulary: Iterable[str]) -> Dict[str, List[str]]:
    """Map each keyword to its near-spelling variants from ``vocabulary``."""
    vocabulary = set(vocabulary)
    return {keyword: find_variants(keyword, vocabulary) for keyword in keywords}


def expand_keywords(keywords: List[str], vocabulary: Iterable[str]) -> List[str]:
    """
    Return a new list: the original keywords followed by their variants.

    The input list is left untouched.
    """
    expanded = list(keywords)
    for variants in keyword_variants(keywords, vocabulary).values():
        expanded.extend(variants)
    return expanded


def _tokenize(text: str) -> Set[str]:
    if not text:
        return set()
    return {token for token in re.split(r"[^a-z0-9_]+", text.lower()) if len(token) > 1}
