"""Extraction modules for keywords, keyword variants, and query intent."""

from .keyword_extractor import extract_keywords, STOPWORDS
from .keyword_expander import build_description_vocabulary, expand_keywords, keyword_variants, edit_distance
from .intent_classifier import classify_intent, QueryIntent

__all__ = [
    "extract_keywords",
    "STOPWORDS",
    "build_description_vocabulary",
    "expand_keywords",
    "keyword_variants",
    "edit_distance",
    "classify_intent",
    "QueryIntent",
]
