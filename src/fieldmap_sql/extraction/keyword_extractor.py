"""Pull search keywords out of a free-text data request."""

from __future__ import annotations

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# Function words plus the request verbs people lead with ("get", "show", "find")
STOPWORDS = frozenset({
    "a", "an", "the", "and", "or",
    "for", "in", "on", "at", "by", "to",
    "with", "about", "as", "into", "like",
    "through", "after", "over", "between", "out",
    "against", "during", "without", "before", "under",
    "around", "among", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had",
    "do", "does", "did", "but", "if", "of",
    "from", "get", "all", "show", "find", "can",
    "i", "me", "my", "myself", "we", "our",
    "us", "ourselves", "you", "your", "yourself",
    "he", "him", "his", "himself", "she", "her",
    "hers", "herself", "it", "its", "itself",
    "they", "them", "their", "theirs", "themselves",
    "what", "which", "who", "whom", "whose",
})

_NON_WORD = re.compile(r"[^\w\s]")


def extract_keywords(description: str) -> List[str]:
    """Lower-case, strip punctuation, drop stop-words and single characters.

    Word order is kept and repeated words are not collapsed, so a keyword
    mentioned twice counts twice when scoring.
    """

    sanitized = _NON_WORD.sub(" ", (description or "").lower())
    keywords = [word for word in sanitized.split() if word not in STOPWORDS and len(word) > 1]
    logger.info(f"Extracted keywords: {keywords}")
    return keywords
