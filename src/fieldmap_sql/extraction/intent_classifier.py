"""Decide the shape of the SQL statement from lexical cues."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class QueryIntent(str, Enum):
    """Statement shapes the assembler knows how to emit."""
    SELECT = "SELECT"
    COUNT = "COUNT"
    GROUP = "GROUP"


# Checked in order; the first family with a hit decides the intent
COUNT_CUES = ("count", "how many", "number of")
GROUP_CUES = ("group", "grouped", "per")
DISTINCT_CUES = ("distinct", "unique", "different")


def classify_intent(description: str) -> Tuple[QueryIntent, bool]:
    """Return the query intent and whether the projection should be DISTINCT.

    Cues are plain substring tests on the lower-cased text, so "per" also
    fires inside words such as "percentage". DISTINCT only applies to plain
    SELECT statements.
    """

    desc = (description or "").lower()

    if any(cue in desc for cue in COUNT_CUES):
        return QueryIntent.COUNT, False

    if any(cue in desc for cue in GROUP_CUES):
        return QueryIntent.GROUP, False

    distinct = any(cue in desc for cue in DISTINCT_CUES)
    return QueryIntent.SELECT, distinct
