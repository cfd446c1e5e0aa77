"""
Comparison Ranker - Best/worst annotations across several scored properties

All comparisons use the already-computed integer scores; nothing is re-scored.

Rules:
  - Best overall: highest overall_score, first in input order wins ties
  - Best per category: highest category score, but a maximum of 0 is
    "no winner" (an unanswered category is never highlighted as best)
  - Worst per category: lowest score that is > 0 and < the row maximum;
    no worst when every entry is tied or zero
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .catalogue import QuestionCatalogue, get_default_catalogue
from .score_calculator import PropertyScore

HIGHLIGHT_BEST = "best"
HIGHLIGHT_WORST = "worst"


@dataclass(frozen=True)
class ScoredEntry:
    """A property (anything with an id and name) paired with its score."""

    property_id: int
    name: str
    score: PropertyScore


def _category_value(entry: ScoredEntry, category_id: str) -> int:
    category_score = entry.score.get_category_score(category_id)
    return category_score.score if category_score else 0


def best_overall(entries: Sequence[ScoredEntry]) -> Optional[ScoredEntry]:
    best = None
    for entry in entries:
        if best is None or entry.score.overall_score > best.score.overall_score:
            best = entry
    return best


def best_for_category(entries: Sequence[ScoredEntry], category_id: str) -> Optional[ScoredEntry]:
    best = None
    for entry in entries:
        if best is None or _category_value(entry, category_id) > _category_value(best, category_id):
            best = entry
    if best is None or _category_value(best, category_id) <= 0:
        return None
    return best


def worst_for_category(entries: Sequence[ScoredEntry], category_id: str) -> Optional[ScoredEntry]:
    if not entries:
        return None
    row_max = max(_category_value(e, category_id) for e in entries)
    worst = None
    for entry in entries:
        value = _category_value(entry, category_id)
        if value <= 0 or value >= row_max:
            continue
        if worst is None or value < _category_value(worst, category_id):
            worst = entry
    return worst


def build_comparison(
    entries: Sequence[ScoredEntry],
    catalogue: Optional[QuestionCatalogue] = None,
) -> Dict[str, Any]:
    """
    Build the side-by-side comparison table.

    One row per category with a non-zero default weight. Every cell equal to a
    non-zero row maximum is highlighted as best (ties all highlight), while the
    `best` field names the first such entry.
    """
    catalogue = catalogue if catalogue is not None else get_default_catalogue()
    overall = best_overall(entries)

    rows: List[Dict[str, Any]] = []
    for category in catalogue.weighted_categories():
        best = best_for_category(entries, category.id)
        worst = worst_for_category(entries, category.id)
        best_value = _category_value(best, category.id) if best else None
        worst_value = _category_value(worst, category.id) if worst else None

        cells = []
        for entry in entries:
            value = _category_value(entry, category.id)
            highlight = None
            if best_value is not None and value == best_value:
                highlight = HIGHLIGHT_BEST
            elif worst_value is not None and value == worst_value:
                highlight = HIGHLIGHT_WORST
            cells.append({"property_id": entry.property_id, "score": value, "highlight": highlight})

        rows.append({
            "category_id": category.id,
            "category_name": category.name,
            "best_property_id": best.property_id if best else None,
            "worst_property_id": worst.property_id if worst else None,
            "cells": cells,
        })

    return {
        "properties": [
            {"property_id": e.property_id, "name": e.name, "overall_score": e.score.overall_score}
            for e in entries
        ],
        "best_overall_property_id": overall.property_id if overall else None,
        "rows": rows,
    }
