"""Tests for the comparison ranker."""

from scoring_engine.modules.comparison import (
    HIGHLIGHT_BEST,
    HIGHLIGHT_WORST,
    ScoredEntry,
    best_for_category,
    best_overall,
    build_comparison,
    worst_for_category,
)
from scoring_engine.modules.catalogue import QuestionCatalogue
from scoring_engine.modules.score_calculator import CategoryScore, PropertyScore, score_property


def make_entry(property_id, overall, **category_scores):
    score = PropertyScore(
        property_id=property_id,
        overall_score=overall,
        category_scores=[CategoryScore(cid, value, 1, 5) for cid, value in category_scores.items()],
    )
    return ScoredEntry(property_id=property_id, name=f"Flat {property_id}", score=score)


def test_best_overall_first_wins_ties():
    entries = [make_entry(1, 75), make_entry(2, 75), make_entry(3, 60)]
    assert best_overall(entries).property_id == 1


def test_best_overall_picks_maximum():
    entries = [make_entry(1, 40), make_entry(2, 90), make_entry(3, 90)]
    assert best_overall(entries).property_id == 2


def test_best_overall_empty():
    assert best_overall([]) is None


def test_single_entry_is_supported():
    entries = [make_entry(7, 55, location=55)]
    assert best_overall(entries).property_id == 7
    assert best_for_category(entries, "location").property_id == 7
    assert worst_for_category(entries, "location") is None


def test_best_for_category():
    entries = [make_entry(1, 0, location=60), make_entry(2, 0, location=90), make_entry(3, 0, location=90)]
    assert best_for_category(entries, "location").property_id == 2


def test_zero_never_wins():
    entries = [make_entry(1, 50, location=0), make_entry(2, 50, location=0)]
    assert best_for_category(entries, "location") is None


def test_missing_category_counts_as_zero():
    entries = [make_entry(1, 50), make_entry(2, 50, safety=40)]
    assert best_for_category(entries, "safety").property_id == 2
    assert best_for_category(entries, "location") is None


def test_worst_for_category_ignores_zero_and_max():
    entries = [
        make_entry(1, 0, location=0),
        make_entry(2, 0, location=70),
        make_entry(3, 0, location=40),
        make_entry(4, 0, location=90),
    ]
    assert worst_for_category(entries, "location").property_id == 3


def test_no_worst_when_all_tied():
    entries = [make_entry(1, 0, location=70), make_entry(2, 0, location=70)]
    assert worst_for_category(entries, "location") is None


def test_no_worst_when_all_zero():
    entries = [make_entry(1, 0, location=0), make_entry(2, 0, location=0)]
    assert worst_for_category(entries, "location") is None


def test_no_worst_when_only_non_max_is_zero():
    entries = [make_entry(1, 0, location=0), make_entry(2, 0, location=80)]
    assert worst_for_category(entries, "location") is None


def test_build_comparison_table(catalogue):
    entries = [
        ScoredEntry(1, "Camden", score_property(1, {"tube_distance": "under_5", "area_safety": "mixed"})),
        ScoredEntry(2, "Hackney", score_property(2, {"tube_distance": "over_20", "area_safety": "very_safe"})),
        ScoredEntry(3, "Brixton", score_property(3, {"tube_distance": "5_10"})),
    ]
    table = build_comparison(entries, catalogue)

    assert [p["property_id"] for p in table["properties"]] == [1, 2, 3]
    # Camden (100*20 + 50*15)/35 = 78.57, Hackney (20*20 + 100*15)/35 = 54.29, Brixton 80
    assert [p["overall_score"] for p in table["properties"]] == [79, 54, 80]
    assert table["best_overall_property_id"] == 3

    rows = {row["category_id"]: row for row in table["rows"]}
    assert "legal" not in rows
    assert len(rows) == len(catalogue.weighted_categories())

    location = rows["location"]
    assert location["category_name"] == "Location & Transport"
    assert location["best_property_id"] == 1
    assert location["worst_property_id"] == 2
    assert [c["highlight"] for c in location["cells"]] == [HIGHLIGHT_BEST, HIGHLIGHT_WORST, None]

    safety = rows["safety"]
    assert safety["best_property_id"] == 2
    assert safety["worst_property_id"] == 1
    assert [c["score"] for c in safety["cells"]] == [50, 100, 0]

    amenities = rows["amenities"]
    assert amenities["best_property_id"] is None
    assert amenities["worst_property_id"] is None
    assert all(c["highlight"] is None for c in amenities["cells"])


def test_build_comparison_highlights_every_tied_best(catalogue):
    entries = [make_entry(1, 80, location=80), make_entry(2, 80, location=80), make_entry(3, 50, location=50)]
    table = build_comparison(entries, catalogue)
    location = next(r for r in table["rows"] if r["category_id"] == "location")
    assert location["best_property_id"] == 1
    assert [c["highlight"] for c in location["cells"]] == [HIGHLIGHT_BEST, HIGHLIGHT_BEST, HIGHLIGHT_WORST]


def test_build_comparison_empty(catalogue):
    table = build_comparison([], catalogue)
    assert table["properties"] == []
    assert table["best_overall_property_id"] is None
    assert all(row["cells"] == [] for row in table["rows"])


def test_build_comparison_with_empty_catalogue():
    empty = QuestionCatalogue.from_categories([])
    table = build_comparison([make_entry(1, 70, location=70)], empty)
    assert table["rows"] == []
    assert table["best_overall_property_id"] == 1
