"""Tests for questionnaire completion tracking."""

from scoring_engine.modules.catalogue import QuestionCatalogue
from scoring_engine.modules.completion import category_completion, completion_percentage


def test_shipped_catalogue_has_42_questions(catalogue):
    assert catalogue.total_questions == 42


def test_empty_answers_are_zero_percent(catalogue):
    assert completion_percentage({}, catalogue) == 0


def test_all_answered_is_one_hundred_percent(catalogue):
    answers = {}
    for category in catalogue:
        for question in category.questions:
            answers[question.id] = question.options[0].value if question.options else True
    assert completion_percentage(answers, catalogue) == 100


def test_percentage_is_rounded(catalogue):
    # 1 / 42 = 2.38%
    assert completion_percentage({"tube_distance": "5_10"}, catalogue) == 2
    # 21 / 42 = 50%
    answers = {}
    for category in catalogue:
        for question in category.questions:
            if len(answers) < 21:
                answers[question.id] = False
    assert completion_percentage(answers, catalogue) == 50


def test_zero_weight_category_counts(catalogue):
    answers = {"lease_length": "freehold", "service_charge": 0, "ground_rent": 0, "council_tax_band": "c"}
    # 4 / 42 = 9.52%
    assert completion_percentage(answers, catalogue) == 10


def test_unanswered_values_do_not_count(catalogue):
    assert completion_percentage({"tube_distance": "", "bus_access": None}, catalogue) == 0
    assert completion_percentage({"bus_access": False, "service_charge": 0}, catalogue) == 5


def test_stale_keys_do_not_inflate_completion(catalogue):
    assert completion_percentage({"helipad": True, "moat": "deep"}, catalogue) == 0


def test_category_completion(catalogue):
    answers = {"tube_distance": "5_10", "bus_access": False, "parking": ""}
    assert category_completion("location", answers, catalogue) == (2, 5)
    assert category_completion("safety", answers, catalogue) == (0, 5)


def test_category_completion_unknown_category(catalogue):
    assert category_completion("spaceport", {"tube_distance": "5_10"}, catalogue) == (0, 0)


def test_defaults_to_shipped_catalogue():
    assert category_completion("internet", {"fibre_available": True}) == (1, 3)


def test_empty_catalogue_is_zero_percent():
    empty = QuestionCatalogue.from_categories([])
    assert completion_percentage({"tube_distance": "5_10"}, empty) == 0
    assert category_completion("location", {"tube_distance": "5_10"}, empty) == (0, 0)
