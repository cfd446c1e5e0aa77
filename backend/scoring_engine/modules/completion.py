"""
Completion Tracking - How much of the questionnaire has been answered

Counts questions from the catalogue, not keys in the answers map, so stale
answers for removed questions never inflate completion. Zero-weight
categories still count toward the total.
"""

from typing import Optional, Tuple

from .catalogue import Answers, QuestionCatalogue, get_default_catalogue, is_answered
from .score_calculator import round_score


def category_completion(
    category_id: str,
    answers: Answers,
    catalogue: Optional[QuestionCatalogue] = None,
) -> Tuple[int, int]:
    """Return (answered_count, total_count) for one category; (0, 0) if unknown."""
    catalogue = catalogue if catalogue is not None else get_default_catalogue()
    category = catalogue.get_category(category_id)
    if category is None:
        return 0, 0
    answered = sum(1 for q in category.questions if is_answered(answers.get(q.id)))
    return answered, category.question_count


def completion_percentage(answers: Answers, catalogue: Optional[QuestionCatalogue] = None) -> int:
    """Percentage (0-100) of all catalogue questions that have an answer."""
    catalogue = catalogue if catalogue is not None else get_default_catalogue()
    answered = 0
    total = 0
    for category in catalogue:
        category_answered, category_total = category_completion(category.id, answers, catalogue)
        answered += category_answered
        total += category_total
    if total == 0:
        return 0
    return round_score(100 * answered / total)
