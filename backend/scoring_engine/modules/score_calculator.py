"""
Score Calculator - Per-category and overall suitability scores for a property
All public scores are integers on a 0-100 scale

Scoring rules:
  - Boolean: True = 100, False = 0
  - Select: the matching option's score; a stale value (no matching option)
    counts as answered but contributes 0
  - Slider: lower is better, linearly inverted across [min, max] and clamped
  - A category score is the average over ANSWERED questions only, so partial
    completion does not drag the score down
  - The overall score is a weighted average over categories that have a
    positive weight AND at least one answer

IMPORTANT: If you change any scoring rules here, exported CSV/JSON scores
change with them. Exports always call this module rather than re-deriving.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .catalogue import (
    Answers,
    Question,
    QuestionCatalogue,
    QuestionType,
    get_default_catalogue,
    is_answered,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100

# Slider bounds when the question does not define them
DEFAULT_SLIDER_MIN = 0
DEFAULT_SLIDER_MAX = 100


@dataclass(frozen=True)
class CategoryScore:
    category_id: str
    score: int
    answered_count: int
    total_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_id": self.category_id,
            "score": self.score,
            "answered_count": self.answered_count,
            "total_count": self.total_count,
        }


@dataclass(frozen=True)
class PropertyScore:
    property_id: int
    overall_score: int
    category_scores: List[CategoryScore] = field(default_factory=list)

    def get_category_score(self, category_id: str) -> Optional[CategoryScore]:
        for category_score in self.category_scores:
            if category_score.category_id == category_id:
                return category_score
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "property_id": self.property_id,
            "overall_score": self.overall_score,
            "category_scores": [cs.to_dict() for cs in self.category_scores],
        }


def clamp_score(value: float) -> float:
    """Clamp into [0, 100]; NaN collapses to 0."""
    if value is None or math.isnan(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, value))


def round_score(value: float) -> int:
    """Round half up (2.5 -> 3), after clamping into [0, 100]."""
    return int(math.floor(clamp_score(value) + 0.5))


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class ScoreCalculator:
    """Calculates category and overall scores from a property's answers."""

    def __init__(self, catalogue: Optional[QuestionCatalogue] = None):
        self.catalogue = catalogue if catalogue is not None else get_default_catalogue()

    def score_question(self, question: Question, answer: Any) -> float:
        """
        Contribution (0-100) of a single answered question.

        The caller is responsible for skipping unanswered questions.
        """
        if question.type == QuestionType.BOOLEAN:
            return MAX_SCORE if answer is True else MIN_SCORE

        if question.type == QuestionType.SELECT:
            option = question.find_option(answer)
            if option is None:
                logger.debug("Stale answer %r for question %s - contributes 0", answer, question.id)
                return MIN_SCORE
            return clamp_score(option.score)

        if question.type == QuestionType.SLIDER:
            return self._score_slider(question, answer)

        return MIN_SCORE

    def _score_slider(self, question: Question, answer: Any) -> float:
        """
        Lower is better: min -> 100, max -> 0, linear in between.

        A degenerate range (max <= min) contributes 0 instead of dividing by zero.
        """
        value = _to_number(answer)
        if value is None:
            logger.debug("Non-numeric slider answer %r for %s - contributes 0", answer, question.id)
            return MIN_SCORE

        low = question.min if question.min is not None else DEFAULT_SLIDER_MIN
        high = question.max if question.max is not None else DEFAULT_SLIDER_MAX
        if high <= low:
            logger.debug("Degenerate slider range [%s, %s] for %s - contributes 0", low, high, question.id)
            return MIN_SCORE

        normalized = 100 - ((value - low) / (high - low)) * 100
        return clamp_score(normalized)

    def score_category(self, category_id: str, answers: Answers) -> CategoryScore:
        """
        Score a single category.

        Unknown category ids return an all-zero CategoryScore rather than raising.
        """
        category = self.catalogue.get_category(category_id)
        if category is None:
            logger.debug("Unknown category %r - returning zero score", category_id)
            return CategoryScore(category_id=category_id, score=0, answered_count=0, total_count=0)

        total = 0.0
        answered_count = 0

        for question in category.questions:
            answer = answers.get(question.id)
            if not is_answered(answer):
                continue
            answered_count += 1
            total += self.score_question(question, answer)

        score = round_score(total / answered_count) if answered_count > 0 else 0

        return CategoryScore(
            category_id=category_id,
            score=score,
            answered_count=answered_count,
            total_count=category.question_count,
        )

    def effective_weight(self, category_id: str, weights: Optional[Mapping[str, float]]) -> float:
        """User weight if set, otherwise the catalogue default. Negative weights count as 0."""
        category = self.catalogue.get_category(category_id)
        default = category.default_weight if category else 0
        weight = (weights or {}).get(category_id)
        if weight is None:
            weight = default
        return max(0, weight)

    def score_overall(self, answers: Answers, weights: Optional[Mapping[str, float]] = None) -> PropertyScore:
        """
        Score every category and combine into a weighted overall score.

        property_id is left as 0; use score_property() when the id is known.
        """
        category_scores: List[CategoryScore] = []
        weighted_sum = 0.0
        total_weight = 0.0

        for category in self.catalogue:
            category_score = self.score_category(category.id, answers)
            category_scores.append(category_score)

            weight = self.effective_weight(category.id, weights)
            if weight > 0 and category_score.answered_count > 0:
                weighted_sum += category_score.score * weight
                total_weight += weight

        overall = round_score(weighted_sum / total_weight) if total_weight > 0 else 0

        return PropertyScore(property_id=0, overall_score=overall, category_scores=category_scores)

    def score_property(
        self,
        property_id: Optional[int],
        answers: Answers,
        weights: Optional[Mapping[str, float]] = None,
    ) -> PropertyScore:
        result = self.score_overall(answers, weights)
        return PropertyScore(
            property_id=property_id or 0,
            overall_score=result.overall_score,
            category_scores=result.category_scores,
        )


# Module-level conveniences bound to the shipped catalogue

def score_category(category_id: str, answers: Answers, catalogue: Optional[QuestionCatalogue] = None) -> CategoryScore:
    return ScoreCalculator(catalogue).score_category(category_id, answers)


def score_overall(
    answers: Answers,
    weights: Optional[Mapping[str, float]] = None,
    catalogue: Optional[QuestionCatalogue] = None,
) -> PropertyScore:
    return ScoreCalculator(catalogue).score_overall(answers, weights)


def score_property(
    property_id: Optional[int],
    answers: Answers,
    weights: Optional[Mapping[str, float]] = None,
    catalogue: Optional[QuestionCatalogue] = None,
) -> PropertyScore:
    return ScoreCalculator(catalogue).score_property(property_id, answers, weights)
