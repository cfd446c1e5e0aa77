"""
NestScore scoring engine.

Pure, synchronous functions mapping (answers, weights, catalogue) to
0-100 suitability scores, plus ranking, classification and completion helpers.
"""

from .modules.catalogue import (
    Category,
    CatalogueError,
    Question,
    QuestionCatalogue,
    QuestionOption,
    QuestionType,
    default_weights,
    get_default_catalogue,
    is_answered,
    load_catalogue,
)
from .modules.classification import ScoreClassification, ScoreTier, classify
from .modules.comparison import (
    ScoredEntry,
    best_for_category,
    best_overall,
    build_comparison,
    worst_for_category,
)
from .modules.completion import category_completion, completion_percentage
from .modules.gis_utils import Coordinates, format_distance, great_circle_distance_km
from .modules.score_calculator import (
    CategoryScore,
    PropertyScore,
    ScoreCalculator,
    score_category,
    score_overall,
    score_property,
)

__all__ = [
    "Category",
    "CatalogueError",
    "CategoryScore",
    "Coordinates",
    "PropertyScore",
    "Question",
    "QuestionCatalogue",
    "QuestionOption",
    "QuestionType",
    "ScoreCalculator",
    "ScoreClassification",
    "ScoreTier",
    "ScoredEntry",
    "best_for_category",
    "best_overall",
    "build_comparison",
    "category_completion",
    "classify",
    "completion_percentage",
    "default_weights",
    "format_distance",
    "get_default_catalogue",
    "great_circle_distance_km",
    "is_answered",
    "load_catalogue",
    "score_category",
    "score_overall",
    "score_property",
    "worst_for_category",
]
