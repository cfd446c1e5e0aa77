"""
Scoring Service - Connects stored records to the scoring engine.

Every API route, export and share import scores through this module so the
numbers always come from the same engine and the current weights.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.config import settings
from nestscore.models.property import Property, UserSettings, USER_SETTINGS_ID
from scoring_engine.modules.catalogue import (
    QuestionCatalogue,
    default_weights,
    get_default_catalogue,
    load_catalogue,
)
from scoring_engine.modules.classification import classify
from scoring_engine.modules.comparison import ScoredEntry
from scoring_engine.modules.completion import completion_percentage
from scoring_engine.modules.gis_utils import (
    coordinates_or_none,
    format_distance,
    great_circle_distance_km,
)
from scoring_engine.modules.score_calculator import PropertyScore, ScoreCalculator

logger = logging.getLogger(__name__)

_calculator: Optional[ScoreCalculator] = None


def get_catalogue() -> QuestionCatalogue:
    return get_calculator().catalogue


def get_calculator() -> ScoreCalculator:
    """Get or create the score calculator for the configured catalogue."""
    global _calculator
    if _calculator is None:
        if settings.catalogue_path:
            logger.info(f"Loading catalogue from {settings.catalogue_path}")
            catalogue = load_catalogue(settings.catalogue_path)
        else:
            catalogue = get_default_catalogue()
        _calculator = ScoreCalculator(catalogue)
    return _calculator


async def get_or_create_settings(db: AsyncSession) -> UserSettings:
    """Load the settings row, creating it with default weights on first use."""
    user_settings = await db.get(UserSettings, USER_SETTINGS_ID)
    if user_settings is None:
        user_settings = UserSettings(
            id=USER_SETTINGS_ID,
            weights=default_weights(get_catalogue()),
            theme="system",
        )
        db.add(user_settings)
        await db.flush()
        logger.info("Created default user settings")
    return user_settings


def score_record(prop: Property, weights: Optional[Dict[str, float]]) -> PropertyScore:
    return get_calculator().score_property(prop.id, prop.answers or {}, weights)


def scored_entry(prop: Property, weights: Optional[Dict[str, float]]) -> ScoredEntry:
    return ScoredEntry(property_id=prop.id, name=prop.name, score=score_record(prop, weights))


def distance_to_work(prop: Property, user_settings: Optional[UserSettings]) -> Optional[Dict[str, Any]]:
    """Distance from the property to the work location, when both are geocoded."""
    if user_settings is None:
        return None
    home = coordinates_or_none(prop.latitude, prop.longitude)
    work = coordinates_or_none(user_settings.work_latitude, user_settings.work_longitude)
    if home is None or work is None:
        return None
    km = great_circle_distance_km(home, work)
    return {"km": round(km, 3), "display": format_distance(km)}


def score_summary(prop: Property, weights: Optional[Dict[str, float]]) -> Dict[str, Any]:
    """Overall score, tier and completion for list views."""
    score = score_record(prop, weights)
    return {
        "overall_score": score.overall_score,
        "classification": classify(score.overall_score).to_dict(),
        "completion": completion_percentage(prop.answers or {}, get_catalogue()),
        "category_scores": [cs.to_dict() for cs in score.category_scores],
    }


def score_breakdown(
    prop: Property,
    user_settings: Optional[UserSettings],
) -> Dict[str, Any]:
    """Full detail-view breakdown: per-category scores, weights and completion."""
    calculator = get_calculator()
    weights = user_settings.weights if user_settings else None
    score = score_record(prop, weights)

    categories = []
    for category_score in score.category_scores:
        category = calculator.catalogue.get_category(category_score.category_id)
        categories.append({
            **category_score.to_dict(),
            "name": category.name if category else category_score.category_id,
            "weight": calculator.effective_weight(category_score.category_id, weights),
            "classification": classify(category_score.score).to_dict(),
        })

    return {
        "property_id": prop.id,
        "overall_score": score.overall_score,
        "classification": classify(score.overall_score).to_dict(),
        "completion": completion_percentage(prop.answers or {}, calculator.catalogue),
        "categories": categories,
        "distance_to_work": distance_to_work(prop, user_settings),
    }
