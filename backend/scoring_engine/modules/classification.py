"""
Score Classification - Maps a 0-100 score to a qualitative tier

Thresholds (inclusive lower bound):
  >= 80  Excellent
  >= 60  Good
  >= 40  Fair
  <  40  Poor

The tier is a rendering-neutral id; callers map it to a colour palette.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ScoreTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


TIER_LABELS: Dict[ScoreTier, str] = {
    ScoreTier.EXCELLENT: "Excellent",
    ScoreTier.GOOD: "Good",
    ScoreTier.FAIR: "Fair",
    ScoreTier.POOR: "Poor",
}

# Hex fills used by the Excel export
TIER_COLORS: Dict[ScoreTier, str] = {
    ScoreTier.EXCELLENT: "22C55E",
    ScoreTier.GOOD: "84CC16",
    ScoreTier.FAIR: "F59E0B",
    ScoreTier.POOR: "EF4444",
}

SCORE_TIERS = [
    (80, ScoreTier.EXCELLENT),
    (60, ScoreTier.GOOD),
    (40, ScoreTier.FAIR),
]


@dataclass(frozen=True)
class ScoreClassification:
    tier: ScoreTier
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"tier": self.tier.value, "label": self.label}


def classify(score: float) -> ScoreClassification:
    """Classify any number; values outside 0-100 fall into the end tiers."""
    for threshold, tier in SCORE_TIERS:
        if score >= threshold:
            return ScoreClassification(tier=tier, label=TIER_LABELS[tier])
    return ScoreClassification(tier=ScoreTier.POOR, label=TIER_LABELS[ScoreTier.POOR])


def score_label(score: float) -> str:
    return classify(score).label
