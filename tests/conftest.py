"""Pytest configuration and fixtures."""

import os
import tempfile

import pytest

# Settings are read at import time, so the environment must be set before any
# nestscore module is imported by a test module.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="nestscore-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["POSTCODE_API_URL"] = "https://postcodes.test"
os.environ["SHARE_BASE_URL"] = "https://nestscore.test"
os.environ["LOG_LEVEL"] = "WARNING"

from scoring_engine.modules.catalogue import (  # noqa: E402
    Category,
    Question,
    QuestionCatalogue,
    QuestionOption,
    QuestionType,
    get_default_catalogue,
)


@pytest.fixture
def catalogue():
    """The shipped ten-category catalogue."""
    return get_default_catalogue()


@pytest.fixture
def small_catalogue():
    """Two weighted categories plus a zero-weight one with a slider."""
    tube = Question(
        id="tube_distance",
        label="Tube",
        type=QuestionType.SELECT,
        options=(
            QuestionOption("under_5", "Under 5", 100),
            QuestionOption("5_10", "5-10", 80),
            QuestionOption("over_20", "Over 20", 20),
        ),
        critical=True,
    )
    bus = Question(id="bus_access", label="Bus", type=QuestionType.BOOLEAN)
    lighting = Question(id="street_lighting", label="Lighting", type=QuestionType.BOOLEAN)
    charge = Question(
        id="service_charge", label="Service charge", type=QuestionType.SLIDER, min=0, max=5000
    )
    return QuestionCatalogue.from_categories([
        Category(id="location", name="Location", default_weight=20, questions=(tube, bus)),
        Category(id="safety", name="Safety", default_weight=15, questions=(lighting,)),
        Category(id="legal", name="Legal", default_weight=0, questions=(charge,)),
    ])
