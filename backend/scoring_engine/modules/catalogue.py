"""
Question Catalogue - Immutable, indexed view of the property questionnaire

The catalogue is configuration data: an ordered list of categories, each with an
ordered list of questions. It is loaded once (from configs/categories.json by
default) and never mutated afterwards.

IMPORTANT: If you change category ids or question ids in categories.json,
stored answers keyed by the old ids are silently ignored by the scorer.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE_PATH = Path(__file__).resolve().parent.parent / "configs" / "categories.json"

# Answer values as stored on a property
AnswerValue = Union[str, bool, int, float]
Answers = Mapping[str, Any]


class CatalogueError(ValueError):
    """Raised when catalogue configuration data is structurally invalid."""


class QuestionType(str, Enum):
    """Question input types. `select` is a choice, `slider` is a numeric range."""

    SELECT = "select"
    BOOLEAN = "boolean"
    SLIDER = "slider"


@dataclass(frozen=True)
class QuestionOption:
    value: str
    label: str
    score: float


@dataclass(frozen=True)
class Question:
    """
    A single question in a category.

    `critical` is advisory metadata for the UI (an emphasis marker). It has no
    effect on scoring. Whether it was meant to boost a question's weight is an
    open question; scoring treats all answered questions equally.
    """

    id: str
    label: str
    type: QuestionType
    options: Tuple[QuestionOption, ...] = ()
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    unit: Optional[str] = None
    critical: bool = False

    def find_option(self, value: Any) -> Optional[QuestionOption]:
        """Return the option whose value matches, or None for stale/unknown values."""
        for option in self.options:
            if option.value == value:
                return option
        return None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    default_weight: float
    questions: Tuple[Question, ...] = ()
    icon: Optional[str] = None

    @property
    def question_count(self) -> int:
        return len(self.questions)


def is_answered(value: Any) -> bool:
    """Absent (None) and empty-string answers are unanswered. False and 0 are answers."""
    return value is not None and value != ""


@dataclass(frozen=True)
class QuestionCatalogue:
    """
    Ordered, id-indexed collection of categories and questions.

    Indexes are built and the structure validated on construction;
    CatalogueError is raised for invalid configuration.
    """

    categories: Tuple[Category, ...]
    _category_index: Mapping[str, Category] = field(
        init=False, repr=False, compare=False, default=None
    )
    _question_index: Mapping[str, Tuple[Category, Question]] = field(
        init=False, repr=False, compare=False, default=None
    )

    def __post_init__(self):
        categories = tuple(self.categories)
        category_index: Dict[str, Category] = {}
        question_index: Dict[str, Tuple[Category, Question]] = {}

        for category in categories:
            if category.id in category_index:
                raise CatalogueError(f"Duplicate category id: {category.id!r}")
            category_index[category.id] = category

            for question in category.questions:
                if question.id in question_index:
                    raise CatalogueError(f"Duplicate question id: {question.id!r}")
                question_index[question.id] = (category, question)

                if question.type == QuestionType.SELECT:
                    if not question.options:
                        raise CatalogueError(f"Select question {question.id!r} has no options")
                    values = [o.value for o in question.options]
                    if len(values) != len(set(values)):
                        raise CatalogueError(
                            f"Duplicate option values in question {question.id!r}"
                        )

        # frozen dataclass: indexes are set once here and never again
        object.__setattr__(self, "categories", categories)
        object.__setattr__(self, "_category_index", MappingProxyType(category_index))
        object.__setattr__(self, "_question_index", MappingProxyType(question_index))

    @classmethod
    def from_categories(cls, categories: Iterable[Category]) -> "QuestionCatalogue":
        return cls(categories=tuple(categories))

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._category_index.get(category_id)

    def get_question(self, question_id: str) -> Optional[Question]:
        entry = self._question_index.get(question_id)
        return entry[1] if entry else None

    def category_for_question(self, question_id: str) -> Optional[Category]:
        entry = self._question_index.get(question_id)
        return entry[0] if entry else None

    @property
    def category_ids(self) -> List[str]:
        return [c.id for c in self.categories]

    @property
    def total_questions(self) -> int:
        return len(self._question_index)

    def weighted_categories(self) -> List[Category]:
        """Categories with a non-zero default weight, in catalogue order."""
        return [c for c in self.categories if c.default_weight > 0]

    def __iter__(self):
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form, matching the categories.json layout."""
        return {
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "icon": c.icon,
                    "default_weight": c.default_weight,
                    "questions": [_question_to_dict(q) for q in c.questions],
                }
                for c in self.categories
            ]
        }


def _question_to_dict(question: Question) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": question.id,
        "label": question.label,
        "type": question.type.value,
        "critical": question.critical,
    }
    if question.options:
        data["options"] = [
            {"value": o.value, "label": o.label, "score": o.score} for o in question.options
        ]
    for key in ("min", "max", "step", "unit"):
        value = getattr(question, key)
        if value is not None:
            data[key] = value
    return data


def _parse_question(raw: Dict[str, Any]) -> Question:
    try:
        question_type = QuestionType(raw["type"])
    except ValueError:
        raise CatalogueError(f"Unknown question type {raw.get('type')!r} for {raw.get('id')!r}")

    options = tuple(
        QuestionOption(value=str(o["value"]), label=o.get("label", str(o["value"])), score=o["score"])
        for o in raw.get("options") or []
    )
    return Question(
        id=raw["id"],
        label=raw.get("label", raw["id"]),
        type=question_type,
        options=options,
        min=raw.get("min"),
        max=raw.get("max"),
        step=raw.get("step"),
        unit=raw.get("unit"),
        critical=bool(raw.get("critical", False)),
    )


def parse_catalogue(data: Dict[str, Any]) -> QuestionCatalogue:
    """Build a catalogue from the categories.json structure."""
    categories = []
    for raw in data.get("categories", []):
        try:
            categories.append(
                Category(
                    id=raw["id"],
                    name=raw.get("name", raw["id"]),
                    icon=raw.get("icon"),
                    default_weight=raw.get("default_weight", 0),
                    questions=tuple(_parse_question(q) for q in raw.get("questions", [])),
                )
            )
        except KeyError as e:
            raise CatalogueError(f"Missing required catalogue field: {e}") from e
    return QuestionCatalogue.from_categories(categories)


def load_catalogue(path: Optional[Union[str, Path]] = None) -> QuestionCatalogue:
    """Load and index a catalogue JSON file (defaults to the shipped catalogue)."""
    catalogue_path = Path(path) if path else DEFAULT_CATALOGUE_PATH
    with open(catalogue_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    catalogue = parse_catalogue(data)
    logger.debug(
        "Loaded catalogue %s: %d categories, %d questions",
        catalogue_path,
        len(catalogue),
        catalogue.total_questions,
    )
    return catalogue


@lru_cache()
def get_default_catalogue() -> QuestionCatalogue:
    """Get cached instance of the shipped catalogue."""
    return load_catalogue()


def default_weights(catalogue: Optional[QuestionCatalogue] = None) -> Dict[str, float]:
    """Category id -> default weight, in catalogue order."""
    catalogue = catalogue if catalogue is not None else get_default_catalogue()
    return {c.id: c.default_weight for c in catalogue}
