"""
Question catalogue API endpoint.

Read-only: the catalogue is configuration data loaded at startup.
"""

from typing import Any, Dict

from fastapi import APIRouter

from nestscore.services.scoring_service import get_catalogue

router = APIRouter()


@router.get("/")
async def get_question_catalogue() -> Dict[str, Any]:
    """All categories with their questions, options and default weights."""
    catalogue = get_catalogue()
    return {
        **catalogue.to_dict(),
        "total_questions": catalogue.total_questions,
    }
