"""
Comparison API endpoint.

Side-by-side comparison of up to four properties: best overall, and per
category the best and worst entries for highlighting.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.database import get_db
from nestscore.models.property import Property
from nestscore.services.scoring_service import get_catalogue, get_or_create_settings, scored_entry
from scoring_engine.modules.comparison import build_comparison

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_COMPARE = 4


# ----- Pydantic Schemas -----


class ComparedProperty(BaseModel):
    property_id: int
    name: str
    overall_score: int


class ComparisonCell(BaseModel):
    property_id: int
    score: int
    highlight: Optional[str] = None  # "best", "worst" or None


class ComparisonRow(BaseModel):
    category_id: str
    category_name: str
    best_property_id: Optional[int] = None
    worst_property_id: Optional[int] = None
    cells: List[ComparisonCell]


class ComparisonResponse(BaseModel):
    properties: List[ComparedProperty]
    best_overall_property_id: Optional[int] = None
    rows: List[ComparisonRow]


# ----- API Endpoints -----


@router.get("/", response_model=ComparisonResponse)
async def compare_properties(
    ids: List[int] = Query(..., description="Property ids, in display order"),
    db: AsyncSession = Depends(get_db),
):
    """
    Compare properties by id.

    Order matters: ties for best overall go to the first id given.
    """
    # Preserve request order, drop repeats
    unique_ids = list(dict.fromkeys(ids))
    if len(unique_ids) > MAX_COMPARE:
        raise HTTPException(status_code=422, detail=f"At most {MAX_COMPARE} properties can be compared")

    result = await db.execute(select(Property).where(Property.id.in_(unique_ids)))
    found = {p.id: p for p in result.scalars().all()}
    missing = [i for i in unique_ids if i not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Property not found: {missing[0]}")

    user_settings = await get_or_create_settings(db)
    entries = [scored_entry(found[i], user_settings.weights) for i in unique_ids]
    return build_comparison(entries, get_catalogue())
