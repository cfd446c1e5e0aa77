"""
Property CRUD API endpoints.

Provides Create, Read, Update, Delete operations for properties, incremental
answer updates, and the score breakdown for a single property. Scores are
computed on every read from the stored answers and the current weights.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.database import get_db
from nestscore.models.property import Property
from nestscore.services.postcode_service import resolve_postcode
from nestscore.services.scoring_service import (
    get_or_create_settings,
    score_breakdown,
    score_summary,
)
from scoring_engine.modules.catalogue import is_answered

logger = logging.getLogger(__name__)

router = APIRouter()


# ----- Pydantic Schemas -----


class ClassificationSchema(BaseModel):
    tier: str
    label: str


class CategoryScoreSchema(BaseModel):
    category_id: str
    score: int
    answered_count: int
    total_count: int


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    name: str
    address: str = ""
    postcode: str = ""
    price: Optional[float] = None
    agent: Optional[str] = None
    viewing_date: Optional[str] = None
    listing_url: Optional[str] = None
    answers: Dict[str, Any] = {}
    notes: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PropertyUpdate(BaseModel):
    """Schema for updating a property. Use the answers endpoint for answers."""

    name: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    price: Optional[float] = None
    agent: Optional[str] = None
    viewing_date: Optional[str] = None
    listing_url: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class AnswersUpdate(BaseModel):
    """Answers to merge; a null or empty-string value removes the answer."""

    answers: Dict[str, Any]


class PropertyResponse(BaseModel):
    """Schema for property response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str = ""
    postcode: str = ""
    price: Optional[float] = None
    agent: Optional[str] = None
    viewing_date: Optional[str] = None
    listing_url: Optional[str] = None
    answers: Dict[str, Any] = {}
    notes: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class ScoredPropertyResponse(PropertyResponse):
    """Property with its derived scores."""

    overall_score: int
    classification: ClassificationSchema
    completion: int
    category_scores: List[CategoryScoreSchema]


class CategoryBreakdownSchema(CategoryScoreSchema):
    name: str
    weight: float
    classification: ClassificationSchema


class DistanceSchema(BaseModel):
    km: float
    display: str


class ScoreBreakdownResponse(BaseModel):
    property_id: int
    overall_score: int
    classification: ClassificationSchema
    completion: int
    categories: List[CategoryBreakdownSchema]
    distance_to_work: Optional[DistanceSchema] = None


# ----- Helper Functions -----


async def get_property_or_404(db: AsyncSession, property_id: int) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id))
    prop = result.scalar_one_or_none()
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


def to_scored_response(prop: Property, weights: Optional[Dict[str, float]]) -> ScoredPropertyResponse:
    base = PropertyResponse.model_validate(prop).model_dump()
    return ScoredPropertyResponse(**base, **score_summary(prop, weights))


def merge_answers(current: Optional[Dict[str, Any]], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new answers dict with updates applied; unanswered values remove keys."""
    merged = dict(current or {})
    for question_id, value in updates.items():
        if is_answered(value):
            merged[question_id] = value
        else:
            merged.pop(question_id, None)
    return merged


async def apply_postcode_coordinates(prop: Property) -> None:
    """Fill latitude/longitude from the postcode; a failed lookup clears them."""
    result = await resolve_postcode(prop.postcode)
    if result:
        prop.latitude = result.latitude
        prop.longitude = result.longitude
    else:
        prop.latitude = None
        prop.longitude = None


# ----- API Endpoints -----


@router.get("/", response_model=List[ScoredPropertyResponse])
async def list_properties(
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """
    List properties with their scores.

    - **search**: Case-insensitive match on name, postcode or address
    - **skip**: Number of records to skip (pagination)
    - **limit**: Maximum number of records to return
    """
    query = select(Property)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            Property.name.ilike(pattern),
            Property.postcode.ilike(pattern),
            Property.address.ilike(pattern),
        ))
    query = query.order_by(Property.created_at.desc(), Property.id.desc()).offset(skip).limit(limit)

    result = await db.execute(query)
    properties = result.scalars().all()
    user_settings = await get_or_create_settings(db)
    return [to_scored_response(p, user_settings.weights) for p in properties]


@router.post("/", response_model=ScoredPropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new property.

    If a postcode is given without coordinates, they are looked up.
    """
    prop = Property(**property_data.model_dump())
    prop.answers = merge_answers({}, property_data.answers)

    if prop.postcode and (prop.latitude is None or prop.longitude is None):
        await apply_postcode_coordinates(prop)

    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    logger.info(f"Created property {prop.id}: {prop.name}")

    user_settings = await get_or_create_settings(db)
    return to_scored_response(prop, user_settings.weights)


@router.get("/{property_id}", response_model=ScoredPropertyResponse)
async def get_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a single property by ID."""
    prop = await get_property_or_404(db, property_id)
    user_settings = await get_or_create_settings(db)
    return to_scored_response(prop, user_settings.weights)


@router.put("/{property_id}", response_model=ScoredPropertyResponse)
async def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a property's basic information.

    Use PATCH /api/properties/{id}/answers for answers.
    """
    prop = await get_property_or_404(db, property_id)

    update_data = property_data.model_dump(exclude_unset=True)
    postcode_changed = "postcode" in update_data and update_data["postcode"] != prop.postcode
    for field, value in update_data.items():
        setattr(prop, field, value)

    coordinates_given = "latitude" in update_data or "longitude" in update_data
    if postcode_changed and not coordinates_given:
        await apply_postcode_coordinates(prop)

    await db.commit()
    await db.refresh(prop)

    user_settings = await get_or_create_settings(db)
    return to_scored_response(prop, user_settings.weights)


@router.patch("/{property_id}/answers", response_model=ScoredPropertyResponse)
async def update_answers(
    property_id: int,
    update: AnswersUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Merge answer updates into a property's answers."""
    prop = await get_property_or_404(db, property_id)
    # JSON columns only persist on reassignment
    prop.answers = merge_answers(prop.answers, update.answers)
    await db.commit()
    await db.refresh(prop)

    user_settings = await get_or_create_settings(db)
    return to_scored_response(prop, user_settings.weights)


@router.get("/{property_id}/score", response_model=ScoreBreakdownResponse)
async def get_property_score(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Full score breakdown with per-category completion and distance to work."""
    prop = await get_property_or_404(db, property_id)
    user_settings = await get_or_create_settings(db)
    return score_breakdown(prop, user_settings)


@router.delete("/{property_id}", status_code=204)
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a property."""
    prop = await get_property_or_404(db, property_id)
    await db.delete(prop)
    await db.commit()
    return None
