"""
User settings API endpoints.

Category weights, work postcode (for commute distances) and theme.
"""

from typing import Dict, Literal, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.database import get_db
from nestscore.models.property import UserSettings
from nestscore.services.postcode_service import resolve_postcode
from nestscore.services.scoring_service import get_catalogue, get_or_create_settings
from scoring_engine.modules.catalogue import default_weights

logger = logging.getLogger(__name__)

router = APIRouter()


# ----- Pydantic Schemas -----


class SettingsUpdate(BaseModel):
    """Partial update; weights are merged into the existing map."""

    weights: Optional[Dict[str, int]] = None
    work_postcode: Optional[str] = None
    theme: Optional[Literal["light", "dark", "system"]] = None


class SettingsResponse(BaseModel):
    weights: Dict[str, int]
    work_postcode: Optional[str] = None
    work_latitude: Optional[float] = None
    work_longitude: Optional[float] = None
    theme: str = "system"


# ----- Helper Functions -----


def effective_weights(user_settings: UserSettings) -> Dict[str, int]:
    """Stored weights over catalogue defaults, covering every category."""
    weights = default_weights(get_catalogue())
    weights.update(user_settings.weights or {})
    return weights


def to_response(user_settings: UserSettings) -> SettingsResponse:
    return SettingsResponse(
        weights=effective_weights(user_settings),
        work_postcode=user_settings.work_postcode,
        work_latitude=user_settings.work_latitude,
        work_longitude=user_settings.work_longitude,
        theme=user_settings.theme or "system",
    )


def validate_weights(weights: Dict[str, int]) -> None:
    catalogue = get_catalogue()
    for category_id, weight in weights.items():
        if catalogue.get_category(category_id) is None:
            raise HTTPException(status_code=422, detail=f"Unknown category: {category_id}")
        if weight < 0:
            raise HTTPException(status_code=422, detail=f"Weight for {category_id} must be >= 0")


async def apply_work_postcode(user_settings: UserSettings, postcode: Optional[str]) -> None:
    """Set the work postcode and its coordinates; empty clears both."""
    if not postcode:
        user_settings.work_postcode = None
        user_settings.work_latitude = None
        user_settings.work_longitude = None
        return

    user_settings.work_postcode = postcode
    result = await resolve_postcode(postcode)
    if result:
        user_settings.work_postcode = result.postcode
        user_settings.work_latitude = result.latitude
        user_settings.work_longitude = result.longitude
    else:
        logger.warning(f"Could not resolve work postcode {postcode!r}")
        user_settings.work_latitude = None
        user_settings.work_longitude = None


# ----- API Endpoints -----


@router.get("/", response_model=SettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    """Current settings, with default weights filled in for unset categories."""
    user_settings = await get_or_create_settings(db)
    return to_response(user_settings)


@router.put("/", response_model=SettingsResponse)
async def update_settings(
    update: SettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update weights, work postcode and/or theme."""
    user_settings = await get_or_create_settings(db)
    update_data = update.model_dump(exclude_unset=True)

    if update.weights is not None:
        validate_weights(update.weights)
        # JSON columns only persist on reassignment
        user_settings.weights = {**(user_settings.weights or {}), **update.weights}

    if "work_postcode" in update_data:
        await apply_work_postcode(user_settings, update.work_postcode)

    if update.theme is not None:
        user_settings.theme = update.theme

    await db.commit()
    await db.refresh(user_settings)
    return to_response(user_settings)


@router.post("/reset-weights", response_model=SettingsResponse)
async def reset_weights(db: AsyncSession = Depends(get_db)):
    """Restore every category weight to its catalogue default."""
    user_settings = await get_or_create_settings(db)
    user_settings.weights = default_weights(get_catalogue())
    await db.commit()
    await db.refresh(user_settings)
    return to_response(user_settings)
