"""
Share API endpoints.

Encode settings or properties into a compact URL-safe string, decode one,
or import one into the local store.
"""

from typing import Any, Dict, List, Literal, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.api.properties import PropertyCreate, apply_postcode_coordinates, merge_answers
from nestscore.api.settings import apply_work_postcode
from nestscore.database import get_db
from nestscore.models.property import Property
from nestscore.services import share_service
from nestscore.services.scoring_service import get_catalogue, get_or_create_settings

logger = logging.getLogger(__name__)

router = APIRouter()


# ----- Pydantic Schemas -----


class ShareEncodeRequest(BaseModel):
    type: Literal["settings", "property", "properties"]
    property_ids: List[int] = []


class ShareEncodeResponse(BaseModel):
    encoded: str
    url: str
    size: int
    too_large_for_qr: bool


class ShareDataRequest(BaseModel):
    data: str


class ShareImportResponse(BaseModel):
    type: str
    property_ids: List[int] = []
    settings_updated: bool = False
    skipped: int = 0


# ----- Helper Functions -----


def decode_or_400(encoded: str) -> Dict[str, Any]:
    payload = share_service.decode_share_data(encoded.strip())
    if payload is None:
        raise HTTPException(status_code=400, detail="Invalid or corrupted share data")
    return payload


async def load_properties(db: AsyncSession, property_ids: List[int]) -> List[Property]:
    unique_ids = list(dict.fromkeys(property_ids))
    result = await db.execute(select(Property).where(Property.id.in_(unique_ids)))
    found = {p.id: p for p in result.scalars().all()}
    missing = [i for i in unique_ids if i not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Property not found: {missing[0]}")
    return [found[i] for i in unique_ids]


def shared_weights(data: Dict[str, Any]) -> Dict[str, int]:
    """Weights from a settings payload, keeping known categories with usable values."""
    weights = data.get("weights")
    if not isinstance(weights, dict):
        return {}
    catalogue = get_catalogue()
    accepted = {}
    for category_id, weight in weights.items():
        if catalogue.get_category(category_id) is None:
            continue
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
            continue
        accepted[category_id] = int(weight)
    return accepted


async def import_properties(db: AsyncSession, records: List[Dict[str, Any]]) -> ShareImportResponse:
    created = []
    skipped = 0
    for record in records:
        try:
            property_data = PropertyCreate.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping shared property: {e.error_count()} validation errors")
            skipped += 1
            continue

        prop = Property(**property_data.model_dump())
        prop.answers = merge_answers({}, property_data.answers)
        if prop.postcode:
            await apply_postcode_coordinates(prop)
        db.add(prop)
        created.append(prop)

    await db.commit()
    for prop in created:
        await db.refresh(prop)
    logger.info(f"Imported {len(created)} shared properties ({skipped} skipped)")
    return ShareImportResponse(
        type="properties",
        property_ids=[p.id for p in created],
        skipped=skipped,
    )


# ----- API Endpoints -----


@router.post("/encode", response_model=ShareEncodeResponse)
async def encode(request: ShareEncodeRequest, db: AsyncSession = Depends(get_db)):
    """
    Build a share string and link.

    - **settings**: current weights and work postcode
    - **property**: exactly one property id
    - **properties**: one or more property ids
    """
    if request.type == "settings":
        user_settings = await get_or_create_settings(db)
        payload = share_service.create_settings_share_data(user_settings)
    elif request.type == "property":
        if len(request.property_ids) != 1:
            raise HTTPException(status_code=422, detail="Sharing a property needs exactly one id")
        properties = await load_properties(db, request.property_ids)
        payload = share_service.create_property_share_data(properties[0])
    else:
        if not request.property_ids:
            raise HTTPException(status_code=422, detail="Sharing properties needs at least one id")
        properties = await load_properties(db, request.property_ids)
        payload = share_service.create_properties_share_data(properties)

    try:
        encoded = share_service.encode_share_data(payload)
    except share_service.ShareDataError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail="Failed to encode share data")

    return ShareEncodeResponse(
        encoded=encoded,
        url=share_service.generate_share_url(encoded),
        size=len(encoded),
        too_large_for_qr=share_service.is_too_large_for_qr(encoded),
    )


@router.post("/decode")
async def decode(request: ShareDataRequest) -> Dict[str, Any]:
    """Decode a share string without importing it."""
    return decode_or_400(request.data)


@router.post("/import", response_model=ShareImportResponse)
async def import_shared(request: ShareDataRequest, db: AsyncSession = Depends(get_db)):
    """
    Import a share string.

    Property payloads create new records; a settings payload merges weights
    and replaces the work postcode.
    """
    payload = decode_or_400(request.data)

    if payload["type"] != "settings":
        response = await import_properties(db, share_service.shared_properties(payload))
        response.type = payload["type"]
        return response

    data = payload["data"]
    user_settings = await get_or_create_settings(db)
    weights = shared_weights(data)
    if weights:
        user_settings.weights = {**(user_settings.weights or {}), **weights}
    if "work_postcode" in data:
        work_postcode: Optional[str] = data["work_postcode"] if isinstance(data["work_postcode"], str) else None
        await apply_work_postcode(user_settings, work_postcode)
    await db.commit()
    logger.info("Imported shared settings")
    return ShareImportResponse(type="settings", settings_updated=True)
