"""
Postcode lookup API endpoints (proxy to postcodes.io).
"""

from typing import List, Optional
import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from nestscore.services import postcode_service

logger = logging.getLogger(__name__)

router = APIRouter()


class PostcodeResponse(BaseModel):
    postcode: str
    latitude: float
    longitude: float
    admin_district: Optional[str] = None
    region: Optional[str] = None


@router.get("/{postcode}/validate")
async def validate(postcode: str) -> dict:
    valid = await asyncio.get_running_loop().run_in_executor(
        None, postcode_service.validate_postcode, postcode
    )
    return {"postcode": postcode, "valid": valid}


@router.get("/{partial}/autocomplete", response_model=List[str])
async def autocomplete(partial: str):
    return await asyncio.get_running_loop().run_in_executor(
        None, postcode_service.autocomplete_postcode, partial
    )


@router.get("/{postcode}", response_model=PostcodeResponse)
async def lookup(postcode: str):
    """Resolve a postcode to coordinates; 404 if unknown or the lookup failed."""
    result = await postcode_service.resolve_postcode(postcode)
    if result is None:
        raise HTTPException(status_code=404, detail="Postcode not found")
    return PostcodeResponse(
        postcode=result.postcode,
        latitude=result.latitude,
        longitude=result.longitude,
        admin_district=result.admin_district,
        region=result.region,
    )
