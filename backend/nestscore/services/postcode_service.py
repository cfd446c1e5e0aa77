"""
Postcode Service - UK postcode lookups via postcodes.io.

Every call degrades to an empty result (None / False / []) on network or
HTTP failure; callers treat a failed lookup as "no coordinates".
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from nestscore.config import settings
from scoring_engine.modules.gis_utils import Coordinates, normalize_postcode

logger = logging.getLogger(__name__)


@dataclass
class PostcodeResult:
    """Result of a successful postcode lookup."""
    postcode: str
    latitude: float
    longitude: float
    admin_district: Optional[str] = None
    region: Optional[str] = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(lat=self.latitude, lng=self.longitude)


def _get(path: str) -> Optional[dict]:
    url = f"{settings.postcode_api_url.rstrip('/')}/{path.lstrip('/')}"
    try:
        resp = requests.get(url, timeout=settings.postcode_timeout)
    except requests.RequestException as e:
        logger.warning(f"Postcode API request failed: {e}")
        return None
    try:
        return resp.json()
    except ValueError:
        logger.warning(f"Postcode API returned non-JSON response (HTTP {resp.status_code})")
        return None


def lookup_postcode(postcode: str) -> Optional[PostcodeResult]:
    """Resolve a postcode to coordinates. Returns None if unknown or on failure."""
    clean = normalize_postcode(postcode)
    if not clean:
        return None

    data = _get(f"postcodes/{clean}")
    if not data or data.get('status') != 200 or not data.get('result'):
        logger.info(f"Postcode not found: {clean}")
        return None

    result = data['result']
    if result.get('latitude') is None or result.get('longitude') is None:
        return None

    return PostcodeResult(
        postcode=result.get('postcode', clean),
        latitude=float(result['latitude']),
        longitude=float(result['longitude']),
        admin_district=result.get('admin_district'),
        region=result.get('region'),
    )


def validate_postcode(postcode: str) -> bool:
    clean = normalize_postcode(postcode)
    if not clean:
        return False
    data = _get(f"postcodes/{clean}/validate")
    return bool(data) and data.get('result') is True


def autocomplete_postcode(partial: str) -> List[str]:
    """Postcode suggestions for a partial postcode (needs at least 2 characters)."""
    partial = (partial or '').strip()
    if len(partial) < 2:
        return []
    data = _get(f"postcodes/{partial}/autocomplete")
    if not data or data.get('status') != 200 or not data.get('result'):
        return []
    return list(data['result'])


async def resolve_postcode(postcode: Optional[str]) -> Optional[PostcodeResult]:
    """Non-blocking lookup_postcode for async routes (requests runs in a worker thread)."""
    if not normalize_postcode(postcode):
        return None
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lookup_postcode, postcode)
