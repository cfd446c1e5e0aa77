"""
Share Service - Compact, URL-safe share payloads.

A payload {"type", "version", "data"} is JSON encoded, zlib-deflated and
URL-safe base64 encoded with the padding stripped. Types:
  settings    {"weights": {...}, "work_postcode": "..."}
  property    a single property (no id, no scores)
  properties  {"properties": [...]}
"""

import base64
import json
import logging
import zlib
from typing import Any, Dict, Iterable, Optional

from nestscore.config import settings
from nestscore.models.property import Property, UserSettings

logger = logging.getLogger(__name__)

SHARE_VERSION = 1
SHARE_TYPES = ("settings", "property", "properties")

# URLs much longer than this stop fitting in a scannable QR code
QR_MAX_ENCODED_LENGTH = 2000


class ShareDataError(ValueError):
    """Raised when a share payload cannot be built."""


def encode_share_data(payload: Dict[str, Any]) -> str:
    try:
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ShareDataError(f"Failed to encode share data: {e}") from e
    compressed = zlib.compress(raw)
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def decode_share_data(encoded: str) -> Optional[Dict[str, Any]]:
    """Inverse of encode_share_data. Returns None for anything undecodable."""
    try:
        padded = encoded + "=" * (-len(encoded) % 4)
        compressed = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(zlib.decompress(compressed).decode("utf-8"))
    except (ValueError, zlib.error, UnicodeError) as e:
        logger.warning(f"Failed to decode share data: {e}")
        return None

    if not isinstance(data, dict) or data.get("type") not in SHARE_TYPES:
        logger.warning("Share data has an unknown or missing type")
        return None
    if not isinstance(data.get("data"), dict):
        logger.warning("Share data has no data section")
        return None
    version = data.get("version")
    if isinstance(version, (int, float)) and version > SHARE_VERSION:
        logger.warning("Share data version is newer than supported")
    return data


def _property_share_data(prop: Property) -> Dict[str, Any]:
    return {
        "name": prop.name,
        "postcode": prop.postcode or "",
        "address": prop.address or "",
        "price": prop.price,
        "agent": prop.agent,
        "listing_url": prop.listing_url,
        "answers": prop.answers or {},
        "notes": prop.notes or "",
    }


def create_settings_share_data(user_settings: UserSettings) -> Dict[str, Any]:
    return {
        "type": "settings",
        "version": SHARE_VERSION,
        "data": {
            "weights": dict(user_settings.weights or {}),
            "work_postcode": user_settings.work_postcode,
        },
    }


def create_property_share_data(prop: Property) -> Dict[str, Any]:
    return {"type": "property", "version": SHARE_VERSION, "data": _property_share_data(prop)}


def create_properties_share_data(properties: Iterable[Property]) -> Dict[str, Any]:
    return {
        "type": "properties",
        "version": SHARE_VERSION,
        "data": {"properties": [_property_share_data(p) for p in properties]},
    }


def generate_share_url(encoded: str) -> str:
    return f"{settings.share_base_url.rstrip('/')}/share?data={encoded}"


def is_too_large_for_qr(encoded: str) -> bool:
    return len(encoded) > QR_MAX_ENCODED_LENGTH


def shared_properties(payload: Dict[str, Any]) -> list:
    """Property records carried by a property/properties payload."""
    if payload["type"] == "property":
        return [payload["data"]]
    if payload["type"] == "properties":
        return [p for p in payload["data"].get("properties") or [] if isinstance(p, dict)]
    return []
