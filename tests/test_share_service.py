"""Tests for share payload encoding and decoding."""

import base64
import json
import logging
import secrets
import zlib

from nestscore.models.property import Property, UserSettings
from nestscore.services.share_service import (
    QR_MAX_ENCODED_LENGTH,
    SHARE_VERSION,
    create_properties_share_data,
    create_property_share_data,
    create_settings_share_data,
    decode_share_data,
    encode_share_data,
    generate_share_url,
    is_too_large_for_qr,
    shared_properties,
)


def raw_encode(obj) -> str:
    compressed = zlib.compress(json.dumps(obj).encode("utf-8"))
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def make_property(**overrides):
    fields = dict(
        id=3,
        name="Flat 2, Café Court",
        address="12 High Street",
        postcode="E8 1AB",
        price=425000.0,
        agent="Foxtons",
        listing_url="https://example.com/listing/3",
        answers={"tube_distance": "5_10", "bus_access": True},
        notes="Viewed on a rainy day",
    )
    fields.update(overrides)
    return Property(**fields)


def test_encoded_form_is_url_safe_without_padding():
    encoded = encode_share_data(create_property_share_data(make_property()))
    assert "=" not in encoded
    assert "+" not in encoded and "/" not in encoded


def test_property_payload_survives_encoding():
    payload = create_property_share_data(make_property())
    decoded = decode_share_data(encode_share_data(payload))

    assert decoded["type"] == "property"
    assert decoded["version"] == SHARE_VERSION
    assert decoded["data"]["name"] == "Flat 2, Café Court"
    assert decoded["data"]["answers"] == {"tube_distance": "5_10", "bus_access": True}
    assert "id" not in decoded["data"]


def test_settings_payload():
    user_settings = UserSettings(weights={"location": 30, "legal": 5}, work_postcode="EC2A 4NE")
    payload = create_settings_share_data(user_settings)
    assert payload == {
        "type": "settings",
        "version": SHARE_VERSION,
        "data": {"weights": {"location": 30, "legal": 5}, "work_postcode": "EC2A 4NE"},
    }


def test_properties_payload_keeps_order():
    payload = create_properties_share_data([make_property(name="A"), make_property(name="B")])
    assert [p["name"] for p in payload["data"]["properties"]] == ["A", "B"]
    assert [p["name"] for p in shared_properties(payload)] == ["A", "B"]


def test_shared_properties_for_single_property_and_settings():
    payload = create_property_share_data(make_property(name="Solo"))
    assert [p["name"] for p in shared_properties(payload)] == ["Solo"]
    assert shared_properties({"type": "settings", "version": 1, "data": {}}) == []


def test_decode_rejects_garbage():
    assert decode_share_data("not base64 at all!!") is None
    assert decode_share_data(base64.urlsafe_b64encode(b"plain text").decode("ascii")) is None
    assert decode_share_data("") is None


def test_decode_rejects_unknown_type_and_missing_data():
    assert decode_share_data(raw_encode({"type": "spaceship", "version": 1, "data": {}})) is None
    assert decode_share_data(raw_encode({"type": "settings", "version": 1})) is None
    assert decode_share_data(raw_encode(["settings"])) is None


def test_decode_accepts_newer_version_with_warning(caplog):
    encoded = raw_encode({"type": "settings", "version": SHARE_VERSION + 1, "data": {"weights": {}}})
    with caplog.at_level(logging.WARNING, logger="nestscore.services.share_service"):
        decoded = decode_share_data(encoded)
    assert decoded is not None
    assert "newer" in caplog.text


def test_decode_logs_failures(caplog):
    with caplog.at_level(logging.WARNING, logger="nestscore.services.share_service"):
        assert decode_share_data("%%%") is None
    assert "Failed to decode share data" in caplog.text


def test_share_url():
    assert generate_share_url("abc123") == "https://nestscore.test/share?data=abc123"


def test_qr_size_limit():
    small = encode_share_data(create_property_share_data(make_property()))
    assert not is_too_large_for_qr(small)

    large = encode_share_data(create_property_share_data(make_property(notes=secrets.token_hex(4000))))
    assert len(large) > QR_MAX_ENCODED_LENGTH
    assert is_too_large_for_qr(large)
